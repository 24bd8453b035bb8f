"""Tests for V1 composition and the create_bside_image entry point."""

import numpy as np
import pytest

from bside.data import Bitmap, ColorGroup, Coordinate, Triangle, pack_color
from bside.errors import ParameterError, RenderCancelled, ResourceLimitError
from bside.scheduler import RunControl
from bside.v1 import create_bside_image, fill_triangle, order_groups

from conftest import BLUE, CLEAR, RED, bitmap_from_rows

RED_PACKED = pack_color(*RED)
BLUE_PACKED = pack_color(*BLUE)


def _group(size, color=RED_PACKED):
    return ColorGroup(color=color, coordinates=[Coordinate(i, 0) for i in range(size)])


class TestOrderGroups:
    """Test cases for order_groups."""

    def test_largest_first_by_default(self):
        small, large = _group(1), _group(3)
        assert order_groups([small, large]) == [large, small]

    def test_smallest_first_with_positive_minutia(self):
        small, large = _group(1), _group(3)
        assert order_groups([large, small], minutia=1) == [small, large]

    def test_ties_keep_creation_order(self):
        first, second = _group(2), _group(2, BLUE_PACKED)
        assert order_groups([first, second]) == [first, second]
        assert order_groups([first, second], minutia=1) == [first, second]


class TestFillTriangle:
    """Test cases for fill_triangle."""

    def test_below_fills_lower_wedge(self):
        canvas = Bitmap.blank(4, 4)
        fill_triangle(canvas, Triangle(Coordinate(0, 3), Coordinate(3, 0), "below", RED_PACKED))
        filled = canvas.data[..., 3] > 0
        assert filled.sum() == 10
        assert filled[3, 0] and filled[0, 3] and filled[3, 3]
        assert not filled[0, 0]

    def test_above_fills_upper_wedge(self):
        canvas = Bitmap.blank(4, 4)
        fill_triangle(canvas, Triangle(Coordinate(0, 3), Coordinate(3, 0), "above", RED_PACKED))
        filled = canvas.data[..., 3] > 0
        assert filled.sum() == 10
        assert filled[0, 0] and filled[3, 0] and filled[0, 3]
        assert not filled[3, 3]

    def test_vertical_triangle_is_skipped(self):
        canvas = Bitmap.blank(4, 4)
        fill_triangle(canvas, Triangle(Coordinate(1, 0), Coordinate(1, 3), "below", RED_PACKED))
        assert not canvas.data.any()

    def test_triangle_is_clipped_to_canvas(self):
        canvas = Bitmap.blank(2, 2)
        fill_triangle(canvas, Triangle(Coordinate(-2, 5), Coordinate(4, -1), "above", RED_PACKED))
        assert canvas.get_pixel(1, 1) == RED_PACKED


class TestCreateBsideImage:
    """Test cases for create_bside_image."""

    @pytest.mark.parametrize("scale", [1, 2, 3, 5])
    def test_output_is_scale_times_larger(self, scale):
        source = bitmap_from_rows([[RED, BLUE, CLEAR], [BLUE, CLEAR, RED]])
        output = create_bside_image(source, scale=scale)
        assert (output.width, output.height) == (3 * scale, 2 * scale)

    def test_uniform_image_stays_uniform(self):
        source = Bitmap.blank(8, 8, RED_PACKED)
        output = create_bside_image(source, scale=2)
        assert (output.width, output.height) == (16, 16)
        assert np.array_equal(output.data, np.broadcast_to(source.data[0, 0], (16, 16, 4)))

    def test_transparent_image_stays_transparent(self):
        output = create_bside_image(Bitmap.blank(4, 4), scale=2)
        assert (output.width, output.height) == (8, 8)
        assert not output.data.any()

    def test_single_row_is_two_solid_blocks(self, red_blue_pair):
        output = create_bside_image(red_blue_pair, scale=4)
        assert (output.width, output.height) == (8, 4)
        assert np.all(output.data[:, :4] == RED)
        assert np.all(output.data[:, 4:] == BLUE)

    def test_staircase_becomes_a_diagonal(self, staircase):
        output = create_bside_image(staircase, scale=4)
        for x, y in [(3, 1), (3, 2), (3, 3), (2, 2), (2, 3), (1, 3)]:
            assert output.get_pixel(x, y) == BLUE_PACKED, (x, y)
        for x, y in [(0, 0), (3, 0), (1, 2), (0, 3), (2, 1)]:
            assert output.get_pixel(x, y) == RED_PACKED, (x, y)
        assert np.all(output.data[:, 4:] == BLUE)
        assert np.all(output.data[4:, :] == BLUE)

    def test_source_is_not_modified(self, staircase):
        before = staircase.data.copy()
        create_bside_image(staircase, scale=4)
        assert np.array_equal(staircase.data, before)

    def test_deterministic(self):
        rng = np.random.default_rng(3)
        palette = np.array([RED, BLUE, CLEAR], dtype=np.uint8)
        source = Bitmap(palette[rng.integers(0, 3, size=(6, 6))])
        first = create_bside_image(source, scale=3, pixel_reach=2)
        second = create_bside_image(source, scale=3, pixel_reach=2)
        assert np.array_equal(first.data, second.data)

    def test_edge_image_is_accepted(self, staircase):
        from bside.edges import detect_edges

        output = create_bside_image(staircase, scale=2, edge_image=detect_edges(staircase))
        assert (output.width, output.height) == (4, 4)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"scale": 0},
            {"scale": 1.5},
            {"pixel_reach": 0},
            {"threshold": -1.0},
            {"minutia": 0},
        ],
    )
    def test_invalid_parameters(self, staircase, kwargs):
        with pytest.raises(ParameterError):
            create_bside_image(staircase, **kwargs)

    def test_empty_source(self):
        with pytest.raises(ParameterError):
            create_bside_image(Bitmap(np.zeros((0, 0, 4), dtype=np.uint8)))

    def test_pixel_limit(self):
        with pytest.raises(ResourceLimitError):
            create_bside_image(Bitmap.blank(10, 10), max_pixels=99)

    def test_stopped_control_cancels(self, staircase):
        control = RunControl()
        control.stop()
        with pytest.raises(RenderCancelled):
            create_bside_image(staircase, control=control)
