"""Tests for stencil edge detection and the edge assist."""

import pytest

from bside.config import PLUS_STENCIL
from bside.data import Bitmap, pack_color
from bside.edges import NO_EDGE_ASSIST, EdgeAssist, detect_edges, validate_stencil
from bside.errors import ParameterError

from conftest import RED, bitmap_from_rows

EDGE = 0xFFFFFFFF
BACKGROUND = 0x000000FF


class TestValidateStencil:
    """Test cases for validate_stencil."""

    def test_plus_stencil_offsets(self):
        assert sorted(validate_stencil(PLUS_STENCIL)) == [(-1, 0), (0, -1), (0, 1), (1, 0)]

    def test_center_cell_is_ignored(self):
        assert validate_stencil([[0, 0, 0], [0, 1, 1], [0, 0, 0]]) == [(1, 0)]

    @pytest.mark.parametrize(
        "stencil",
        [
            [[0, 1, 0], [1, 0, 1]],
            [[0, 1], [1, 0], [0, 1]],
            [[0, 0, 0], [0, 1, 0], [0, 0, 0]],
        ],
    )
    def test_invalid_stencils(self, stencil):
        with pytest.raises(ParameterError):
            validate_stencil(stencil)


class TestDetectEdges:
    """Test cases for detect_edges."""

    def test_output_matches_source_size(self):
        edges = detect_edges(Bitmap.blank(5, 3, pack_color(*RED)))
        assert (edges.width, edges.height) == (5, 3)

    def test_border_is_an_edge_interior_is_not(self):
        edges = detect_edges(Bitmap.blank(3, 3, pack_color(*RED)))
        assert edges.get_pixel(1, 1) == BACKGROUND
        assert edges.get_pixel(0, 0) == EDGE
        assert edges.get_pixel(1, 0) == EDGE

    def test_lazy_and_slow_differ_on_alpha_only_changes(self):
        faded = (255, 0, 0, 128)
        source = bitmap_from_rows([[RED, RED, RED], [RED, faded, RED], [RED, RED, RED]])
        assert detect_edges(source, mode="lazy").get_pixel(1, 1) == EDGE
        assert detect_edges(source, mode="slow").get_pixel(1, 1) == BACKGROUND

    def test_custom_colors(self):
        edges = detect_edges(Bitmap.blank(1, 1, pack_color(*RED)), edge_color=0x00FF00FF)
        assert edges.get_pixel(0, 0) == 0x00FF00FF

    def test_unknown_mode(self):
        with pytest.raises(ParameterError):
            detect_edges(Bitmap.blank(2, 2), mode="fast")


class TestEdgeAssist:
    """Test cases for EdgeAssist."""

    def test_placeholder_is_disabled(self):
        assist = EdgeAssist.placeholder()
        assert not assist.enabled
        assert assist.check_edge(4, 7) is NO_EDGE_ASSIST

    def test_coordinates_wrap(self):
        image = bitmap_from_rows([[(1, 1, 1, 255), (2, 2, 2, 255)], [(3, 3, 3, 255), (4, 4, 4, 255)]])
        assist = EdgeAssist(image)
        assert assist.enabled
        assert assist.check_edge(3, 2) == image.get_pixel(1, 0)
        assert assist.check_edge(-1, -1) == image.get_pixel(1, 1)
