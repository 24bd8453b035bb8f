"""Tests for the triangle finder."""

from bside.data import Bitmap, Coordinate, Triangle, pack_color
from bside.edges import EdgeAssist
from bside.v1 import (
    ColorMatcher,
    TriangleFinder,
    build_color_groups,
    find_pixel_triangles,
    find_triangles,
)
from bside.v1.triangles import DOWN, LEFT, RIGHT, UP

from conftest import BLUE, CLEAR, GREEN, RED, bitmap_from_rows

RED_PACKED = pack_color(*RED)
BLUE_PACKED = pack_color(*BLUE)
NEAR_RED = (250, 0, 0, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


class TestColorMatcher:
    """Test cases for ColorMatcher."""

    def test_exact_mode(self):
        matcher = ColorMatcher()
        assert matcher(RED_PACKED, RED_PACKED)
        assert not matcher(RED_PACKED, pack_color(*NEAR_RED))

    def test_accurate_mode_uses_threshold(self):
        matcher = ColorMatcher(accurate=True, threshold=20.0)
        assert matcher(RED_PACKED, pack_color(*NEAR_RED))
        assert not matcher(RED_PACKED, BLUE_PACKED)

    def test_accurate_mode_never_matches_transparent(self):
        matcher = ColorMatcher(accurate=True, threshold=100.0)
        assert not matcher(0, pack_color(0, 0, 0, 255))


class TestTriangleFinder:
    """Test cases for TriangleFinder.search and find."""

    def test_uniform_image_has_no_triangles(self):
        source = Bitmap.blank(8, 8, RED_PACKED)
        finder = TriangleFinder(source, scale=2, pixel_reach=3)
        groups = build_color_groups(source, finder=finder)
        assert sum(len(group.triangles) for group in groups) == 0

    def test_matching_neighbour_disables_both_triangles(self, staircase):
        finder = TriangleFinder(staircase, scale=4, pixel_reach=3)
        triangles = finder.search(Coordinate(1, 0), DOWN)
        assert [triangle.use for triangle in triangles] == [False, False]

    def test_staircase_left_triangle(self, staircase):
        finder = TriangleFinder(staircase, scale=4, pixel_reach=3)
        assert finder.find(Coordinate(1, 0)) == [
            Triangle(start=Coordinate(4, 0), end=Coordinate(1, 3), side="below", color=BLUE_PACKED)
        ]

    def test_staircase_up_triangle(self, staircase):
        finder = TriangleFinder(staircase, scale=4, pixel_reach=3)
        assert finder.find(Coordinate(0, 1)) == [
            Triangle(start=Coordinate(0, 4), end=Coordinate(3, 1), side="below", color=BLUE_PACKED)
        ]

    def test_isolated_corner_pixel_has_no_triangles(self, staircase):
        finder = TriangleFinder(staircase, scale=4, pixel_reach=3)
        assert finder.find(Coordinate(0, 0)) == []

    def test_single_row_has_no_triangles(self, red_blue_pair):
        finder = TriangleFinder(red_blue_pair, scale=4, pixel_reach=3)
        assert finder.find(Coordinate(0, 0)) == []
        assert finder.find(Coordinate(1, 0)) == []

    def test_pixel_reach_caps_growth(self):
        source = bitmap_from_rows([[RED, BLUE, BLUE, BLUE], [RED, RED, RED, RED]])
        ends = []
        for reach in (1, 2, 3, 4):
            finder = TriangleFinder(source, scale=2, pixel_reach=reach)
            (triangle,) = finder.find(Coordinate(0, 0))
            assert triangle.start == Coordinate(1, 0)
            assert triangle.side == "below"
            ends.append(triangle.end)
        assert ends == [Coordinate(2, 1), Coordinate(4, 1), Coordinate(6, 1), Coordinate(6, 1)]

    def test_every_direction_yields_two_candidates(self):
        source = Bitmap.blank(3, 3, BLUE_PACKED)
        source.set_pixel(1, 1, RED_PACKED)
        finder = TriangleFinder(source, scale=2, pixel_reach=1)
        for direction in (UP, DOWN, LEFT, RIGHT):
            assert len(finder.search(Coordinate(1, 1), direction)) == 2

    def test_falling_off_an_edge_extends(self):
        source = bitmap_from_rows([[RED, CLEAR], [RED, BLUE]])
        finder = TriangleFinder(source, scale=2, pixel_reach=3)
        assert finder.find(Coordinate(0, 0)) == [
            Triangle(start=Coordinate(1, 0), end=Coordinate(2, 1), side="below", color=RED_PACKED)
        ]

    def test_opaque_neighbour_does_not_count_as_an_edge(self):
        source = bitmap_from_rows([[RED, GREEN], [RED, BLUE]])
        finder = TriangleFinder(source, scale=2, pixel_reach=3)
        assert finder.find(Coordinate(0, 0)) == []

    def test_accurate_mode_treats_near_colors_as_equal(self):
        source = bitmap_from_rows([[RED, BLUE], [NEAR_RED, NEAR_RED]])
        exact = TriangleFinder(source, scale=2, pixel_reach=1)
        assert exact.find(Coordinate(0, 0)) == []

        accurate = TriangleFinder(
            source, scale=2, pixel_reach=1, matcher=ColorMatcher(accurate=True, threshold=20.0)
        )
        (triangle,) = accurate.find(Coordinate(0, 0))
        assert (triangle.start, triangle.end) == (Coordinate(1, 0), Coordinate(2, 1))

    def test_edge_assist_extends_across_edges(self):
        source = bitmap_from_rows([[RED, GREEN], [RED, BLUE]])
        edges = bitmap_from_rows([[WHITE, BLACK], [BLACK, WHITE]])
        finder = TriangleFinder(source, scale=2, pixel_reach=1, edge_assist=EdgeAssist(edges))
        assert finder.find(Coordinate(0, 0)) == [
            Triangle(start=Coordinate(1, 0), end=Coordinate(2, 1), side="below", color=RED_PACKED)
        ]

    def test_placeholder_edge_assist_is_ignored(self):
        source = bitmap_from_rows([[RED, GREEN], [RED, BLUE]])
        finder = TriangleFinder(source, scale=2, pixel_reach=1, edge_assist=EdgeAssist.placeholder())
        assert finder.find(Coordinate(0, 0)) == []


class TestFunctionalForms:
    """Test cases for find_triangles and find_pixel_triangles."""

    def test_find_triangles_single_direction(self, staircase):
        rough = find_triangles(staircase, Coordinate(1, 0), LEFT, scale=4, pixel_reach=3)
        assert [triangle.use for triangle in rough] == [True, False]
        assert rough[0].end == Coordinate(1, 3)

    def test_find_pixel_triangles_matches_finder(self, staircase):
        finder = TriangleFinder(staircase, scale=4, pixel_reach=3)
        for coordinate in (Coordinate(0, 0), Coordinate(1, 0), Coordinate(0, 1), Coordinate(1, 1)):
            assert find_pixel_triangles(staircase, coordinate, 4, 3) == finder.find(coordinate)
