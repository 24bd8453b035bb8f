"""Diagonal edge reconstruction by greedy triangle growth.

For every opaque source pixel the finder looks in each axis direction. When
the neighbour in that direction has a different color, two candidate
triangles anchored on the pixel's footprint are pushed outward for as long
as the pixels beside the search line keep matching the center color. Each
surviving triangle later paints a diagonal wedge over the neighbouring
footprints, which turns stair-stepped silhouettes into straight diagonals.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from bside.color import colors_similar
from bside.data import (
    Bitmap,
    Coordinate,
    CornerCoordinates,
    RoughTriangle,
    Side,
    Triangle,
    corner_coordinates,
)
from bside.edges import EdgeAssist

UP = Coordinate(0, -1)
DOWN = Coordinate(0, 1)
LEFT = Coordinate(-1, 0)
RIGHT = Coordinate(1, 0)

# Triangles from every direction are collected in this order.
SEARCH_ORDER: Tuple[Coordinate, ...] = (UP, DOWN, LEFT, RIGHT)

_Anchor = Tuple[str, str, Side]

# (start corner, end corner, filled side) for the primary and secondary
# triangle of each direction. The four cases are not mirror images of each
# other, so they are spelled out instead of derived.
_ORIENTATION: Dict[Coordinate, Tuple[_Anchor, _Anchor]] = {
    RIGHT: (("bottom_right", "top_right", "above"), ("top_right", "bottom_right", "below")),
    LEFT: (("top_left", "bottom_left", "below"), ("bottom_left", "top_left", "above")),
    DOWN: (("bottom_right", "bottom_left", "above"), ("bottom_left", "bottom_right", "above")),
    UP: (("top_left", "top_right", "below"), ("top_right", "top_left", "below")),
}


@lru_cache(maxsize=65536)
def _similar(color_a: int, color_b: int, threshold: float) -> bool:
    return colors_similar(color_a, color_b, threshold)


@dataclass(frozen=True)
class ColorMatcher:
    """Decides whether two packed colors count as the same color."""

    accurate: bool = False
    threshold: float = 20.0

    def __call__(self, color_a: int, color_b: int) -> bool:
        if color_a == color_b:
            return True
        if not self.accurate:
            return False
        # Transparent pixels only ever match themselves.
        if (color_a & 0xFF) == 0 or (color_b & 0xFF) == 0:
            return False
        return _similar(color_a, color_b, self.threshold)


def _anchored(corners: CornerCoordinates, anchor: _Anchor) -> RoughTriangle:
    start, end, side = anchor
    return RoughTriangle(start=getattr(corners, start), end=getattr(corners, end), side=side)


class TriangleFinder:
    """Searches a source bitmap for triangles around individual pixels."""

    def __init__(
        self,
        source: Bitmap,
        scale: int,
        pixel_reach: int,
        matcher: Optional[ColorMatcher] = None,
        edge_assist: Optional[EdgeAssist] = None,
    ) -> None:
        self.source = source
        self.scale = scale
        self.pixel_reach = pixel_reach
        self.matcher = matcher or ColorMatcher()
        self.edge_assist = edge_assist or EdgeAssist.placeholder()

    def _can_extend(
        self,
        probe: Coordinate,
        adjacent: Coordinate,
        adjacent_color: int,
        center: Coordinate,
        center_color: int,
        offset: int,
    ) -> bool:
        if not self.source.in_bounds(probe.x, probe.y):
            return False
        probe_color = self.source.get_pixel(probe.x, probe.y)
        if self.matcher(probe_color, center_color):
            return True
        if offset != 1:
            return False
        # Falling off an edge: the probe is opaque but the pixel across is not.
        if (probe_color & 0xFF) > 0 and (adjacent_color & 0xFF) == 0:
            return True
        if self.edge_assist.enabled:
            center_edge = self.edge_assist.check_edge(center.x, center.y)
            probe_edge = self.edge_assist.check_edge(probe.x, probe.y)
            adjacent_edge = self.edge_assist.check_edge(adjacent.x, adjacent.y)
            return probe_edge == center_edge and adjacent_edge != center_edge
        return False

    def search(self, center: Coordinate, direction: Coordinate) -> List[RoughTriangle]:
        """Grow the primary and secondary triangle for one direction."""

        center_color = self.source.get_pixel(center.x, center.y)
        corners = corner_coordinates(center.x, center.y, self.scale)
        primary_anchor, secondary_anchor = _ORIENTATION[direction]
        triangles = [_anchored(corners, primary_anchor), _anchored(corners, secondary_anchor)]

        perpendicular = Coordinate(direction.y, direction.x)
        extending = [True, True]
        for offset in range(1, self.pixel_reach + 1):
            adjacent = Coordinate(center.x + direction.x * offset, center.y + direction.y * offset)
            adjacent_color = self.source.get_pixel(adjacent.x, adjacent.y)
            if self.matcher(adjacent_color, center_color):
                if offset == 1:
                    for triangle in triangles:
                        triangle.use = False
                break

            movement = self.scale - (1 if offset == 1 else 0)
            # The primary probe sits on the negative perpendicular side.
            for index, sign in enumerate((-1, 1)):
                if not extending[index]:
                    continue
                probe = Coordinate(
                    adjacent.x + perpendicular.x * sign,
                    adjacent.y + perpendicular.y * sign,
                )
                triangle = triangles[index]
                if self._can_extend(probe, adjacent, adjacent_color, center, center_color, offset):
                    triangle.end = Coordinate(
                        triangle.end.x + movement * direction.x,
                        triangle.end.y + movement * direction.y,
                    )
                else:
                    extending[index] = False
                    if offset == 1:
                        triangle.use = False
            if not any(extending):
                break
        return triangles

    def find(self, center: Coordinate) -> List[Triangle]:
        """Return the finalized triangles found around one source pixel."""

        color = self.source.get_pixel(center.x, center.y)
        found: List[Triangle] = []
        for direction in SEARCH_ORDER:
            for rough in self.search(center, direction):
                if rough.use:
                    found.append(Triangle(start=rough.start, end=rough.end, side=rough.side, color=color))
        return found


def find_triangles(
    source: Bitmap,
    coordinate: Coordinate,
    direction: Coordinate,
    scale: int,
    pixel_reach: int,
    matcher: Optional[ColorMatcher] = None,
    edge_assist: Optional[EdgeAssist] = None,
) -> List[RoughTriangle]:
    """Search one direction around ``coordinate`` without building a finder first."""

    return TriangleFinder(source, scale, pixel_reach, matcher, edge_assist).search(coordinate, direction)


def find_pixel_triangles(
    source: Bitmap,
    coordinate: Coordinate,
    scale: int,
    pixel_reach: int,
    matcher: Optional[ColorMatcher] = None,
    edge_assist: Optional[EdgeAssist] = None,
) -> List[Triangle]:
    return TriangleFinder(source, scale, pixel_reach, matcher, edge_assist).find(coordinate)
