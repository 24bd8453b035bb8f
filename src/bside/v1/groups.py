"""Partitioning of opaque source pixels into same-colored groups."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from bside.data import Bitmap, ColorGroup, Coordinate

if TYPE_CHECKING:
    from bside.scheduler.control import RunControl
    from bside.v1.triangles import TriangleFinder


def _is_group_neighbour(member: Coordinate, x: int, y: int) -> bool:
    # Exactly one of the axis deltas may be +-1. This lets pixels that are far
    # apart along the other axis join the same group, which shows up as the
    # occasional jaggy edge; rendered icons depend on it, so it stays loose.
    dx = member.x - x
    dy = member.y - y
    return (dx in (-1, 1)) != (dy in (-1, 1))


def find_group_index(groups: List[ColorGroup], x: int, y: int, color: int) -> int:
    """Return the index of the first group the pixel may join, or -1."""

    for index, group in enumerate(groups):
        if group.color != color:
            continue
        if any(_is_group_neighbour(member, x, y) for member in group.coordinates):
            return index
    return -1


def assign_to_group(groups: List[ColorGroup], x: int, y: int, color: int) -> ColorGroup:
    """Add a pixel to its matching group, creating a new group when none matches."""

    index = find_group_index(groups, x, y, color)
    if index == -1:
        group = ColorGroup(color=color)
        groups.append(group)
    else:
        group = groups[index]
    group.coordinates.append(Coordinate(x, y))
    return group


def build_color_groups(
    source: Bitmap,
    finder: Optional["TriangleFinder"] = None,
    control: Optional["RunControl"] = None,
) -> List[ColorGroup]:
    """Scan the source in row-major order and group its opaque pixels.

    When a finder is given, the triangles found around each pixel are
    attached to the group that pixel joined.
    """

    groups: List[ColorGroup] = []
    for y in range(source.height):
        if control is not None:
            control.check()
        for x in range(source.width):
            if source.alpha(x, y) == 0:
                continue
            group = assign_to_group(groups, x, y, source.get_pixel(x, y))
            if finder is not None:
                group.triangles.extend(finder.find(Coordinate(x, y)))
    return groups
