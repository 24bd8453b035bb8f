"""Compositing of color groups and their triangles onto the upscaled canvas."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from bside.data import Bitmap, ColorGroup, Triangle, corner_coordinates
from bside.edges import EdgeAssist
from bside.errors import ParameterError, ResourceLimitError
from bside.v1.groups import build_color_groups
from bside.v1.triangles import ColorMatcher, TriangleFinder

if TYPE_CHECKING:
    from bside.scheduler.control import RunControl

logger = logging.getLogger(__name__)


def validate_v1_parameters(
    source: Bitmap,
    scale: int,
    pixel_reach: int,
    threshold: float,
    minutia: int,
    max_pixels: Optional[int] = None,
) -> None:
    """Reject invalid V1 parameters before any pixel work starts."""

    if not isinstance(scale, int) or scale < 1:
        raise ParameterError(f"scale must be a positive integer, got {scale!r}")
    if not isinstance(pixel_reach, int) or pixel_reach < 1:
        raise ParameterError(f"pixel_reach must be a positive integer, got {pixel_reach!r}")
    if threshold < 0:
        raise ParameterError(f"threshold must be >= 0, got {threshold!r}")
    if minutia not in (-1, 1):
        raise ParameterError(f"minutia must be -1 or 1, got {minutia!r}")
    if source.pixel_count == 0:
        raise ParameterError("Source bitmap is empty.")
    if max_pixels is not None and source.pixel_count > max_pixels:
        raise ResourceLimitError(
            f"Source has {source.pixel_count} pixels; the V1 limit is {max_pixels}."
        )


def order_groups(groups: List[ColorGroup], minutia: int = -1) -> List[ColorGroup]:
    """Return groups in paint order.

    With ``minutia=-1`` the largest groups are painted first, so smaller
    detail groups end up on top. ``minutia=1`` reverses that. Groups of equal
    size keep the order in which they were created.
    """

    return sorted(groups, key=lambda group: len(group.coordinates), reverse=minutia == -1)


def fill_triangle(canvas: Bitmap, triangle: Triangle) -> None:
    """Scan-fill one triangle column by column using y = m * x + b."""

    start, end = triangle.start, triangle.end
    if start.x == end.x:
        return
    slope = (start.y - end.y) / (start.x - end.x)
    origin = start if start.x < end.x else end
    top = min(start.y, end.y)
    bottom = max(start.y, end.y)
    for step in range(abs(start.x - end.x) + 1):
        x = origin.x + step
        y = slope * step + origin.y
        if triangle.side == "below":
            canvas.fill_rect(x, y, 1, bottom - y + 1, triangle.color)
        else:
            canvas.fill_rect(x, top, 1, y - top + 1, triangle.color)


def compose_groups(
    groups: List[ColorGroup],
    width: int,
    height: int,
    scale: int,
    minutia: int = -1,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """Paint groups onto a transparent canvas; later groups overwrite earlier ones."""

    canvas = Bitmap.blank(width * scale, height * scale)
    for group in order_groups(groups, minutia):
        if control is not None:
            control.check()
        for coordinate in group.coordinates:
            top_left = corner_coordinates(coordinate.x, coordinate.y, scale).top_left
            canvas.fill_rect(top_left.x, top_left.y, scale, scale, group.color)
        for triangle in group.triangles:
            fill_triangle(canvas, triangle)
    return canvas


def create_bside_image(
    source: Bitmap,
    scale: int = 4,
    pixel_reach: int = 3,
    accurate: bool = False,
    threshold: float = 20.0,
    edge_image: Optional[Bitmap] = None,
    minutia: int = -1,
    control: Optional["RunControl"] = None,
    max_pixels: Optional[int] = None,
) -> Bitmap:
    """Create a B-Side (V1) image from a source sprite.

    The source is not modified. The result is exactly ``scale`` times larger
    in both dimensions.

    Args:
        source: Sprite to reinterpret.
        scale: Canvas pixels per source pixel.
        pixel_reach: How many source pixels a triangle may grow across.
        accurate: Compare colors with delta E instead of exact equality.
        threshold: Delta E threshold used when ``accurate`` is set.
        edge_image: Optional edge classification from ``detect_edges``.
        minutia: -1 paints large groups first, 1 paints small groups first.
        control: Optional cancellation control, checked between scanlines.
        max_pixels: Optional ceiling on the source pixel count.

    Raises:
        ParameterError: If any parameter is invalid.
        ResourceLimitError: If the source exceeds ``max_pixels``.
        RenderCancelled: If ``control`` was stopped or timed out.
    """

    validate_v1_parameters(source, scale, pixel_reach, threshold, minutia, max_pixels)

    finder = TriangleFinder(
        source,
        scale=scale,
        pixel_reach=pixel_reach,
        matcher=ColorMatcher(accurate=accurate, threshold=threshold),
        edge_assist=EdgeAssist(edge_image),
    )
    groups = build_color_groups(source, finder=finder, control=control)
    logger.debug(
        "B-Side V1: %d groups, %d triangles from a %dx%d source",
        len(groups),
        sum(len(group.triangles) for group in groups),
        source.width,
        source.height,
    )
    return compose_groups(groups, source.width, source.height, scale, minutia, control)
