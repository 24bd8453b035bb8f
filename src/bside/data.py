"""Core data structures used throughout the engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Literal, NamedTuple, Tuple

import numpy as np

Side = Literal["above", "below"]


def pack_color(r: int, g: int, b: int, a: int = 255) -> int:
    """Pack RGBA channels into a 0xRRGGBBAA integer."""

    return ((r & 0xFF) << 24) | ((g & 0xFF) << 16) | ((b & 0xFF) << 8) | (a & 0xFF)


def unpack_color(color: int) -> Tuple[int, int, int, int]:
    """Split a 0xRRGGBBAA integer into its channels."""

    return ((color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Coordinate(NamedTuple):
    """Integer position, in source-pixel or canvas space depending on context."""

    x: int
    y: int


@dataclass
class Bitmap:
    """Owned RGBA raster stored as a (height, width, 4) uint8 array.

    Reads outside the raster return transparent black; writes outside it raise.
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        if self.data.ndim != 3 or self.data.shape[2] != 4:
            raise ValueError(f"Bitmap data must have shape (h, w, 4), got {self.data.shape}.")
        if self.data.dtype != np.uint8:
            self.data = np.clip(self.data, 0, 255).astype(np.uint8)

    @classmethod
    def blank(cls, width: int, height: int, color: int = 0) -> "Bitmap":
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[...] = unpack_color(color)
        return cls(data)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def copy(self) -> "Bitmap":
        return Bitmap(self.data.copy())

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_rgba(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not self.in_bounds(x, y):
            return (0, 0, 0, 0)
        r, g, b, a = self.data[y, x]
        return (int(r), int(g), int(b), int(a))

    def get_pixel(self, x: int, y: int) -> int:
        return pack_color(*self.get_rgba(x, y))

    def alpha(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return 0
        return int(self.data[y, x, 3])

    def set_pixel(self, x: int, y: int, color: int) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} bitmap.")
        self.data[y, x] = unpack_color(color)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: int) -> None:
        """Fill a rectangle, rounding each argument half-up and clipping to the bitmap."""

        x0 = _round_half_up(x)
        y0 = _round_half_up(y)
        x1 = x0 + _round_half_up(width)
        y1 = y0 + _round_half_up(height)
        x0, y0 = max(x0, 0), max(y0, 0)
        x1, y1 = min(x1, self.width), min(y1, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        self.data[y0:y1, x0:x1] = unpack_color(color)

    def paste(self, other: "Bitmap", x: int, y: int) -> None:
        """Copy another bitmap onto this one with its top-left at (x, y)."""

        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + other.width, self.width)
        y1 = min(y + other.height, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        self.data[y0:y1, x0:x1] = other.data[y0 - y : y1 - y, x0 - x : x1 - x]


@dataclass(frozen=True)
class CornerCoordinates:
    """Canvas-space corners of one source pixel's scale x scale footprint."""

    top_left: Coordinate
    top_right: Coordinate
    bottom_right: Coordinate
    bottom_left: Coordinate
    center: Coordinate


def corner_coordinates(x: int, y: int, scale: int) -> CornerCoordinates:
    """Map a source pixel to the corners of its footprint on the upscaled canvas."""

    left = x * scale
    top = y * scale
    right = left + scale - 1
    bottom = top + scale - 1
    return CornerCoordinates(
        top_left=Coordinate(left, top),
        top_right=Coordinate(right, top),
        bottom_right=Coordinate(right, bottom),
        bottom_left=Coordinate(left, bottom),
        center=Coordinate(left + scale // 2, top + scale // 2),
    )


@dataclass
class RoughTriangle:
    """Candidate triangle produced during the search; dropped when use is False."""

    start: Coordinate
    end: Coordinate
    side: Side
    use: bool = True


@dataclass(frozen=True)
class Triangle:
    """Finalized triangle carrying the packed color of the pixel that found it."""

    start: Coordinate
    end: Coordinate
    side: Side
    color: int


@dataclass
class ColorGroup:
    """Same-colored source pixels plus the triangles discovered from them."""

    color: int
    coordinates: List[Coordinate] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)
