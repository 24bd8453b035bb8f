"""Stencil-based edge detection.

Each source pixel is compared with the neighbours selected by a 3x3 stencil.
Pixels with at least one differing neighbour are painted ``edge_color`` on an
output bitmap of the same size; the rest keep ``background``. Neighbours that
fall outside the bitmap read as transparent black.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from bside.color import delta_e
from bside.config.schema import PLUS_STENCIL
from bside.data import Bitmap, unpack_color
from bside.errors import ParameterError

EDGE_MODES = ("lazy", "slow")
SLOW_MODE_THRESHOLD = 0.5

NO_EDGE_ASSIST = object()


def validate_stencil(stencil: Iterable[Iterable[int]]) -> List[Tuple[int, int]]:
    """Check a 3x3 stencil and return the (dx, dy) offsets it selects."""

    rows = [list(row) for row in stencil]
    if len(rows) != 3 or any(len(row) != 3 for row in rows):
        raise ParameterError("Edge stencil must be exactly 3x3.")
    offsets = [
        (col - 1, row - 1)
        for row in range(3)
        for col in range(3)
        if rows[row][col] and not (row == 1 and col == 1)
    ]
    if not offsets:
        raise ParameterError("Edge stencil must select at least one neighbour.")
    return offsets


def _shifted(padded: np.ndarray, dx: int, dy: int, height: int, width: int) -> np.ndarray:
    return padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]


def detect_edges(
    bitmap: Bitmap,
    stencil: Sequence[Sequence[int]] = PLUS_STENCIL,
    mode: str = "lazy",
    edge_color: int = 0xFFFFFFFF,
    background: int = 0x000000FF,
) -> Bitmap:
    """Classify every pixel as edge or non-edge.

    ``lazy`` compares exact RGBA values; ``slow`` treats neighbours as equal
    when their RGB delta E is within 0.5.
    """

    if mode not in EDGE_MODES:
        raise ParameterError(f"Unknown edge mode '{mode}'. Available: {', '.join(EDGE_MODES)}")
    offsets = validate_stencil(stencil)

    height, width = bitmap.height, bitmap.width
    source = bitmap.data
    padded = np.zeros((height + 2, width + 2, 4), dtype=np.uint8)
    padded[1:-1, 1:-1] = source

    is_edge = np.zeros((height, width), dtype=bool)
    for dx, dy in offsets:
        neighbour = _shifted(padded, dx, dy, height, width)
        differs = np.any(neighbour != source, axis=-1)
        if mode == "slow":
            distance = delta_e(source[..., :3], neighbour[..., :3])
            differs &= distance > SLOW_MODE_THRESHOLD
        is_edge |= differs

    output = np.empty_like(source)
    output[...] = unpack_color(background)
    output[is_edge] = unpack_color(edge_color)
    return Bitmap(output)


class EdgeAssist:
    """Per-pixel edge classifier consulted by the triangle finder.

    A 1x1 bitmap is the "no assist" placeholder; ``check_edge`` then returns
    ``NO_EDGE_ASSIST``. Larger bitmaps are sampled with coordinates wrapped
    modulo their size.
    """

    def __init__(self, image: Optional[Bitmap] = None) -> None:
        self.image = image if image is not None else Bitmap.blank(1, 1)

    @classmethod
    def placeholder(cls) -> "EdgeAssist":
        return cls(None)

    @property
    def enabled(self) -> bool:
        return self.image.pixel_count > 1

    def check_edge(self, x: int, y: int) -> object:
        if not self.enabled:
            return NO_EDGE_ASSIST
        return self.image.get_pixel(x % self.image.width, y % self.image.height)
