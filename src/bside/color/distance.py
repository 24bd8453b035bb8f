"""sRGB to Lab conversion and CIE94 color difference.

Both functions are vectorised over a trailing axis of three channels, so they
accept a single ``(r, g, b)`` triple as well as whole ``(h, w, 3)`` arrays.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from bside.data import unpack_color

ArrayLike = Union[np.ndarray, Sequence[float]]

# D65 reference white.
_WHITE = np.array([0.95047, 1.00000, 1.08883])
_RGB_TO_XYZ = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ]
)
_LAB_EPSILON = 0.008856


def _srgb_to_linear(channel: np.ndarray) -> np.ndarray:
    """Convert sRGB channel values (0..1) to linear space."""

    return np.where(channel > 0.04045, ((channel + 0.055) / 1.055) ** 2.4, channel / 12.92)


def rgb_to_lab(rgb: ArrayLike) -> np.ndarray:
    """Convert 0..255 RGB values to CIE Lab."""

    linear = _srgb_to_linear(np.asarray(rgb, dtype=np.float64) / 255.0)
    xyz = (linear @ _RGB_TO_XYZ.T) / _WHITE
    f = np.where(xyz > _LAB_EPSILON, np.cbrt(xyz), 7.787 * xyz + 16.0 / 116.0)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]
    return np.stack([116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)], axis=-1)


def delta_e(rgb_a: ArrayLike, rgb_b: ArrayLike) -> Union[float, np.ndarray]:
    """CIE94 distance between two RGB colors (or two arrays of them).

    The chroma weighting uses the geometric mean of both chromas, which keeps
    the result symmetric in its arguments.
    """

    lab_a = rgb_to_lab(rgb_a)
    lab_b = rgb_to_lab(rgb_b)
    delta_l = lab_a[..., 0] - lab_b[..., 0]
    delta_a = lab_a[..., 1] - lab_b[..., 1]
    delta_b = lab_a[..., 2] - lab_b[..., 2]
    chroma_a = np.hypot(lab_a[..., 1], lab_a[..., 2])
    chroma_b = np.hypot(lab_b[..., 1], lab_b[..., 2])
    delta_c = chroma_a - chroma_b
    delta_h = np.sqrt(np.maximum(delta_a**2 + delta_b**2 - delta_c**2, 0.0))

    chroma = np.sqrt(chroma_a * chroma_b)
    sc = 1.0 + 0.045 * chroma
    sh = 1.0 + 0.015 * chroma
    total = delta_l**2 + (delta_c / sc) ** 2 + (delta_h / sh) ** 2
    result = np.sqrt(np.maximum(total, 0.0))
    if np.ndim(result) == 0:
        return float(result)
    return result


def colors_similar(color_a: int, color_b: int, threshold: float) -> bool:
    """Return True when two packed colors are within ``threshold`` (RGB only)."""

    if color_a == color_b:
        return True
    return delta_e(unpack_color(color_a)[:3], unpack_color(color_b)[:3]) <= threshold
