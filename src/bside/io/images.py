"""Image loading, saving and resampling."""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Dict, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from bside.data import Bitmap
from bside.errors import ParameterError

logger = logging.getLogger(__name__)

RESIZE_FILTERS: Dict[str, int] = {
    "nearest": Image.NEAREST,
    "box": Image.BOX,
    "bilinear": Image.BILINEAR,
    "hamming": Image.HAMMING,
    "bicubic": Image.BICUBIC,
    "lanczos": Image.LANCZOS,
}


def resize_filter(name: str) -> int:
    """Look up a Pillow resampling filter by name."""

    key = name.lower()
    if key not in RESIZE_FILTERS:
        raise ParameterError(f"Unknown resize filter '{name}'. Available: {', '.join(RESIZE_FILTERS)}")
    return RESIZE_FILTERS[key]


def bitmap_from_image(image: Image.Image) -> Bitmap:
    """Convert a PIL image to an RGBA bitmap."""

    return Bitmap(np.array(image.convert("RGBA"), dtype=np.uint8))


def bitmap_to_image(bitmap: Bitmap) -> Image.Image:
    return Image.fromarray(bitmap.data)


def load_bitmap(path: Union[str, Path]) -> Bitmap:
    """Load an image file as an RGBA bitmap."""

    with Image.open(path) as image:
        return bitmap_from_image(image)


def decode_image(payload: bytes) -> Bitmap:
    """Decode encoded image bytes (PNG, JPEG, ...) into a bitmap.

    Unrecognised, truncated and oversized payloads raise ``ParameterError``.
    """

    try:
        with Image.open(io.BytesIO(payload)) as image:
            return bitmap_from_image(image)
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise ParameterError(f"Upload is not a decodable image: {exc}") from exc


def save_bitmap(path: Union[str, Path], bitmap: Bitmap) -> None:
    """Save a bitmap as PNG."""

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    bitmap_to_image(bitmap).save(path, format="PNG")


def encode_png(bitmap: Bitmap) -> bytes:
    buffer = io.BytesIO()
    bitmap_to_image(bitmap).save(buffer, format="PNG")
    return buffer.getvalue()


def resize_bitmap(bitmap: Bitmap, width: int, height: int, filter_name: str = "bicubic") -> Bitmap:
    """Resize a bitmap with one of the named Pillow filters."""

    resample = resize_filter(filter_name)
    resized = bitmap_to_image(bitmap).resize((max(1, width), max(1, height)), resample=resample)
    return bitmap_from_image(resized)


def downscale_to_limit(bitmap: Bitmap, max_pixels: int, filter_name: str = "bicubic") -> Bitmap:
    """Shrink a bitmap, keeping its aspect ratio, until it fits ``max_pixels``.

    Bitmaps already within the limit are returned unchanged.
    """

    if max_pixels < 1:
        raise ParameterError(f"max_pixels must be positive, got {max_pixels}")
    pixel_count = bitmap.pixel_count
    if pixel_count <= max_pixels:
        return bitmap
    scale_change = math.sqrt(max_pixels / pixel_count)
    width = math.ceil(bitmap.width * scale_change)
    height = math.ceil(bitmap.height * scale_change)
    logger.info(
        "Scale change applied: %d pixels downscaled to %dx%d (%d pixels)",
        pixel_count,
        width,
        height,
        width * height,
    )
    return resize_bitmap(bitmap, width, height, filter_name)


def prepared_size(width: int, height: int, resize_scale: float = 1.0) -> Tuple[int, int]:
    """Size of a bitmap after the V1 preparation shrink, without resizing it."""

    if resize_scale <= 0:
        raise ParameterError(f"resize_scale must be positive, got {resize_scale}")
    if resize_scale == 1.0:
        return width, height
    return max(1, math.ceil(width * resize_scale)), max(1, math.ceil(height * resize_scale))


def prepare_for_v1(
    bitmap: Bitmap,
    resize_scale: float = 1.0,
    colors: int = 0,
    filter_name: str = "bicubic",
) -> Bitmap:
    """Shrink and posterize an arbitrary image so V1 sees pixel-art-like input.

    ``colors`` of 0 skips quantization. Fully transparent pixels stay fully
    transparent; every other pixel keeps its own alpha.
    """

    width, height = prepared_size(bitmap.width, bitmap.height, resize_scale)
    if colors < 0 or colors == 1 or colors > 256:
        raise ParameterError(f"colors must be 0 or between 2 and 256, got {colors}")

    prepared = bitmap
    if (width, height) != (bitmap.width, bitmap.height):
        prepared = resize_bitmap(bitmap, width, height, filter_name)
    if colors == 0:
        return prepared

    image = bitmap_to_image(prepared)
    alpha = image.getchannel("A")
    quantized = image.convert("RGB").quantize(colors=colors).convert("RGB")
    quantized.putalpha(alpha)
    result = bitmap_from_image(quantized)
    result.data[result.data[..., 3] == 0] = 0
    return result
