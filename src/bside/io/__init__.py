"""Image I/O utilities."""

from bside.io.images import (
    RESIZE_FILTERS,
    bitmap_from_image,
    bitmap_to_image,
    decode_image,
    downscale_to_limit,
    encode_png,
    load_bitmap,
    prepare_for_v1,
    prepared_size,
    resize_bitmap,
    resize_filter,
    save_bitmap,
)

__all__ = [
    "RESIZE_FILTERS",
    "bitmap_from_image",
    "bitmap_to_image",
    "decode_image",
    "downscale_to_limit",
    "encode_png",
    "load_bitmap",
    "prepare_for_v1",
    "prepared_size",
    "resize_bitmap",
    "resize_filter",
    "save_bitmap",
]
