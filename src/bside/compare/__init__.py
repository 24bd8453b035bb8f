"""Comparison harness for visual regression review."""

from bside.compare.harness import (
    COMPARISON_KINDS,
    compare_blend_types,
    compare_blends_and_filters,
    compare_resize_filters,
    compare_thresholds,
    compare_versions,
    compare_with_source,
    render_comparison,
    tile_horizontal,
    tile_vertical,
)

__all__ = [
    "COMPARISON_KINDS",
    "compare_blend_types",
    "compare_blends_and_filters",
    "compare_resize_filters",
    "compare_thresholds",
    "compare_versions",
    "compare_with_source",
    "render_comparison",
    "tile_horizontal",
    "tile_vertical",
]
