"""Triangle reconstruction (V1) algorithm."""

from bside.v1.groups import assign_to_group, build_color_groups, find_group_index
from bside.v1.rasterizer import (
    compose_groups,
    create_bside_image,
    fill_triangle,
    order_groups,
    validate_v1_parameters,
)
from bside.v1.triangles import (
    SEARCH_ORDER,
    ColorMatcher,
    TriangleFinder,
    find_pixel_triangles,
    find_triangles,
)

__all__ = [
    "SEARCH_ORDER",
    "ColorMatcher",
    "TriangleFinder",
    "assign_to_group",
    "build_color_groups",
    "compose_groups",
    "create_bside_image",
    "fill_triangle",
    "find_group_index",
    "find_pixel_triangles",
    "find_triangles",
    "order_groups",
    "validate_v1_parameters",
]
