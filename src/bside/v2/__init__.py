"""Iterative blend (V2) algorithm."""

from bside.v2.blend import BLEND_TYPES, blend_step, create_bside_v2_image, validate_v2_parameters

__all__ = ["BLEND_TYPES", "blend_step", "create_bside_v2_image", "validate_v2_parameters"]
