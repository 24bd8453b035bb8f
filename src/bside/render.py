"""Config-driven entry points for both B-Side algorithms."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from bside.config.schema import LimitsConfig, PrepareConfig, V1Config, V2Config
from bside.data import Bitmap
from bside.edges import EDGE_MODES, detect_edges, validate_stencil
from bside.errors import ParameterError, ResourceLimitError
from bside.io.images import prepare_for_v1, prepared_size
from bside.v1 import create_bside_image, validate_v1_parameters
from bside.v2 import create_bside_v2_image

if TYPE_CHECKING:
    from bside.scheduler.control import RunControl


def _check_v1_limits(v1: V1Config, limits: LimitsConfig) -> None:
    if v1.scale > limits.max_scale:
        raise ResourceLimitError(f"scale {v1.scale} exceeds the limit of {limits.max_scale}.")
    if v1.pixel_reach > limits.max_pixel_reach:
        raise ResourceLimitError(
            f"pixel_reach {v1.pixel_reach} exceeds the limit of {limits.max_pixel_reach}."
        )


def render_v1(
    bitmap: Bitmap,
    v1: V1Config = V1Config(),
    limits: Optional[LimitsConfig] = None,
    prepare: Optional[PrepareConfig] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """Prepare the input if requested, build the edge assist, then run V1."""

    if v1.edge_mode != "none" and v1.edge_mode not in EDGE_MODES:
        raise ParameterError(
            f"Unknown edge mode '{v1.edge_mode}'. Available: none, {', '.join(EDGE_MODES)}"
        )
    if v1.edge_mode != "none":
        validate_stencil(v1.edge_stencil)
    if limits is not None:
        _check_v1_limits(v1, limits)
    max_pixels = limits.max_source_pixels if limits is not None else None

    if prepare is not None:
        width, height = prepared_size(bitmap.width, bitmap.height, prepare.resize_scale)
        if max_pixels is not None and width * height > max_pixels:
            raise ResourceLimitError(
                f"Prepared source would be {width}x{height} ({width * height} pixels); "
                f"the V1 limit is {max_pixels}."
            )
        bitmap = prepare_for_v1(bitmap, prepare.resize_scale, prepare.colors, prepare.resize_filter)
    validate_v1_parameters(
        bitmap, v1.scale, v1.pixel_reach, v1.similarity_threshold, v1.minutia, max_pixels
    )

    edge_image = None
    if v1.edge_mode != "none":
        edge_image = detect_edges(bitmap, v1.edge_stencil, mode=v1.edge_mode)
    return create_bside_image(
        bitmap,
        scale=v1.scale,
        pixel_reach=v1.pixel_reach,
        accurate=v1.accurate,
        threshold=v1.similarity_threshold,
        edge_image=edge_image,
        minutia=v1.minutia,
        control=control,
        max_pixels=max_pixels,
    )


def render_v2(
    bitmap: Bitmap,
    v2: V2Config = V2Config(),
    limits: Optional[LimitsConfig] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """Run V2 with the configured ceilings applied."""

    return create_bside_v2_image(
        bitmap,
        similar_threshold=v2.similar_threshold,
        max_iteration=v2.max_iteration,
        blend_type=v2.blend_type,
        resize_filter=v2.resize_filter,
        max_pixels=limits.v2_max_pixels if limits is not None else None,
        max_iterations=limits.max_iterations if limits is not None else None,
        seed=v2.seed,
        control=control,
    )
