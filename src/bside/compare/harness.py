"""Side-by-side comparisons of parameter variants for visual review."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

from bside.config.schema import Config, LimitsConfig, PrepareConfig, V1Config, V2Config
from bside.data import Bitmap
from bside.diagnostics import DiagnosticsTracker, Timer
from bside.errors import ParameterError
from bside.io.images import resize_bitmap
from bside.render import render_v1, render_v2
from bside.v2 import BLEND_TYPES

if TYPE_CHECKING:
    from bside.scheduler.control import RunControl

logger = logging.getLogger(__name__)

DEFAULT_FILTERS = ("bilinear", "bicubic", "lanczos")
GRID_FILTERS = ("nearest", "box", "bilinear", "hamming", "bicubic", "lanczos")


def tile_horizontal(bitmaps: Sequence[Bitmap]) -> Bitmap:
    """Place bitmaps left to right, top-aligned, on a transparent canvas."""

    if not bitmaps:
        raise ParameterError("Nothing to tile.")
    canvas = Bitmap.blank(sum(b.width for b in bitmaps), max(b.height for b in bitmaps))
    offset = 0
    for bitmap in bitmaps:
        canvas.paste(bitmap, offset, 0)
        offset += bitmap.width
    return canvas


def tile_vertical(bitmaps: Sequence[Bitmap]) -> Bitmap:
    """Place bitmaps top to bottom, left-aligned, on a transparent canvas."""

    if not bitmaps:
        raise ParameterError("Nothing to tile.")
    canvas = Bitmap.blank(max(b.width for b in bitmaps), sum(b.height for b in bitmaps))
    offset = 0
    for bitmap in bitmaps:
        canvas.paste(bitmap, 0, offset)
        offset += bitmap.height
    return canvas


def _timed(label: str, render: Callable[[], Bitmap], tracker: Optional[DiagnosticsTracker]) -> Bitmap:
    with Timer() as timer:
        output = render()
    logger.info("%s: %.1fms", label, timer.elapsed * 1000.0)
    if tracker is not None:
        tracker.track(label, timer.elapsed, output)
    return output


def compare_versions(
    bitmap: Bitmap,
    v1: V1Config = V1Config(),
    v2: V2Config = V2Config(),
    limits: Optional[LimitsConfig] = None,
    prepare: Optional[PrepareConfig] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """V1 (left) next to V2 (right) for the same input."""

    first = _timed("Version 1", lambda: render_v1(bitmap, v1, limits, prepare, control), tracker)
    second = _timed("Version 2", lambda: render_v2(bitmap, v2, limits, control), tracker)
    return tile_horizontal([first, second])


def compare_with_source(
    bitmap: Bitmap,
    v1: V1Config = V1Config(),
    limits: Optional[LimitsConfig] = None,
    prepare: Optional[PrepareConfig] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """V1 output next to the untouched source resized to the same size."""

    output = _timed("Version 1", lambda: render_v1(bitmap, v1, limits, prepare, control), tracker)
    original = resize_bitmap(bitmap, output.width, output.height, "nearest")
    return tile_horizontal([output, original])


def compare_blend_types(
    bitmap: Bitmap,
    v2: V2Config = V2Config(),
    limits: Optional[LimitsConfig] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """One V2 render per blend strategy, left to right."""

    outputs = [
        _timed(
            blend_type.upper(),
            lambda blend_type=blend_type: render_v2(
                bitmap, replace(v2, blend_type=blend_type), limits, control
            ),
            tracker,
        )
        for blend_type in BLEND_TYPES
    ]
    return tile_horizontal(outputs)


def compare_thresholds(
    bitmap: Bitmap,
    v2: V2Config = V2Config(),
    steps: int = 5,
    minimum: float = 1.0,
    maximum: float = 50.0,
    limits: Optional[LimitsConfig] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """V2 renders with evenly spaced similarity thresholds from ``minimum``."""

    if steps < 1:
        raise ParameterError(f"steps must be >= 1, got {steps}")
    if minimum > maximum:
        raise ParameterError(f"minimum ({minimum}) must not exceed maximum ({maximum})")
    increment = (maximum - minimum) / steps
    outputs: List[Bitmap] = []
    for step in range(steps):
        threshold = minimum + increment * step
        outputs.append(
            _timed(
                f"Threshold {threshold:.2f}",
                lambda threshold=threshold: render_v2(
                    bitmap, replace(v2, similar_threshold=threshold), limits, control
                ),
                tracker,
            )
        )
    return tile_horizontal(outputs)


def compare_resize_filters(
    bitmap: Bitmap,
    v2: V2Config = V2Config(),
    filters: Sequence[str] = DEFAULT_FILTERS,
    limits: Optional[LimitsConfig] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """V2 renders that differ only in the pre-downscale filter."""

    outputs = [
        _timed(
            name.upper(),
            lambda name=name: render_v2(bitmap, replace(v2, resize_filter=name), limits, control),
            tracker,
        )
        for name in filters
    ]
    return tile_horizontal(outputs)


def compare_blends_and_filters(
    bitmap: Bitmap,
    v2: V2Config = V2Config(),
    filters: Sequence[str] = GRID_FILTERS,
    limits: Optional[LimitsConfig] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
) -> Bitmap:
    """Grid with one row per blend strategy and one column per filter."""

    rows = [
        compare_resize_filters(
            bitmap, replace(v2, blend_type=blend_type), filters, limits, tracker, control
        )
        for blend_type in BLEND_TYPES
    ]
    return tile_vertical(rows)


COMPARISON_KINDS = ("versions", "source", "blends", "thresholds", "filters", "grid")


def render_comparison(
    kind: str,
    bitmap: Bitmap,
    config: Config,
    tracker: Optional[DiagnosticsTracker] = None,
    control: Optional["RunControl"] = None,
    **options: object,
) -> Bitmap:
    """Dispatch a named comparison using the settings in ``config``."""

    limits = config.limits
    builders: Dict[str, Callable[[], Bitmap]] = {
        "versions": lambda: compare_versions(
            bitmap, config.v1, config.v2, limits, config.prepare, tracker, control
        ),
        "source": lambda: compare_with_source(
            bitmap, config.v1, limits, config.prepare, tracker, control
        ),
        "blends": lambda: compare_blend_types(bitmap, config.v2, limits, tracker, control),
        "thresholds": lambda: compare_thresholds(
            bitmap,
            config.v2,
            steps=int(options.get("steps", 5)),  # type: ignore[arg-type]
            minimum=float(options.get("minimum", 1.0)),  # type: ignore[arg-type]
            maximum=float(options.get("maximum", 50.0)),  # type: ignore[arg-type]
            limits=limits,
            tracker=tracker,
            control=control,
        ),
        "filters": lambda: compare_resize_filters(
            bitmap, config.v2, limits=limits, tracker=tracker, control=control
        ),
        "grid": lambda: compare_blends_and_filters(
            bitmap, config.v2, limits=limits, tracker=tracker, control=control
        ),
    }
    if kind not in builders:
        raise ParameterError(f"Unknown comparison '{kind}'. Available: {', '.join(COMPARISON_KINDS)}")
    return builders[kind]()
