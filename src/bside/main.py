"""Command-line entry point for rendering B-Side images from files."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

from bside.compare import COMPARISON_KINDS, render_comparison
from bside.config import Config, load_config, preset_names
from bside.diagnostics import DiagnosticsTracker, Timer
from bside.errors import BSideError
from bside.io import RESIZE_FILTERS, load_bitmap, save_bitmap
from bside.render import render_v1, render_v2
from bside.scheduler import RunControl
from bside.v2 import BLEND_TYPES


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", type=Path, required=True, help="Path to the source image")
    parser.add_argument("--output", type=Path, required=True, help="Path of the PNG to write")
    parser.add_argument("--config", type=Path, help="Optional JSON config path")
    parser.add_argument(
        "--preset",
        type=str,
        default="balanced",
        choices=list(preset_names()),
        help="Quality preset",
    )
    parser.add_argument("--timeout", type=float, help="Abort the render after this many seconds")
    parser.add_argument("--profile-output", type=Path, help="Write render timings to JSON/CSV")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="B-Side image renderer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    v1 = subparsers.add_parser("v1", help="Triangle reconstruction")
    _add_common(v1)
    v1.add_argument("--scale", type=int, help="Canvas pixels per source pixel")
    v1.add_argument("--reach", type=int, help="How many pixels a triangle may grow across")
    v1.add_argument("--accurate", action="store_true", help="Compare colors with delta E")
    v1.add_argument("--threshold", type=float, help="Delta E threshold for --accurate")
    v1.add_argument("--minutia", type=int, choices=[-1, 1], help="Group paint order")
    v1.add_argument("--edges", choices=["none", "lazy", "slow"], help="Edge assist mode")
    v1.add_argument("--prepare-scale", type=float, help="Shrink the input by this factor first")
    v1.add_argument("--colors", type=int, help="Quantize the input to this many colors first")

    v2 = subparsers.add_parser("v2", help="Iterative blend")
    _add_common(v2)
    v2.add_argument("--threshold", type=float, help="Similarity threshold (0-100)")
    v2.add_argument("--quality", type=int, help="Number of doubling iterations")
    v2.add_argument("--blend", choices=list(BLEND_TYPES), help="Blend strategy")
    v2.add_argument("--filter", choices=list(RESIZE_FILTERS), help="Pre-downscale filter")
    v2.add_argument("--seed", type=int, help="Seed for the random blend")

    compare = subparsers.add_parser("compare", help="Side-by-side parameter comparison")
    _add_common(compare)
    compare.add_argument("kind", choices=list(COMPARISON_KINDS), help="Comparison to render")
    compare.add_argument("--steps", type=int, default=5, help="Threshold steps")
    compare.add_argument("--min", type=float, default=1.0, help="Lowest threshold")
    compare.add_argument("--max", type=float, default=50.0, help="Highest threshold")

    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace, mapping: Dict[str, str]) -> Dict[str, Any]:
    values = {}
    for arg_name, field_name in mapping.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            values[field_name] = value
    return values


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Return a copy of ``config`` with any CLI overrides applied."""

    if args.command == "v1":
        v1_values = _overrides(
            args,
            {
                "scale": "scale",
                "reach": "pixel_reach",
                "threshold": "similarity_threshold",
                "minutia": "minutia",
                "edges": "edge_mode",
            },
        )
        if args.accurate:
            v1_values["accurate"] = True
        prepare_values = _overrides(args, {"prepare_scale": "resize_scale", "colors": "colors"})
        config = replace(
            config,
            v1=replace(config.v1, **v1_values),
            prepare=replace(config.prepare, **prepare_values),
        )
    elif args.command == "v2":
        v2_values = _overrides(
            args,
            {
                "threshold": "similar_threshold",
                "quality": "max_iteration",
                "blend": "blend_type",
                "filter": "resize_filter",
                "seed": "seed",
            },
        )
        config = replace(config, v2=replace(config.v2, **v2_values))
    if args.timeout is not None:
        config = replace(config, limits=replace(config.limits, render_timeout=args.timeout))
    return config


def main(argv: Optional[list] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = apply_overrides(load_config(args.config, args.preset), args)
    tracker = DiagnosticsTracker(profile_output=args.profile_output)
    control = RunControl.with_timeout(config.limits.render_timeout)

    source = load_bitmap(args.input)
    print(f"Source size: {source.width}x{source.height}")
    try:
        with Timer() as timer:
            if args.command == "v1":
                output = render_v1(source, config.v1, config.limits, config.prepare, control)
            elif args.command == "v2":
                output = render_v2(source, config.v2, config.limits, control)
            else:
                output = render_comparison(
                    args.kind,
                    source,
                    config,
                    tracker=tracker,
                    control=control,
                    steps=args.steps,
                    minimum=args.min,
                    maximum=args.max,
                )
    except BSideError as exc:
        raise SystemExit(f"Render failed: {exc}") from exc

    if args.command != "compare":
        tracker.track(args.command, timer.elapsed, output)
    tracker.export()
    save_bitmap(args.output, output)
    print(f"Output size: {output.width}x{output.height} ({timer.elapsed * 1000.0:.1f}ms)")
    print(f"Wrote {args.output}")


if __name__ == "__main__":
    main()
