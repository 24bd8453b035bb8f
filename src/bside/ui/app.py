"""Flask routes that serve B-Side renders of uploaded images."""

from __future__ import annotations

import io
from dataclasses import asdict, replace
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request, send_file

from bside.compare import COMPARISON_KINDS, render_comparison
from bside.config import Config, PrepareConfig, V1Config, V2Config, load_config
from bside.data import Bitmap
from bside.errors import ParameterError, RenderCancelled, ResourceLimitError
from bside.io import decode_image, encode_png
from bside.render import render_v1, render_v2
from bside.scheduler import RenderPool

_TRUE_VALUES = ("", "1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ParameterError(f"Failed to parse ?{name}= as an integer.") from exc


def _float_arg(name: str, default: float) -> float:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ParameterError(f"Failed to parse ?{name}= as a number.") from exc


def _bool_arg(name: str, default: bool) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ParameterError(f"Failed to parse ?{name}= as a boolean.")


def _v1_from_args(base: V1Config) -> V1Config:
    return replace(
        base,
        scale=_int_arg("scale", base.scale),
        pixel_reach=_int_arg("reach", base.pixel_reach),
        accurate=_bool_arg("accurate", base.accurate),
        similarity_threshold=_float_arg("threshold", base.similarity_threshold),
        minutia=_int_arg("minutia", base.minutia),
        edge_mode=request.args.get("edges", base.edge_mode),
    )


def _v2_from_args(base: V2Config) -> V2Config:
    return replace(
        base,
        similar_threshold=_float_arg("threshold", base.similar_threshold),
        max_iteration=_int_arg("quality", base.max_iteration),
        blend_type=request.args.get("blend", base.blend_type),
        resize_filter=request.args.get("filter", base.resize_filter),
        seed=_int_arg("seed", base.seed),
    )


def _prepare_from_args(base: PrepareConfig) -> PrepareConfig:
    return replace(
        base,
        resize_scale=_float_arg("prepare_scale", base.resize_scale),
        colors=_int_arg("colors", base.colors),
    )


def _uploaded_bitmap() -> Bitmap:
    upload = request.files.get("image")
    if upload is None:
        raise ParameterError("No image supplied; send it as the 'image' form field.")
    return decode_image(upload.read())


def _png_response(bitmap: Bitmap) -> Response:
    return send_file(io.BytesIO(encode_png(bitmap)), mimetype="image/png")


def _error(exc: Exception, status: int) -> Tuple[Response, int]:
    return jsonify({"success": False, "message": str(exc)}), status


def create_app(config: Optional[Config] = None, pool: Optional[RenderPool] = None) -> Flask:
    config = config or load_config(None, "balanced")
    pool = pool or RenderPool(config.service.workers, config.limits.render_timeout)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.service.max_upload_bytes
    app.extensions["bside_config"] = config
    app.extensions["bside_pool"] = pool

    @app.errorhandler(ParameterError)
    def parameter_error(exc: ParameterError) -> Tuple[Response, int]:
        return _error(exc, 400)

    @app.errorhandler(ResourceLimitError)
    def resource_error(exc: ResourceLimitError) -> Tuple[Response, int]:
        return _error(exc, 413)

    @app.errorhandler(RenderCancelled)
    def cancelled_error(exc: RenderCancelled) -> Tuple[Response, int]:
        return _error(exc, 503)

    @app.errorhandler(413)
    def upload_too_large(exc: Exception) -> Tuple[Response, int]:
        return _error(exc, 413)

    @app.route("/")
    def index() -> Response:
        return jsonify(
            {
                "routes": {
                    "/bside/v1": "POST an 'image' upload; query scale, reach, accurate, threshold, "
                    "minutia, edges, prepare_scale, colors",
                    "/bside/v2": "POST an 'image' upload; query threshold, quality, blend, filter, seed",
                    "/bside/compare/<kind>": f"POST an 'image' upload; kind is one of "
                    f"{', '.join(COMPARISON_KINDS)}",
                    "/status": "GET worker pool counters",
                },
                "preset": config.preset,
                "v1": asdict(config.v1),
                "v2": asdict(config.v2),
                "limits": asdict(config.limits),
            }
        )

    @app.route("/bside/v1", methods=["POST"])
    def bside_v1() -> Response:
        v1 = _v1_from_args(config.v1)
        prepare = _prepare_from_args(config.prepare)
        bitmap = _uploaded_bitmap()
        return _png_response(pool.run(render_v1, bitmap, v1, config.limits, prepare))

    @app.route("/bside/v2", methods=["POST"])
    def bside_v2() -> Response:
        v2 = _v2_from_args(config.v2)
        bitmap = _uploaded_bitmap()
        return _png_response(pool.run(render_v2, bitmap, v2, config.limits))

    @app.route("/bside/compare/<kind>", methods=["POST"])
    def bside_compare(kind: str) -> Response:
        if kind not in COMPARISON_KINDS:
            raise ParameterError(f"Unknown comparison '{kind}'. Available: {', '.join(COMPARISON_KINDS)}")
        request_config = replace(
            config,
            v1=_v1_from_args(config.v1),
            v2=_v2_from_args(config.v2),
            prepare=_prepare_from_args(config.prepare),
        )
        options = {
            "steps": _int_arg("steps", 5),
            "minimum": _float_arg("min", 1.0),
            "maximum": _float_arg("max", 50.0),
        }
        bitmap = _uploaded_bitmap()
        output = pool.run(render_comparison, kind, bitmap, request_config, **options)
        return _png_response(output)

    @app.route("/status")
    def status() -> Response:
        return jsonify({"success": True, "pool": pool.stats()})

    return app
