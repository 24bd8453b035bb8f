"""Configuration schema and loading utilities."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from bside.errors import ParameterError

Stencil = Tuple[Tuple[int, int, int], Tuple[int, int, int], Tuple[int, int, int]]

PLUS_STENCIL: Stencil = (
    (0, 1, 0),
    (1, 0, 1),
    (0, 1, 0),
)


@dataclass(frozen=True)
class V1Config:
    """Settings for the triangle reconstruction (V1) algorithm."""

    scale: int = 4
    pixel_reach: int = 3
    accurate: bool = False
    similarity_threshold: float = 20.0
    minutia: int = -1
    edge_mode: str = "none"
    edge_stencil: Stencil = PLUS_STENCIL


@dataclass(frozen=True)
class V2Config:
    """Settings for the iterative blend (V2) algorithm."""

    similar_threshold: float = 5.0
    max_iteration: int = 3
    blend_type: str = "dithered"
    resize_filter: str = "bicubic"
    seed: int = 0


@dataclass(frozen=True)
class PrepareConfig:
    """Optional shrink/quantize pass applied before V1.

    A ``resize_scale`` of 1.0 and ``colors`` of 0 leave the input untouched.
    """

    resize_scale: float = 1.0
    colors: int = 0
    resize_filter: str = "bicubic"


@dataclass(frozen=True)
class LimitsConfig:
    """Hard ceilings checked before any render starts."""

    max_source_pixels: int = 256 * 256
    v2_max_pixels: int = 200 * 200
    max_iterations: int = 6
    max_scale: int = 32
    max_pixel_reach: int = 16
    render_timeout: float = 30.0


@dataclass(frozen=True)
class ServiceConfig:
    """HTTP service and worker pool settings."""

    host: str = "127.0.0.1"
    port: int = 5000
    workers: int = 2
    max_upload_bytes: int = 8 * 1024 * 1024


@dataclass(frozen=True)
class Config:
    """Top-level configuration for the B-Side service."""

    preset: str = "balanced"
    v1: V1Config = field(default_factory=V1Config)
    v2: V2Config = field(default_factory=V2Config)
    prepare: PrepareConfig = field(default_factory=PrepareConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


_PRESETS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "fast": {
        "v1": {"scale": 2, "pixel_reach": 2},
        "v2": {"max_iteration": 2},
    },
    "balanced": {
        "v1": {"scale": 4, "pixel_reach": 3},
        "v2": {"max_iteration": 3},
    },
    "high_quality": {
        "v1": {"scale": 8, "pixel_reach": 4, "accurate": True},
        "v2": {"max_iteration": 4, "blend_type": "gradient"},
    },
}


def preset_names() -> Tuple[str, ...]:
    return tuple(_PRESETS)


def _merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overrides into base without mutating either input."""

    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dict(merged[key], value)
        else:
            merged[key] = value
    return merged


def _as_stencil(raw: Any) -> Stencil:
    # Neighbourhood contents are validated by the edge detector.
    try:
        stencil = tuple(tuple(int(cell) for cell in row) for row in raw)
    except (TypeError, ValueError) as exc:
        raise ParameterError(f"Edge stencil must be a 3x3 grid of integers, got {raw!r}") from exc
    if len(stencil) != 3 or any(len(row) != 3 for row in stencil):
        raise ParameterError(f"Edge stencil must be exactly 3x3, got {raw!r}")
    return stencil  # type: ignore[return-value]


def _base_dict(preset_name: str) -> Dict[str, Any]:
    key = preset_name.lower()
    if key not in _PRESETS:
        raise ValueError(f"Unknown preset '{preset_name}'. Available: {', '.join(_PRESETS)}")
    base = {
        "preset": key,
        "v1": {
            "scale": 4,
            "pixel_reach": 3,
            "accurate": False,
            "similarity_threshold": 20.0,
            "minutia": -1,
            "edge_mode": "none",
            "edge_stencil": [list(row) for row in PLUS_STENCIL],
        },
        "v2": {
            "similar_threshold": 5.0,
            "max_iteration": 3,
            "blend_type": "dithered",
            "resize_filter": "bicubic",
            "seed": 0,
        },
        "prepare": {"resize_scale": 1.0, "colors": 0, "resize_filter": "bicubic"},
        "limits": {
            "max_source_pixels": 256 * 256,
            "v2_max_pixels": 200 * 200,
            "max_iterations": 6,
            "max_scale": 32,
            "max_pixel_reach": 16,
            "render_timeout": 30.0,
        },
        "service": {
            "host": "127.0.0.1",
            "port": 5000,
            "workers": 2,
            "max_upload_bytes": 8 * 1024 * 1024,
        },
    }
    return _merge_dict(base, _PRESETS[key])


def config_from_dict(merged: Dict[str, Any]) -> Config:
    """Build a Config from a fully merged dictionary."""

    v1 = merged["v1"]
    v2 = merged["v2"]
    prepare = merged["prepare"]
    limits = merged["limits"]
    service = merged["service"]
    return Config(
        preset=str(merged["preset"]),
        v1=V1Config(
            scale=int(v1["scale"]),
            pixel_reach=int(v1["pixel_reach"]),
            accurate=bool(v1["accurate"]),
            similarity_threshold=float(v1["similarity_threshold"]),
            minutia=int(v1["minutia"]),
            edge_mode=str(v1["edge_mode"]),
            edge_stencil=_as_stencil(v1["edge_stencil"]),
        ),
        v2=V2Config(
            similar_threshold=float(v2["similar_threshold"]),
            max_iteration=int(v2["max_iteration"]),
            blend_type=str(v2["blend_type"]),
            resize_filter=str(v2["resize_filter"]),
            seed=int(v2["seed"]),
        ),
        prepare=PrepareConfig(
            resize_scale=float(prepare["resize_scale"]),
            colors=int(prepare["colors"]),
            resize_filter=str(prepare["resize_filter"]),
        ),
        limits=LimitsConfig(
            max_source_pixels=int(limits["max_source_pixels"]),
            v2_max_pixels=int(limits["v2_max_pixels"]),
            max_iterations=int(limits["max_iterations"]),
            max_scale=int(limits["max_scale"]),
            max_pixel_reach=int(limits["max_pixel_reach"]),
            render_timeout=float(limits["render_timeout"]),
        ),
        service=ServiceConfig(
            host=str(service["host"]),
            port=int(service["port"]),
            workers=int(service["workers"]),
            max_upload_bytes=int(service["max_upload_bytes"]),
        ),
    )


def preset_config(name: str) -> Config:
    """Return the configuration for a named preset."""

    return config_from_dict(_base_dict(name))


def load_config(path: Optional[Path], preset_name: str = "balanced") -> Config:
    """Load configuration from JSON and apply preset defaults."""

    if path:
        raw = json.loads(Path(path).read_text())
        preset_name = str(raw.get("preset", preset_name))
        merged = _merge_dict(_base_dict(preset_name), raw)
    else:
        merged = _base_dict(preset_name)
    return config_from_dict(merged)
