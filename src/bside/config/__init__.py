"""Configuration loading and presets."""

from bside.config.schema import (
    PLUS_STENCIL,
    Config,
    LimitsConfig,
    PrepareConfig,
    ServiceConfig,
    V1Config,
    V2Config,
    load_config,
    preset_config,
    preset_names,
)

__all__ = [
    "PLUS_STENCIL",
    "Config",
    "LimitsConfig",
    "PrepareConfig",
    "ServiceConfig",
    "V1Config",
    "V2Config",
    "load_config",
    "preset_config",
    "preset_names",
]
