"""Configuration loading for declguard."""

from declguard.config.loader import (
    build_config,
    build_engine_from_config,
    generate_default_config,
    load_config,
    render_config,
    validate_config_file,
)

__all__ = [
    "build_config",
    "build_engine_from_config",
    "generate_default_config",
    "load_config",
    "render_config",
    "validate_config_file",
]
