"""Config loader for declguard.

Loads ``declguard.yaml``, expands ``${VAR}`` and ``${VAR:-fallback}`` references,
validates the pattern and suffix lists, and can build a ready engine.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from declguard.core.exceptions import ConfigurationError
from declguard.core.models import PolicyConfig

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}")

DEFAULT_CONFIG_NAME = "declguard.yaml"
SECTION = "declguard"


# ────────────────────────────────────────────────────────────────────
# Loaders
# ────────────────────────────────────────────────────────────────────


def _substitute(text: str, source: str | None) -> str:
    """Resolve ``${NAME}`` and ``${NAME:-fallback}`` inside one string."""

    def _lookup(m: re.Match) -> str:
        name, fallback = m.group("name"), m.group("fallback")
        value = os.environ.get(name)
        if value is not None:
            return value
        if fallback is None:
            raise ConfigurationError(f"Environment variable '{name}' is not set", source)
        return fallback

    return _VAR_RE.sub(_lookup, text)


def _expand_vars(data: Any, source: str | None) -> Any:
    # Keys are left alone; only pattern and suffix values are expanded
    if isinstance(data, str):
        return _substitute(data, source)
    if isinstance(data, list):
        return [_expand_vars(item, source) for item in data]
    if isinstance(data, dict):
        return {key: _expand_vars(value, source) for key, value in data.items()}
    return data


def _split_env_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", str(path)) from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("Config root must be a mapping", str(path))
    data = raw.get(SECTION, raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{SECTION}' section must be a mapping", str(path))
    return _expand_vars(data, str(path))


def load_config(
    path: str | Path | None = None,
    env_prefix: str = "DECLGUARD_",
) -> PolicyConfig:
    """Load config from YAML with env-var expansion.

    Search order:
    1. *path* argument
    2. ``DECLGUARD_CONFIG`` env var
    3. ``./declguard.yaml``
    4. Defaults

    ``DECLGUARD_ALLOWED_FILE_PATTERNS`` and ``DECLGUARD_ALLOWED_TYPE_SUFFIXES``
    (comma separated) override the file values.
    """
    if path is None:
        path = os.environ.get(f"{env_prefix}CONFIG")
    if path is None:
        candidate = Path(DEFAULT_CONFIG_NAME)
        if candidate.exists():
            path = candidate

    data: dict[str, Any] = {}
    source: str | None = None
    if path is not None:
        path = Path(path)
        source = str(path)
        if not path.exists():
            raise ConfigurationError("Config file not found", source)
        data = _read_yaml(path)
        logger.debug("Loaded declguard config from %s", path)
    else:
        logger.debug("No declguard config file found; using defaults")

    env_patterns = os.environ.get(f"{env_prefix}ALLOWED_FILE_PATTERNS")
    if env_patterns is not None:
        data = {**data, "allowedFilePatterns": _split_env_list(env_patterns)}
        data.pop("allowed_file_patterns", None)

    env_suffixes = os.environ.get(f"{env_prefix}ALLOWED_TYPE_SUFFIXES")
    if env_suffixes is not None:
        data = {**data, "allowedTypeSuffixes": _split_env_list(env_suffixes)}
        data.pop("allowed_type_suffixes", None)

    return build_config(data, file_path=source)


def build_config(data: dict[str, Any] | None, file_path: str | None = None) -> PolicyConfig:
    """Map raw options to :class:`PolicyConfig`."""
    return PolicyConfig.from_mapping(data, file_path)


# ────────────────────────────────────────────────────────────────────
# Engine builders
# ────────────────────────────────────────────────────────────────────


def build_engine_from_config(config: PolicyConfig):  # noqa: ANN201
    """Create a configured :class:`PolicyEngine`."""
    from declguard.engine.policy import PolicyEngine

    return PolicyEngine(config)


# ────────────────────────────────────────────────────────────────────
# Validation helpers
# ────────────────────────────────────────────────────────────────────


def validate_config_file(path: str | Path) -> list[str]:
    """Validate a config file.

    Returns a list of error messages (empty → valid).
    """
    path = Path(path)
    if not path.exists():
        return [f"File not found: {path}"]

    try:
        data = _read_yaml(path)
        config = build_config(data, file_path=str(path))
        build_engine_from_config(config)
    except ConfigurationError as e:
        return [str(e)]
    return []


def render_config(config: PolicyConfig) -> str:
    """Render resolved config as YAML string."""
    d = {
        SECTION: {
            "allowedFilePatterns": list(config.allowed_file_patterns),
            "allowedTypeSuffixes": list(config.allowed_type_suffixes),
        }
    }
    return yaml.dump(d, default_flow_style=False, sort_keys=False)


def generate_default_config() -> str:
    """Generate default declguard.yaml content."""
    return render_config(PolicyConfig())
