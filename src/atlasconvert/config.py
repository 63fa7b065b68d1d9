"""Settings for the conversion engine.

Settings are layered from lowest to highest precedence: built-in defaults, an
optional YAML file, ``ATLASCONVERT_*`` environment variables, and explicit
overrides passed by the caller.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)

ENV_PREFIX = "ATLASCONVERT_"

# Keys whose values must be integers when sourced from YAML or the environment.
INTEGER_KEYS = {"max_adf_depth"}

DEFAULT_MAX_ADF_DEPTH = 100

# Every ADF level costs a few interpreter frames while parsing and rendering, so
# the nesting cap has to stay well under the default recursion limit.
MAX_ADF_DEPTH = 150


@dataclass(frozen=True)
class ConverterSettings:
    """Placeholders and limits shared by every converter."""

    attachment_placeholder: str = "[attachment]"
    mention_placeholder: str = "@user"
    image_placeholder: str = "[image: {filename}]"
    user_placeholder: str = "[user]"
    max_adf_depth: int = DEFAULT_MAX_ADF_DEPTH
    log_level: Optional[str] = None

    def __post_init__(self) -> None:
        depth = self.max_adf_depth
        if isinstance(depth, bool) or not isinstance(depth, int) or not 1 <= depth <= MAX_ADF_DEPTH:
            raise ConfigError(
                f"Setting 'max_adf_depth' must be an integer between 1 and {MAX_ADF_DEPTH}.",
                context={"max_adf_depth": depth},
            )

    def image_text(self, filename: str) -> str:
        """Return the plain-text stand-in for an embedded image."""

        return self.image_placeholder.replace("{filename}", filename)

    def as_dict(self) -> dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


DEFAULT_SETTINGS = ConverterSettings()

_KNOWN_KEYS = {item.name for item in fields(ConverterSettings)}


def load_yaml_settings(path: str | Path | None) -> dict:
    """Load settings from ``path``.

    A missing file yields an empty mapping; a file whose top level is not a
    mapping raises :class:`ConfigError`.
    """

    if not path:
        return {}

    yaml_path = Path(path)
    if not yaml_path.exists():
        logger.debug("Settings file %s not found; using defaults", yaml_path)
        return {}

    with yaml_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected top-level mapping in settings file '{yaml_path}',"
            f" but received {type(data).__name__}.",
            context={"path": str(yaml_path)},
        )

    section = data.get("atlasconvert", data)
    if not isinstance(section, dict):
        raise ConfigError(
            f"Expected 'atlasconvert' section in '{yaml_path}' to be a mapping.",
            context={"path": str(yaml_path)},
        )
    return section


def load_env_overrides(env: Mapping[str, str] | None = None) -> dict:
    """Return ``ATLASCONVERT_<KEY>`` overrides for known settings keys."""

    source = os.environ if env is None else env
    overrides: Dict[str, Any] = {}
    for key in sorted(_KNOWN_KEYS):
        env_key = f"{ENV_PREFIX}{key.upper()}"
        if env_key in source:
            overrides[key] = source[env_key]
    return overrides


def _coerce(key: str, value: Any) -> Any:
    if key in INTEGER_KEYS:
        if isinstance(value, bool):
            raise ConfigError(f"Setting '{key}' must be an integer.", context={key: value})
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"Unable to interpret integer value for '{key}' from '{value}'.",
                context={key: value},
            ) from exc
        return number
    if value is None:
        return None
    return str(value)


def merge_settings(*layers: Mapping[str, Any] | None) -> dict:
    """Merge settings mappings; later layers win."""

    merged: Dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if key not in _KNOWN_KEYS:
                logger.debug("Ignoring unknown setting %s", key)
                continue
            merged[key] = value
    return merged


def load_settings(
    path: str | Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ConverterSettings:
    """Build :class:`ConverterSettings` from YAML, environment and overrides."""

    merged = merge_settings(load_yaml_settings(path), load_env_overrides(env), overrides)
    values = {key: _coerce(key, value) for key, value in merged.items()}
    settings = replace(DEFAULT_SETTINGS, **values)
    if settings.log_level:
        configure_logging(settings.log_level)
    return settings


def resolve_settings(settings: ConverterSettings | None) -> ConverterSettings:
    return settings if settings is not None else DEFAULT_SETTINGS


__all__ = [
    "ConverterSettings",
    "DEFAULT_MAX_ADF_DEPTH",
    "DEFAULT_SETTINGS",
    "MAX_ADF_DEPTH",
    "load_settings",
    "load_yaml_settings",
    "load_env_overrides",
    "merge_settings",
    "resolve_settings",
]
