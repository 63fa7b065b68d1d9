"""Exception hierarchy for the conversion engine."""
from __future__ import annotations

from typing import Any


class AtlasConvertError(RuntimeError):
    """Base exception that carries structured context."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class UnsupportedConversionError(AtlasConvertError):
    """Raised when a source/target format pair has no converter."""


class ConfigError(AtlasConvertError):
    """Raised when converter settings cannot be loaded or validated."""


__all__ = [
    "AtlasConvertError",
    "UnsupportedConversionError",
    "ConfigError",
]
