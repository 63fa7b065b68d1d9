"""Single entry point that routes a document to the matching converter."""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .adf import adf_to_markdown, adf_to_plain_text
from .config import ConverterSettings, resolve_settings
from .errors import UnsupportedConversionError
from .logging_config import get_logger
from .storage import storage_format_to_markdown, storage_format_to_plain_text

logger = get_logger(__name__)


class SourceFormat(str, Enum):
    ADF = "adf"
    STORAGE = "storage"


class TargetFormat(str, Enum):
    TEXT = "text"
    MARKDOWN = "markdown"


_Converter = Callable[[Any, Optional[Mapping[str, str]], ConverterSettings], str]

CONVERTERS: Dict[Tuple[SourceFormat, TargetFormat], _Converter] = {
    (SourceFormat.ADF, TargetFormat.TEXT): lambda value, paths, settings: adf_to_plain_text(
        value, settings
    ),
    (SourceFormat.ADF, TargetFormat.MARKDOWN): lambda value, paths, settings: adf_to_markdown(
        value, paths, settings
    ),
    (SourceFormat.STORAGE, TargetFormat.TEXT): lambda value, paths, settings: (
        storage_format_to_plain_text(value, settings)
    ),
    (SourceFormat.STORAGE, TargetFormat.MARKDOWN): lambda value, paths, settings: (
        storage_format_to_markdown(value, paths)
    ),
}


def _coerce_format(enum_type: type, value: Any, role: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        logger.error("Unsupported %s format %r", role, value)
        raise UnsupportedConversionError(
            f"Unsupported {role} format '{value}'. Expected one of: {choices}.",
            context={role: value},
        ) from None


def convert(
    value: Any,
    source: SourceFormat | str,
    target: TargetFormat | str,
    attachment_paths: Optional[Mapping[str, str]] = None,
    settings: Optional[ConverterSettings] = None,
) -> str:
    """Convert ``value`` from ``source`` format to ``target`` format."""

    source_format = _coerce_format(SourceFormat, source, "source")
    target_format = _coerce_format(TargetFormat, target, "target")
    converter = CONVERTERS[(source_format, target_format)]
    return converter(value, attachment_paths, resolve_settings(settings))


__all__ = ["SourceFormat", "TargetFormat", "CONVERTERS", "convert"]
