"""Convert Atlassian ADF and Confluence Storage Format to text and Markdown."""
from __future__ import annotations

from .adf import adf_to_markdown, adf_to_plain_text, extract_node
from .config import ConverterSettings, load_settings
from .convert import SourceFormat, TargetFormat, convert
from .entities import decode_entities
from .errors import AtlasConvertError, ConfigError, UnsupportedConversionError
from .storage import storage_format_to_markdown, storage_format_to_plain_text
from .tables import is_table_convertible

__version__ = "0.1.0"

__all__ = [
    "AtlasConvertError",
    "ConfigError",
    "ConverterSettings",
    "SourceFormat",
    "TargetFormat",
    "UnsupportedConversionError",
    "adf_to_markdown",
    "adf_to_plain_text",
    "convert",
    "decode_entities",
    "extract_node",
    "is_table_convertible",
    "load_settings",
    "storage_format_to_markdown",
    "storage_format_to_plain_text",
]
