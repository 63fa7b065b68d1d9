"""Plain text from Confluence Storage Format.

The conversion is a fixed chain of regex rewrites over the raw markup, not a
parse. Each step sees the output of the previous one, so the order in
:func:`storage_format_to_plain_text` must not change.
"""
from __future__ import annotations

import re
from typing import Optional

from ..config import ConverterSettings, resolve_settings
from ..entities import decode_entities, insert_block_separators, normalize_whitespace, strip_tags
from ..logging_config import get_logger

logger = get_logger(__name__)

CDATA = re.compile(r"<!\[CDATA\[([\s\S]*?)]]>")
_TITLE_PARAMETER = re.compile(r'<ac:parameter[^>]*ac:name="title"[^>]*>([^<]*)</ac:parameter>')
_IMAGE = re.compile(
    r'<ac:image[^>]*>[\s\S]*?<ri:attachment\s+ri:filename="([^"]*)"[^>]*/>[\s\S]*?</ac:image>'
)
_USER_LINK = re.compile(r"<ac:link[^>]*>[\s\S]*?<ri:user[^>]*/>[\s\S]*?</ac:link>")


def unwrap_cdata(markup: str) -> str:
    return CDATA.sub(r"\1", markup)


def extract_title_parameters(markup: str) -> str:
    return _TITLE_PARAMETER.sub(r"\1", markup)


def replace_images(markup: str, settings: Optional[ConverterSettings] = None) -> str:
    """Swap ``ac:image`` attachments for ``[image: <filename>]``."""

    settings = resolve_settings(settings)
    return _IMAGE.sub(lambda match: settings.image_text(match.group(1)), markup)


def replace_user_links(markup: str, settings: Optional[ConverterSettings] = None) -> str:
    settings = resolve_settings(settings)
    return _USER_LINK.sub(lambda match: settings.user_placeholder, markup)


def storage_format_to_plain_text(
    value: Optional[str], settings: Optional[ConverterSettings] = None
) -> str:
    """Convert a Storage Format body to normalized plain text."""

    if not value:
        return ""
    settings = resolve_settings(settings)

    text = unwrap_cdata(value)
    text = extract_title_parameters(text)
    text = replace_images(text, settings)
    text = replace_user_links(text, settings)
    text = insert_block_separators(text)
    text = strip_tags(text)
    text = decode_entities(text)
    text = normalize_whitespace(text)

    logger.debug("Converted Storage Format to plain text", extra={"chars_in": len(value), "chars_out": len(text)})
    return text


__all__ = [
    "storage_format_to_plain_text",
    "unwrap_cdata",
    "extract_title_parameters",
    "replace_images",
    "replace_user_links",
]
