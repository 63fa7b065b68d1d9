"""Confluence Storage Format converters."""
from __future__ import annotations

from .markdown import StorageMarkdownConverter, storage_format_to_markdown
from .preprocess import preprocess_storage_format
from .rules import DEFAULT_RULES, Rule
from .text import storage_format_to_plain_text

__all__ = [
    "DEFAULT_RULES",
    "Rule",
    "StorageMarkdownConverter",
    "preprocess_storage_format",
    "storage_format_to_markdown",
    "storage_format_to_plain_text",
]
