"""Atlassian Document Format (ADF) converters."""
from __future__ import annotations

from .markdown import adf_to_markdown
from .nodes import AdfDocument, AdfNode, is_adf_document, parse_document, parse_node
from .text import adf_to_plain_text, extract_node

__all__ = [
    "AdfDocument",
    "AdfNode",
    "adf_to_markdown",
    "adf_to_plain_text",
    "extract_node",
    "is_adf_document",
    "parse_document",
    "parse_node",
]
