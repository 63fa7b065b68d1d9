"""Plain-text extraction from ADF documents."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional

from ..config import ConverterSettings, resolve_settings
from ..logging_config import get_logger
from .nodes import (
    AdfNode,
    BlockquoteNode,
    BulletListNode,
    CodeBlockNode,
    ContainerNode,
    EmojiNode,
    HardBreakNode,
    HeadingNode,
    ListItemNode,
    MediaNode,
    MediaSingleNode,
    MentionNode,
    OrderedListNode,
    PanelNode,
    ParagraphNode,
    RuleNode,
    TableCellNode,
    TableNode,
    TableRowNode,
    TextNode,
    UnknownNode,
    parse_document,
    parse_node,
)

logger = get_logger(__name__)

_Extractor = Callable[[Any, ConverterSettings], str]


def _children(node: Any, settings: ConverterSettings) -> str:
    if node.content is None:
        return ""
    return "".join([_extract(child, settings) for child in node.content])


def _suffixed(suffix: str) -> _Extractor:
    def extractor(node: Any, settings: ConverterSettings) -> str:
        if node.content is None:
            return ""
        return _children(node, settings) + suffix

    return extractor


def _table_row(node: TableRowNode, settings: ConverterSettings) -> str:
    if node.content is None:
        return ""
    return _children(node, settings).rstrip() + "\n"


def mention_text(node: MentionNode, settings: ConverterSettings) -> str:
    text = node.attrs.get("text")
    return text if isinstance(text, str) else settings.mention_placeholder


def emoji_text(node: EmojiNode, settings: Optional[ConverterSettings] = None) -> str:
    """Return ``attrs.text``, else ``attrs.shortName``; only strings count."""

    for key in ("text", "shortName"):
        value = node.attrs.get(key)
        if isinstance(value, str):
            return value
    return ""


# One entry per AdfNode variant; tests assert the table stays complete.
EXTRACTORS: Dict[type, _Extractor] = {
    TextNode: lambda node, settings: node.text,
    HardBreakNode: lambda node, settings: "\n",
    RuleNode: lambda node, settings: "",
    MentionNode: mention_text,
    EmojiNode: emoji_text,
    MediaNode: lambda node, settings: settings.attachment_placeholder,
    MediaSingleNode: _children,
    ParagraphNode: _children,
    HeadingNode: _children,
    BulletListNode: _children,
    OrderedListNode: _children,
    ListItemNode: _suffixed("\n"),
    CodeBlockNode: _children,
    BlockquoteNode: _children,
    PanelNode: _children,
    TableNode: _children,
    TableRowNode: _table_row,
    TableCellNode: _suffixed("\t"),
    ContainerNode: _children,
    UnknownNode: lambda node, settings: "",
}


def _extract(node: AdfNode, settings: ConverterSettings) -> str:
    return EXTRACTORS[type(node)](node, settings)


def extract_node(node: Any, settings: Optional[ConverterSettings] = None) -> str:
    """Return the plain text of a single node and its subtree.

    ``node`` may be a raw JSON mapping or an already parsed node.
    """

    settings = resolve_settings(settings)
    return _extract(parse_node(node, max_depth=settings.max_adf_depth), settings)


def _document_text(value: Any, settings: ConverterSettings) -> Optional[str]:
    document = parse_document(value, max_depth=settings.max_adf_depth)
    if document is None:
        return None
    parts = [_extract(node, settings) for node in document.content]
    return "\n".join(part for part in parts if part != "")


def adf_to_plain_text(value: Any, settings: Optional[ConverterSettings] = None) -> str:
    """Convert an ADF document (mapping or JSON string) to plain text.

    Strings that are not JSON, or JSON that is not an ADF document, are
    treated as legacy plain-text fields and returned unchanged. Mappings that
    are not ADF documents yield an empty string.
    """

    if value is None:
        return ""
    settings = resolve_settings(settings)

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except (ValueError, RecursionError):
            logger.debug("ADF field is not JSON; treating as plain text", extra={"chars": len(value)})
            return value
        text = _document_text(parsed, settings)
        return value if text is None else text

    text = _document_text(value, settings)
    if text is None:
        logger.debug("Rejected value that is not an ADF document", extra={"kind": type(value).__name__})
        return ""
    return text


__all__ = ["adf_to_plain_text", "extract_node", "emoji_text", "mention_text", "EXTRACTORS"]
