"""Render Atlassian Document Format (ADF) to GitHub-flavored Markdown."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, List, Mapping, Optional

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
    Mark,
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
    parse_document,
)
from .text import emoji_text, mention_text

logger = get_logger(__name__)

PANEL_ALERTS = {
    "info": "NOTE",
    "note": "NOTE",
    "tip": "TIP",
    "success": "TIP",
    "warning": "WARNING",
    "error": "CAUTION",
}


class _Renderer:
    """Walks typed nodes; holds only the per-call attachment map and settings."""

    def __init__(self, attachment_paths: Mapping[str, str], settings: ConverterSettings) -> None:
        self.attachment_paths = attachment_paths
        self.settings = settings

    def document(self, content: Iterable[AdfNode]) -> str:
        blocks: List[str] = []
        for node in content:
            rendered = self.block(node)
            if not rendered:
                continue
            blocks.append(rendered.rstrip())

        text = "\n\n".join(blocks)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    def block(self, node: AdfNode, indent: int = 0) -> Optional[str]:
        if isinstance(node, ParagraphNode):
            return self.inline(node.content or ()).strip()
        if isinstance(node, HeadingNode):
            level = max(1, min(6, node.level))
            return f"{'#' * level} {self.inline(node.content or ()).strip()}"
        if isinstance(node, BulletListNode):
            return self.list_block(node, indent=indent, ordered=False)
        if isinstance(node, OrderedListNode):
            return self.list_block(node, indent=indent, ordered=True, start=node.start)
        if isinstance(node, CodeBlockNode):
            return self.code_block(node)
        if isinstance(node, BlockquoteNode):
            return self.quoted(self.nested_blocks(node.content or (), indent))
        if isinstance(node, PanelNode):
            return self.panel(node, indent)
        if isinstance(node, RuleNode):
            return "---"
        if isinstance(node, TableNode):
            return self.table(node)
        if isinstance(node, MediaSingleNode):
            return self.inline(node.content or ())
        if isinstance(node, ContainerNode):
            return self.nested_blocks(node.content or (), indent)
        if isinstance(node, (TextNode, MentionNode, EmojiNode, MediaNode, HardBreakNode)):
            return self.inline((node,))
        return None

    def nested_blocks(self, content: Iterable[AdfNode], indent: int) -> str:
        rendered = [self.block(child, indent) for child in content]
        return "\n\n".join(part for part in rendered if part)

    def code_block(self, node: CodeBlockNode) -> str:
        code = "".join(child.text for child in node.content or () if isinstance(child, TextNode))
        fence = f"```{node.language}" if node.language else "```"
        return f"{fence}\n{code}\n```"

    def quoted(self, text: str) -> str:
        return "\n".join(f"> {line}" if line else ">" for line in text.splitlines())

    def panel(self, node: PanelNode, indent: int) -> str:
        alert = PANEL_ALERTS.get(node.panel_type, "NOTE")
        body = self.nested_blocks(node.content or (), indent)
        return f"> [!{alert}]\n{self.quoted(body)}" if body else f"> [!{alert}]"

    def list_block(self, node: Any, *, indent: int, ordered: bool, start: int = 1) -> str:
        lines: List[str] = []
        counter = start
        for item in node.content or ():
            if not isinstance(item, ListItemNode):
                continue
            marker = f"{counter}." if ordered else "-"
            prefix = f"{' ' * indent}{marker} "
            # Blocks after the item line sit at the item's content column.
            pad = " " * len(prefix)
            text_parts: List[str] = []
            continuation: List[str] = []
            for child in item.content or ():
                if isinstance(child, ParagraphNode) and not continuation:
                    paragraph = self.inline(child.content or ())
                    if paragraph:
                        text_parts.append(paragraph.replace("\n", " ").strip())
                elif isinstance(child, (BulletListNode, OrderedListNode)):
                    nested = self.list_block(
                        child,
                        indent=indent + 2,
                        ordered=isinstance(child, OrderedListNode),
                        start=child.start if isinstance(child, OrderedListNode) else 1,
                    )
                    if nested:
                        continuation.extend(nested.splitlines())
                else:
                    other = self.block(child)
                    if other:
                        continuation.extend(f"{pad}{line}" if line else "" for line in other.splitlines())
            lines.append((prefix + " ".join(text_parts).strip()).rstrip())
            lines.extend(continuation)
            if ordered:
                counter += 1
        return "\n".join(lines)

    def table(self, node: TableNode) -> str:
        rows: List[List[str]] = []
        for row in node.content or ():
            if not isinstance(row, TableRowNode):
                continue
            cells = [
                self.cell(cell) for cell in row.content or () if isinstance(cell, TableCellNode)
            ]
            if cells:
                rows.append(cells)
        if not rows:
            return ""

        width = max(len(cells) for cells in rows)
        padded = [cells + [""] * (width - len(cells)) for cells in rows]
        lines = ["| " + " | ".join(padded[0]) + " |", "| " + " | ".join(["---"] * width) + " |"]
        lines.extend("| " + " | ".join(cells) + " |" for cells in padded[1:])
        return "\n".join(lines)

    def cell(self, node: TableCellNode) -> str:
        text = self.nested_blocks(node.content or (), 0)
        text = re.sub(r"\s*\n+\s*", " ", text).strip()
        return text.replace("|", "\\|")

    def inline(self, content: Iterable[AdfNode]) -> str:
        parts: List[str] = []
        for node in content:
            if isinstance(node, TextNode):
                text = node.text
                for mark in node.marks:
                    text = _apply_mark(text, mark)
                parts.append(text)
            elif isinstance(node, HardBreakNode):
                parts.append("\n")
            elif isinstance(node, ParagraphNode):
                parts.append(self.inline(node.content or ()).strip())
            elif isinstance(node, EmojiNode):
                parts.append(emoji_text(node))
            elif isinstance(node, MentionNode):
                parts.append(mention_text(node, self.settings))
            elif isinstance(node, MediaNode):
                parts.append(self.media(node))
        return "".join(parts)

    def media(self, node: MediaNode) -> str:
        media_id = node.attrs.get("id")
        name = node.attrs.get("alt")
        name = name if isinstance(name, str) and name else None
        path = None
        if isinstance(media_id, str):
            path = self.attachment_paths.get(media_id)
        if path is None and name is not None:
            path = self.attachment_paths.get(name)
        if path is None and name is None:
            return self.settings.attachment_placeholder
        label = name or str(media_id)
        return f"![{label}]({path or name})"


def _apply_mark(text: str, mark: Mark) -> str:
    if mark.type == "strong":
        return f"**{text}**"
    if mark.type == "em":
        return f"*{text}*"
    if mark.type == "strike":
        return f"~~{text}~~"
    if mark.type == "code":
        return f"`{text}`"
    if mark.type == "link":
        href = mark.attrs.get("href")
        if href:
            return f"[{text}]({href})"
    return text


def adf_to_markdown(
    value: Any,
    attachment_paths: Optional[Mapping[str, str]] = None,
    settings: Optional[ConverterSettings] = None,
) -> str:
    """Render an ADF document (mapping or JSON string) to Markdown.

    ``attachment_paths`` maps media ids, or failing that file names, to the
    local paths written by the caller. Input that is not ADF follows the same
    rules as :func:`atlasconvert.adf.text.adf_to_plain_text`.
    """

    if value is None:
        return ""
    settings = resolve_settings(settings)

    raw = value
    if isinstance(value, str):
        try:
            raw = json.loads(value)
        except (ValueError, RecursionError):
            return value

    document = parse_document(raw, max_depth=settings.max_adf_depth)
    if document is None:
        return value if isinstance(value, str) else ""

    renderer = _Renderer(attachment_paths or {}, settings)
    markdown = renderer.document(document.content)
    logger.debug("Rendered ADF to Markdown", extra={"blocks": len(document.content)})
    return markdown


__all__ = ["adf_to_markdown", "PANEL_ALERTS"]
