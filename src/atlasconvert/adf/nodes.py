"""Typed model of Atlassian Document Format (ADF) trees.

Raw ADF arrives as untrusted JSON. :func:`parse_document` validates the
document envelope and turns every node into one variant of :data:`AdfNode`.
Node kinds without a dedicated variant become :class:`ContainerNode` when they
carry ``content`` and :class:`UnknownNode` otherwise, so renderers never see a
raw mapping.

``content`` is ``None`` when the raw node has no ``content`` list at all; an
empty list parses to an empty tuple. Renderers rely on the difference.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union, get_args

from ..config import DEFAULT_MAX_ADF_DEPTH, MAX_ADF_DEPTH
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = DEFAULT_MAX_ADF_DEPTH

Attrs = Mapping[str, Any]


@dataclass(frozen=True)
class Mark:
    type: str
    attrs: Attrs = field(default_factory=dict)


@dataclass(frozen=True)
class TextNode:
    text: str
    marks: Tuple[Mark, ...] = ()


@dataclass(frozen=True)
class HardBreakNode:
    pass


@dataclass(frozen=True)
class RuleNode:
    pass


@dataclass(frozen=True)
class MentionNode:
    attrs: Attrs = field(default_factory=dict)


@dataclass(frozen=True)
class EmojiNode:
    attrs: Attrs = field(default_factory=dict)


@dataclass(frozen=True)
class MediaNode:
    attrs: Attrs = field(default_factory=dict)


@dataclass(frozen=True)
class MediaSingleNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class ParagraphNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class HeadingNode:
    level: int = 1
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class BulletListNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class OrderedListNode:
    start: int = 1
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class ListItemNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class CodeBlockNode:
    language: Optional[str] = None
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class BlockquoteNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class PanelNode:
    panel_type: str = "info"
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class TableNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class TableRowNode:
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class TableCellNode:
    header: bool = False
    attrs: Attrs = field(default_factory=dict)
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class ContainerNode:
    """Any other node kind that has children (``doc``, ``expand``, ...)."""

    type: str
    attrs: Attrs = field(default_factory=dict)
    content: Optional[Tuple["AdfNode", ...]] = None


@dataclass(frozen=True)
class UnknownNode:
    """Leaf of a kind this package does not know; renders as nothing."""

    type: str = ""


AdfNode = Union[
    TextNode,
    HardBreakNode,
    RuleNode,
    MentionNode,
    EmojiNode,
    MediaNode,
    MediaSingleNode,
    ParagraphNode,
    HeadingNode,
    BulletListNode,
    OrderedListNode,
    ListItemNode,
    CodeBlockNode,
    BlockquoteNode,
    PanelNode,
    TableNode,
    TableRowNode,
    TableCellNode,
    ContainerNode,
    UnknownNode,
]


@dataclass(frozen=True)
class AdfDocument:
    version: int
    content: Tuple[AdfNode, ...]
    truncated: int = 0


def is_adf_document(value: Any) -> bool:
    """Duck-typed envelope check: ``type == "doc"`` and a ``content`` list."""

    return isinstance(value, Mapping) and value.get("type") == "doc" and isinstance(
        value.get("content"), list
    )


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _marks(raw: Mapping[str, Any]) -> Tuple[Mark, ...]:
    marks = raw.get("marks")
    if not isinstance(marks, list):
        return ()
    parsed = []
    for mark in marks:
        if isinstance(mark, Mapping) and isinstance(mark.get("type"), str):
            attrs = mark.get("attrs")
            parsed.append(Mark(type=mark["type"], attrs=dict(attrs) if isinstance(attrs, Mapping) else {}))
    return tuple(parsed)


Content = Optional[Tuple[AdfNode, ...]]
_Factory = Callable[[Mapping[str, Any], Dict[str, Any], Content], AdfNode]


def _text(raw: Mapping[str, Any], attrs: Dict[str, Any], content: Content) -> AdfNode:
    text = raw.get("text")
    return TextNode(text=text if isinstance(text, str) else "", marks=_marks(raw))


_FACTORIES: Dict[str, _Factory] = {
    "text": _text,
    "hardBreak": lambda raw, attrs, content: HardBreakNode(),
    "rule": lambda raw, attrs, content: RuleNode(),
    "mention": lambda raw, attrs, content: MentionNode(attrs=attrs),
    "emoji": lambda raw, attrs, content: EmojiNode(attrs=attrs),
    "media": lambda raw, attrs, content: MediaNode(attrs=attrs),
    "mediaSingle": lambda raw, attrs, content: MediaSingleNode(content=content),
    "paragraph": lambda raw, attrs, content: ParagraphNode(content=content),
    "heading": lambda raw, attrs, content: HeadingNode(
        level=_as_int(attrs.get("level"), 1), content=content
    ),
    "bulletList": lambda raw, attrs, content: BulletListNode(content=content),
    "orderedList": lambda raw, attrs, content: OrderedListNode(
        start=_as_int(attrs.get("order"), 1), content=content
    ),
    "listItem": lambda raw, attrs, content: ListItemNode(content=content),
    "codeBlock": lambda raw, attrs, content: CodeBlockNode(
        language=attrs.get("language") if isinstance(attrs.get("language"), str) else None,
        content=content,
    ),
    "blockquote": lambda raw, attrs, content: BlockquoteNode(content=content),
    "panel": lambda raw, attrs, content: PanelNode(
        panel_type=str(attrs.get("panelType") or "info"), content=content
    ),
    "table": lambda raw, attrs, content: TableNode(content=content),
    "tableRow": lambda raw, attrs, content: TableRowNode(content=content),
    "tableCell": lambda raw, attrs, content: TableCellNode(header=False, attrs=attrs, content=content),
    "tableHeader": lambda raw, attrs, content: TableCellNode(header=True, attrs=attrs, content=content),
}


class _NodeParser:
    """Builds typed nodes, dropping children below ``max_depth``.

    ``max_depth`` is clamped to ``1..MAX_ADF_DEPTH`` so that callers passing
    a larger value directly still get a tree the renderers can walk.
    """

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max(1, min(max_depth, MAX_ADF_DEPTH))
        self.truncated = 0

    def parse(self, raw: Any, depth: int) -> AdfNode:
        if not isinstance(raw, Mapping):
            return UnknownNode()
        kind = raw.get("type")
        kind = kind if isinstance(kind, str) else ""
        raw_attrs = raw.get("attrs")
        attrs = dict(raw_attrs) if isinstance(raw_attrs, Mapping) else {}

        content: Content = None
        raw_content = raw.get("content")
        if isinstance(raw_content, list):
            if depth >= self.max_depth:
                self.truncated += 1
                content = ()
            else:
                content = tuple([self.parse(child, depth + 1) for child in raw_content])

        factory = _FACTORIES.get(kind)
        if factory is not None:
            return factory(raw, attrs, content)
        if content is not None:
            return ContainerNode(type=kind, attrs=attrs, content=content)
        return UnknownNode(type=kind)


def parse_node(raw: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> AdfNode:
    """Parse a single raw node (and its subtree)."""

    if isinstance(raw, NODE_TYPES):
        return raw
    return _NodeParser(max_depth).parse(raw, 0)


def parse_document(value: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> AdfDocument | None:
    """Return the typed document, or ``None`` when ``value`` is not ADF."""

    if not is_adf_document(value):
        return None
    parser = _NodeParser(max_depth)
    content = tuple([parser.parse(child, 1) for child in value["content"]])
    if parser.truncated:
        logger.warning(
            "ADF nesting exceeds max depth; truncated %d subtree(s)",
            parser.truncated,
            extra={"max_depth": parser.max_depth},
        )
    return AdfDocument(
        version=_as_int(value.get("version"), 1),
        content=content,
        truncated=parser.truncated,
    )


NODE_TYPES: Tuple[type, ...] = get_args(AdfNode)


__all__ = [
    "AdfNode",
    "AdfDocument",
    "NODE_TYPES",
    "DEFAULT_MAX_DEPTH",
    "Mark",
    "TextNode",
    "HardBreakNode",
    "RuleNode",
    "MentionNode",
    "EmojiNode",
    "MediaNode",
    "MediaSingleNode",
    "ParagraphNode",
    "HeadingNode",
    "BulletListNode",
    "OrderedListNode",
    "ListItemNode",
    "CodeBlockNode",
    "BlockquoteNode",
    "PanelNode",
    "TableNode",
    "TableRowNode",
    "TableCellNode",
    "ContainerNode",
    "UnknownNode",
    "is_adf_document",
    "parse_node",
    "parse_document",
]
