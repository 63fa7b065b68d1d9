"""Element rules that run ahead of markdownify's built-in tag conversion.

Rules are plain records evaluated in order; the first rule whose predicate
accepts an element renders it and markdownify never sees that element.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Set, Tuple

from bs4 import Tag

from ..tables import is_table_convertible

if TYPE_CHECKING:  # pragma: no cover
    from .markdown import StorageMarkdownConverter


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[Tag], bool]
    render: Callable[["StorageMarkdownConverter", Tag, Set[str]], str]


def find_rule(rules: Iterable[Rule], element: Tag) -> Optional[Rule]:
    for rule in rules:
        if rule.matches(element):
            return rule
    return None


def _block(text: str) -> str:
    return f"\n\n{text}\n\n"


def _is_figure(element: Tag) -> bool:
    return element.name == "figure" and element.find("img") is not None


def _render_figure(converter: "StorageMarkdownConverter", element: Tag, parent_tags: Set[str]) -> str:
    img = element.find("img")
    src = img.get("src") or ""
    alt = img.get("alt") or ""
    result = f"![{alt}]({src})"
    figcaption = element.find("figcaption")
    if figcaption is not None:
        caption = figcaption.get_text().strip()
        if caption:
            result += f"\n\n*{caption}*"
    return _block(result)


def _is_alert(element: Tag) -> bool:
    return element.name == "blockquote" and element.has_attr("data-alert")


def _render_alert(converter: "StorageMarkdownConverter", element: Tag, parent_tags: Set[str]) -> str:
    alert = element.get("data-alert") or "NOTE"
    body = converter.render_children(element, parent_tags).strip()
    body = re.sub(r"\n{3,}", "\n\n", body)
    quoted = "\n".join(f"> {line}" for line in body.split("\n"))
    return f"\n\n> [!{alert}]\n{quoted}\n\n"


def _is_colored_span(element: Tag) -> bool:
    if element.name != "span":
        return False
    style = element.get("style") or ""
    return "color:" in style or "color :" in style


def _has_heading_row(table: Tag) -> bool:
    """True when the first row is in ``<thead>`` or made only of ``<th>`` cells."""

    first_row = table.find("tr")
    if first_row is None:
        return False
    if first_row.parent is not None and first_row.parent.name == "thead":
        return True
    cells = first_row.find_all(["td", "th"], recursive=False)
    return bool(cells) and all(cell.name == "th" for cell in cells)


def _is_complex_table(element: Tag) -> bool:
    if element.name != "table":
        return False
    return not is_table_convertible(str(element)) or not _has_heading_row(element)


def _render_inline_html(converter: "StorageMarkdownConverter", element: Tag, parent_tags: Set[str]) -> str:
    return str(element)


def _render_block_html(converter: "StorageMarkdownConverter", element: Tag, parent_tags: Set[str]) -> str:
    return _block(str(element))


FIGURE_RULE = Rule("figure", _is_figure, _render_figure)
ALERT_RULE = Rule("alert", _is_alert, _render_alert)
COLORED_TEXT_RULE = Rule("colored-text", _is_colored_span, _render_inline_html)
COMPLEX_TABLE_RULE = Rule("complex-table", _is_complex_table, _render_block_html)

DEFAULT_RULES: Tuple[Rule, ...] = (
    FIGURE_RULE,
    ALERT_RULE,
    COLORED_TEXT_RULE,
    COMPLEX_TABLE_RULE,
)


__all__ = [
    "Rule",
    "find_rule",
    "FIGURE_RULE",
    "ALERT_RULE",
    "COLORED_TEXT_RULE",
    "COMPLEX_TABLE_RULE",
    "DEFAULT_RULES",
]
