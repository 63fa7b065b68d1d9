"""Confluence Storage Format to GitHub-flavored Markdown."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Set

from bs4 import Comment, Doctype, Tag
from markdownify import ASTERISK, ATX, MarkdownConverter

from ..logging_config import get_logger
from .preprocess import preprocess_storage_format
from .rules import DEFAULT_RULES, Rule, find_rule

logger = get_logger(__name__)


def _code_language(element: Tag) -> Optional[str]:
    """Read the fence language from ``<pre><code class="language-x">``."""

    code = element.find("code")
    if code is None:
        return None
    for css_class in code.get("class") or []:
        if css_class.startswith("language-"):
            return css_class[len("language-"):]
    return None


RENDER_OPTIONS: dict[str, Any] = {
    "heading_style": ATX,
    "bullets": "-",
    "strong_em_symbol": ASTERISK,
    "code_language_callback": _code_language,
}


class StorageMarkdownConverter(MarkdownConverter):
    """markdownify converter that consults a rule registry before each tag."""

    def __init__(self, rules: Iterable[Rule] = DEFAULT_RULES, **options: Any) -> None:
        super().__init__(**{**RENDER_OPTIONS, **options})
        self.rules = tuple(rules)

    def process_tag(self, node, parent_tags=None):  # noqa: D401
        rule = find_rule(self.rules, node) if isinstance(node, Tag) else None
        if rule is None:
            return super().process_tag(node, parent_tags=parent_tags)
        logger.debug("Rendering <%s> with rule %s", node.name, rule.name)
        return rule.render(self, node, set(parent_tags or ()))

    def render_children(self, node: Tag, parent_tags: Set[str]) -> str:
        """Render the children of ``node`` as Markdown, ignoring ``node`` itself."""

        child_tags = set(parent_tags)
        child_tags.add(node.name)
        parts = []
        for child in node.children:
            if isinstance(child, (Comment, Doctype)):
                continue
            parts.append(self.process_element(child, parent_tags=child_tags))
        return "".join(parts)


def storage_format_to_markdown(
    value: Optional[str],
    attachment_paths: Optional[Mapping[str, str]] = None,
    *,
    rules: Iterable[Rule] = DEFAULT_RULES,
) -> str:
    """Convert a Storage Format body to Markdown.

    ``attachment_paths`` maps attachment file names to the local paths the
    caller saved them under; unmapped images keep their bare file name.
    """

    if not value:
        return ""

    markup = preprocess_storage_format(value, attachment_paths)
    markdown = StorageMarkdownConverter(rules=rules).convert(markup)
    logger.debug("Converted Storage Format to Markdown", extra={"chars_in": len(value), "chars_out": len(markdown)})
    return markdown.strip()


__all__ = ["RENDER_OPTIONS", "StorageMarkdownConverter", "storage_format_to_markdown"]
