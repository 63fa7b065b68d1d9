"""String-level helpers for the Storage Format plain-text pipeline.

The helpers operate on raw markup with regular expressions. The entity pass
order is fixed: ``&amp;`` is decoded before ``&lt;`` so ``&amp;lt;`` ends up
as ``<``, while ``&nbsp;`` is decoded first so ``&amp;nbsp;`` stays
``&nbsp;``.
"""
from __future__ import annotations

import re
from typing import List, Tuple

_NUMERIC_REFERENCE = re.compile(r"&#(\d+);")


def _numeric_char(match: re.Match[str]) -> str:
    code_point = int(match.group(1))
    try:
        return chr(code_point)
    except (ValueError, OverflowError):
        return match.group(0)


ENTITY_PASSES: Tuple[Tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&#x27;", "'"),
)


def decode_entities(text: str) -> str:
    """Decode the HTML entities Confluence emits, one pass per entity."""

    for entity, replacement in ENTITY_PASSES:
        text = text.replace(entity, replacement)
    return _NUMERIC_REFERENCE.sub(_numeric_char, text)


_BLOCK_SEPARATORS: List[Tuple[re.Pattern[str], str]] = [
    (re.compile(r"</(p|h[1-6])>", re.IGNORECASE), r"</\1>\n"),
    (re.compile(r"</li>", re.IGNORECASE), "</li>\n"),
    (re.compile(r"</tr>", re.IGNORECASE), "</tr>\n"),
    (re.compile(r"</(td|th)>", re.IGNORECASE), "\t</\\1>"),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    (re.compile(r"</blockquote>", re.IGNORECASE), "</blockquote>\n"),
]


def insert_block_separators(markup: str) -> str:
    """Add newlines after block closers and tabs before cell closers."""

    for pattern, replacement in _BLOCK_SEPARATORS:
        markup = pattern.sub(replacement, markup)
    return markup


_TAG = re.compile(r"<[^>]*>")


def strip_tags(markup: str) -> str:
    return _TAG.sub("", markup)


_INLINE_WHITESPACE = re.compile(r"[ \t]+")


def normalize_whitespace(text: str) -> str:
    """Collapse blanks per line, trim, and drop lines left empty."""

    lines = (_INLINE_WHITESPACE.sub(" ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


__all__ = [
    "ENTITY_PASSES",
    "decode_entities",
    "insert_block_separators",
    "strip_tags",
    "normalize_whitespace",
]
