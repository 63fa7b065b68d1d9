"""Classify whether a table can be expressed as a GFM pipe table."""
from __future__ import annotations

import re

_CELL_MERGE = re.compile(r"\b(colspan|rowspan)\s*=", re.IGNORECASE)
_CELL_BREAK = re.compile(r"<t[dh][^>]*>[\s\S]*?<br[\s/]*>[\s\S]*?</t[dh]>", re.IGNORECASE)


def is_table_convertible(table_html: str) -> bool:
    """Return ``False`` for tables with merged cells or line breaks inside cells.

    Pipe tables cannot express either, so such tables are kept as HTML by the
    Markdown renderer.
    """

    if _CELL_MERGE.search(table_html):
        return False
    return _CELL_BREAK.search(table_html) is None


__all__ = ["is_table_convertible"]
