"""Rewrite Confluence-specific Storage Format elements into plain HTML.

The Markdown renderer only knows generic HTML, so macros, images and comment
markers are rewritten first. Captioned images are matched before plain ones.
"""
from __future__ import annotations

import html
import re
from typing import Mapping, Optional

from .text import CDATA

_COLGROUP = re.compile(r"<colgroup[\s\S]*?</colgroup>", re.IGNORECASE)
_COL = re.compile(r"<col[^>]*/?>", re.IGNORECASE)
_HIGHLIGHT_COLOUR = re.compile(r'\s*data-highlight-colour="[^"]*"', re.IGNORECASE)
_LOCAL_ID = re.compile(r'\s*(ac:)?local-id="[^"]*"', re.IGNORECASE)
_COMMENT_MARKER = re.compile(
    r"<ac:inline-comment-marker[^>]*>([\s\S]*?)</ac:inline-comment-marker>", re.IGNORECASE
)
_CAPTIONED_IMAGE = re.compile(
    r'<ac:image[^>]*>[\s\S]*?<ri:attachment[^>]*ri:filename="([^"]*)"[^>]*/?>'
    r"[\s\S]*?<ac:caption>([^<]*)</ac:caption>[\s\S]*?</ac:image>",
    re.IGNORECASE,
)
_IMAGE = re.compile(
    r'<ac:image[^>]*>[\s\S]*?<ri:attachment[^>]*ri:filename="([^"]*)"[^>]*/?>[\s\S]*?</ac:image>',
    re.IGNORECASE,
)
_CODE_MACRO = re.compile(
    r'<ac:structured-macro[^>]*ac:name="code"[^>]*>([\s\S]*?)</ac:structured-macro>',
    re.IGNORECASE,
)
_LANGUAGE_PARAMETER = re.compile(
    r'<ac:parameter[^>]*ac:name="language"[^>]*>([^<]*)</ac:parameter>', re.IGNORECASE
)
_PLAIN_TEXT_BODY = re.compile(
    r"<ac:plain-text-body[^>]*>([\s\S]*?)</ac:plain-text-body>", re.IGNORECASE
)

ALERT_MACROS = {
    "info": "NOTE",
    "note": "NOTE",
    "tip": "TIP",
    "warning": "WARNING",
}

_ALERT_PATTERNS = {
    name: re.compile(
        rf'<ac:structured-macro[^>]*ac:name="{name}"[^>]*>[\s\S]*?'
        r"<ac:rich-text-body>([\s\S]*?)</ac:rich-text-body>[\s\S]*?</ac:structured-macro>",
        re.IGNORECASE,
    )
    for name in ALERT_MACROS
}


def resolve_attachment(filename: str, attachment_paths: Optional[Mapping[str, str]]) -> str:
    """Return the local path for ``filename``, or the filename itself."""

    if attachment_paths:
        return attachment_paths.get(filename) or filename
    return filename


def _src(filename: str, attachment_paths: Optional[Mapping[str, str]]) -> str:
    # Filenames come from markup and are already escaped; mapped paths are not.
    path = resolve_attachment(filename, attachment_paths)
    return filename if path == filename else _attr(path)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _code_block(match: re.Match[str]) -> str:
    inner = match.group(1)
    language = _LANGUAGE_PARAMETER.search(inner)
    body = _PLAIN_TEXT_BODY.search(inner)
    lang = language.group(1) if language else ""
    code = body.group(1) if body else ""
    lang_class = f' class="language-{_attr(lang)}"' if lang else ""
    return f"<pre><code{lang_class}>{html.escape(code, quote=False)}</code></pre>"


def preprocess_storage_format(
    markup: str, attachment_paths: Optional[Mapping[str, str]] = None
) -> str:
    """Return generic HTML for ``markup``; see module docstring for the order."""

    result = _COLGROUP.sub("", markup)
    result = _COL.sub("", result)
    result = _HIGHLIGHT_COLOUR.sub("", result)
    result = _LOCAL_ID.sub("", result)
    result = _COMMENT_MARKER.sub(r"\1", result)
    result = CDATA.sub(r"\1", result)

    def figure(match: re.Match[str]) -> str:
        filename, caption = match.group(1), match.group(2)
        src = _src(filename, attachment_paths)
        return (
            f'<figure><img src="{src}" alt="{filename}">'
            f"<figcaption>{caption}</figcaption></figure>"
        )

    def image(match: re.Match[str]) -> str:
        filename = match.group(1)
        src = _src(filename, attachment_paths)
        return f'<img src="{src}" alt="{filename}">'

    result = _CAPTIONED_IMAGE.sub(figure, result)
    result = _IMAGE.sub(image, result)
    result = _CODE_MACRO.sub(_code_block, result)

    for name, pattern in _ALERT_PATTERNS.items():
        alert = ALERT_MACROS[name]
        result = pattern.sub(
            lambda match, alert=alert: f'<blockquote data-alert="{alert}">{match.group(1)}</blockquote>',
            result,
        )

    return result


__all__ = ["ALERT_MACROS", "preprocess_storage_format", "resolve_attachment"]
