from __future__ import annotations

from pathlib import Path

import pytest

from atlasconvert.config import ConverterSettings
from atlasconvert.storage import storage_format_to_plain_text
from atlasconvert.storage.text import extract_title_parameters, replace_images, replace_user_links, unwrap_cdata


@pytest.mark.parametrize("value", [None, ""])
def test_empty_input(value) -> None:
    assert storage_format_to_plain_text(value) == ""


def test_paragraphs_and_headings_become_lines() -> None:
    markup = "<h2>Overview</h2><p>First   paragraph.</p><p>Second<br/>line</p>"

    assert storage_format_to_plain_text(markup) == "Overview\nFirst paragraph.\nSecond\nline"


def test_tables_use_cell_separators() -> None:
    markup = "<table><tbody><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></tbody></table>"

    assert storage_format_to_plain_text(markup) == "A B\n1 2"


def test_entities_are_decoded_after_tags_are_stripped() -> None:
    assert storage_format_to_plain_text("<p>&amp;lt;b&amp;gt; tag</p>") == "<b> tag"
    assert storage_format_to_plain_text("<p>keep&amp;nbsp;entity</p>") == "keep&nbsp;entity"


def test_images_and_users_become_placeholders() -> None:
    markup = (
        '<p>See <ac:image ac:height="250"><ri:attachment ri:filename="shot.png" /></ac:image>'
        ' from <ac:link><ri:user ri:account-id="557058:abc" /></ac:link></p>'
    )

    assert storage_format_to_plain_text(markup) == "See [image: shot.png] from [user]"


def test_custom_placeholders() -> None:
    settings = ConverterSettings(image_placeholder="(image {filename})", user_placeholder="someone")
    markup = (
        '<p><ac:image><ri:attachment ri:filename="a.png"/></ac:image> by '
        '<ac:link><ri:user ri:userkey="42"/></ac:link></p>'
    )

    assert storage_format_to_plain_text(markup, settings) == "(image a.png) by someone"


def test_code_macro_body_survives() -> None:
    markup = (
        '<ac:structured-macro ac:name="code"><ac:plain-text-body>'
        "<![CDATA[print(1)]]></ac:plain-text-body></ac:structured-macro>"
    )

    assert storage_format_to_plain_text(markup) == "print(1)"


def test_step_helpers() -> None:
    assert unwrap_cdata("<![CDATA[x]]>") == "x"
    assert extract_title_parameters('<ac:parameter ac:name="title">Notes</ac:parameter>') == "Notes"
    assert replace_images('<ac:image><ri:attachment ri:filename="f.gif" /></ac:image>') == "[image: f.gif]"
    assert replace_user_links('<ac:link><ri:user ri:account-id="1" /><ac:plain-text-link-body>x</ac:plain-text-link-body></ac:link>') == "[user]"


def test_title_parameter_text_is_kept() -> None:
    markup = (
        '<ac:structured-macro ac:name="expand"><ac:parameter ac:name="title">Details</ac:parameter>'
        "<ac:rich-text-body><p>Body</p></ac:rich-text-body></ac:structured-macro>"
    )

    assert storage_format_to_plain_text(markup) == "DetailsBody"


def test_fixture_page(fixtures_dir: Path, load_text) -> None:
    markup = load_text(fixtures_dir / "documents" / "page_body.xhtml")

    lines = storage_format_to_plain_text(markup).split("\n")

    assert lines[0] == "Release checklist"
    assert "Owner: [user]" in lines
    assert "Build must pass & deploy." in lines
    assert "Freeze starts Friday." in lines
    assert "[image: pipeline.png]" in lines
    assert all(line == line.strip() and line for line in lines)
    assert storage_format_to_plain_text(markup) == "\n".join(lines)
