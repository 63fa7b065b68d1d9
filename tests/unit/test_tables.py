from __future__ import annotations

import pytest

from atlasconvert.tables import is_table_convertible


def test_plain_table_is_convertible() -> None:
    table = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"

    assert is_table_convertible(table) is True


@pytest.mark.parametrize(
    "table",
    [
        '<table><tr><td colspan="2">wide</td></tr></table>',
        "<table><tr><td ROWSPAN = 3>tall</td></tr></table>",
        "<table><tr><td>line one<br>line two</td></tr></table>",
        "<table><tr><th>head<br />er</th></tr></table>",
    ],
)
def test_merged_cells_and_breaks_are_not_convertible(table: str) -> None:
    assert is_table_convertible(table) is False


def test_break_outside_cells_does_not_block_conversion() -> None:
    table = "<table><caption>first<br/>second</caption><tr><td>1</td></tr></table>"

    assert is_table_convertible(table) is True
