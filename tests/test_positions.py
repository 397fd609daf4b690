from __future__ import annotations

from pygls.workspace import PositionCodec

from lintbridge.model import Position, Range
from lintbridge.positions import (
    document_lines,
    leading_whitespace,
    leading_whitespace_length,
    line_range,
)


def test_leading_whitespace_length_counts_spaces_and_tabs() -> None:
    assert leading_whitespace_length("") == 0
    assert leading_whitespace_length("SELECT 1") == 0
    assert leading_whitespace_length("    FROM t") == 4
    assert leading_whitespace_length("\t  WHERE x = 1") == 3
    assert leading_whitespace_length("   ") == 3


def test_leading_whitespace_returns_the_indent_itself() -> None:
    assert leading_whitespace("\t  JOIN u") == "\t  "
    assert leading_whitespace("JOIN u") == ""


def test_document_lines_keeps_trailing_empty_line() -> None:
    assert document_lines("SELECT *\nFROM t\n") == ["SELECT *", "FROM t", ""]
    assert document_lines("") == [""]


def test_line_range_spans_indented_body() -> None:
    lines = ["SELECT *", "    FROM t"]
    assert line_range(lines, 1) == Range(
        start=Position(line=1, character=4),
        end=Position(line=1, character=10),
    )


def test_positions_order_by_line_then_character() -> None:
    assert Position(0, 9) < Position(1, 0)
    assert Position(2, 3) < Position(2, 4)
    assert Position(2, 4) == Position(2, 4)
    assert not Position(3, 0) < Position(2, 8)


def test_line_range_counts_columns_in_client_units() -> None:
    utf16 = PositionCodec().client_num_units
    lines = ["SELECT *", "  SELECT '\U0001F600\U0001F600' FROM t"]
    assert line_range(lines, 1) == Range(
        start=Position(line=1, character=2),
        end=Position(line=1, character=20),
    )
    assert line_range(lines, 1, utf16) == Range(
        start=Position(line=1, character=2),
        end=Position(line=1, character=22),
    )
