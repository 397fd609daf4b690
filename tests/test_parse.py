from __future__ import annotations

import pytest

from lintbridge.model import Position, Range
from lintbridge.parse import (
    RawFinding,
    decode_line,
    extract_error_lines,
    parse_errors,
)

DOC = "SELECT *\nFROM t\n"


def test_parse_errors_anchors_finding_on_whole_line() -> None:
    errors = parse_errors(DOC, ["(2,1): select-star: do not use select *"])
    assert len(errors) == 1
    error = errors[0]
    assert error.rule == "select-star"
    assert error.message == "do not use select *"
    assert error.range == Range(
        start=Position(line=1, character=0),
        end=Position(line=1, character=6),
    )


def test_parse_errors_skips_indentation() -> None:
    text = "SELECT a\n    FROM t\n"
    (error,) = parse_errors(text, ["(2,5,4): keyword-capitalization : Expected upper case"])
    assert error.range.start == Position(line=1, character=4)
    assert error.range.end == Position(line=1, character=10)
    assert error.rule == "keyword-capitalization"
    assert error.message == "Expected upper case"


def test_parse_errors_drops_garbage_without_raising() -> None:
    assert parse_errors(DOC, ["garbage"]) == []


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "garbage",
        "(2,1) select-star do not use select *",
        "(2,1): select-star",
        "(x,1): select-star: message",
        "(,1): select-star: message",
        "(2,1): : message",
        "(2,1): select-star:   ",
        "2,1: select-star: message",
    ],
)
def test_decode_line_rejects_malformed_input(raw: str) -> None:
    assert decode_line(raw) is None


def test_decode_line_keeps_colons_inside_message() -> None:
    finding = decode_line("(3,1): print-statement: avoid PRINT: use RAISERROR: severity 10")
    assert finding == RawFinding(
        row=3,
        rule="print-statement",
        message="avoid PRINT: use RAISERROR: severity 10",
    )


def test_parse_errors_clamps_row_zero_to_first_line() -> None:
    (error,) = parse_errors(DOC, ["(0,0): semicolon-termination: missing ;"])
    assert error.range.start.line == 0
    assert error.range.end == Position(line=0, character=8)


def test_parse_errors_drops_rows_past_end_of_document() -> None:
    lines = [
        "(3,1): rule-a: on the trailing empty line",
        "(4,1): rule-b: past the end",
        "(400,1): rule-c: far past the end",
    ]
    errors = parse_errors(DOC, lines)
    assert [error.rule for error in errors] == ["rule-a"]


def test_parse_errors_preserves_order_and_is_repeatable() -> None:
    lines = [
        "(2,1): rule-b: second line",
        "garbage",
        "(1,1): rule-a: first line",
    ]
    first = parse_errors(DOC, lines)
    second = parse_errors(DOC, lines)
    assert first == second
    assert [error.rule for error in first] == ["rule-b", "rule-a"]


def test_extract_error_lines_strips_path_and_summary() -> None:
    stdout = (
        "C:\\work\\query (copy).sql(1,1): select-star : Expected column names.\r\n"
        "/tmp/lintbridge-x.sql(2,5): semicolon-termination : Missing semicolon\n"
        "\n"
        "Linted 1 files in 0.2 seconds\n"
        "2 Errors.\n"
    )
    assert extract_error_lines(stdout) == [
        "(1,1): select-star : Expected column names.",
        "(2,5): semicolon-termination : Missing semicolon",
    ]


def test_extracted_lines_feed_the_parser() -> None:
    stdout = "/tmp/a.sql(2,1): select-star : Expected column names\n1 Errors.\n"
    (error,) = parse_errors(DOC, extract_error_lines(stdout))
    assert error.rule == "select-star"
    assert error.message == "Expected column names"
