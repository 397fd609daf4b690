"""Line/column helpers for anchoring line-only analyzer findings.

Columns are measured with a unit counter so that callers can report them
in the client's position encoding (UTF-16 code units for most editors).
The default counts code points.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from lintbridge.model import Position, Range

UnitCounter = Callable[[str], int]


def leading_whitespace_length(line: str) -> int:
    return len(line) - len(line.lstrip())


def leading_whitespace(line: str) -> str:
    return line[: leading_whitespace_length(line)]


def document_lines(text: str) -> List[str]:
    return text.split("\n")


def line_range(lines: Sequence[str], line: int, unit_count: UnitCounter = len) -> Range:
    """Span of a whole line, from its first non-blank character to its end.

    Analyzers report a row without a usable column, so the indented body of
    the line is the erroring span.
    """
    text = lines[line]
    return Range(
        start=Position(line=line, character=unit_count(leading_whitespace(text))),
        end=Position(line=line, character=unit_count(text)),
    )
