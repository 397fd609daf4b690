from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from lintbridge.json_types import JSONArray, JSONObject


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based editor coordinate, ordered by (line, character)."""

    line: int
    character: int

    def to_json(self) -> JSONObject:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def intersects(self, other: Range) -> bool:
        # Inclusive: ranges that only share a boundary position overlap.
        if self.end < other.start:
            return False
        if self.start > other.end:
            return False
        return True

    def to_json(self) -> JSONObject:
        return {"start": self.start.to_json(), "end": self.end.to_json()}


@dataclass(frozen=True)
class TextEdit:
    range: Range
    new_text: str

    def to_json(self) -> JSONObject:
        return {"range": self.range.to_json(), "newText": self.new_text}


@dataclass(frozen=True)
class LintDiagnostic:
    range: Range
    message: str
    rule: str


@dataclass(frozen=True)
class DiagnosticRecord:
    diagnostic: LintDiagnostic
    document_version: int
    disable_line_edits: Tuple[TextEdit, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FixCommand:
    title: str
    command: str
    uri: str
    document_version: int
    edits: Tuple[TextEdit, ...]

    def arguments(self) -> JSONArray:
        return [
            self.uri,
            self.document_version,
            [edit.to_json() for edit in self.edits],
        ]
