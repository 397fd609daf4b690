from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from lintbridge.markers import DEFAULT_TOOL_NAME, wrap_line
from lintbridge.model import DiagnosticRecord, LintDiagnostic, Position, Range, TextEdit
from lintbridge.positions import document_lines, leading_whitespace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentEntry:
    version: int
    records: Tuple[DiagnosticRecord, ...]


class CommandStore:
    """Most recent diagnostics per open document, with their quick-fix edits.

    Each `record` replaces the document's entry wholesale. Entries are
    immutable, so a reader sees either the old set or the new one. A record
    set computed against an older document version than the stored one is
    ignored.
    """

    def __init__(self, *, tool_name: str = DEFAULT_TOOL_NAME) -> None:
        self.tool_name = tool_name
        self._entries: Dict[str, DocumentEntry] = {}

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def version(self, uri: str) -> Optional[int]:
        entry = self._entries.get(uri)
        return entry.version if entry is not None else None

    def record(
        self,
        uri: str,
        version: int,
        text: str,
        diagnostics: Iterable[LintDiagnostic],
    ) -> bool:
        current = self._entries.get(uri)
        if current is not None and current.version > version:
            logger.debug(
                "ignoring diagnostics for %s at version %s; store holds version %s",
                uri,
                version,
                current.version,
            )
            return False
        lines = document_lines(text)
        records = tuple(
            DiagnosticRecord(
                diagnostic=diagnostic,
                document_version=version,
                disable_line_edits=(self._disable_line_edit(lines, diagnostic),),
            )
            for diagnostic in diagnostics
        )
        self._entries[uri] = DocumentEntry(version=version, records=records)
        return True

    def query(self, uri: str, requested: Range) -> List[DiagnosticRecord]:
        entry = self._entries.get(uri)
        if entry is None:
            return []
        return [
            record
            for record in entry.records
            if record.diagnostic.range.intersects(requested)
        ]

    def forget(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def _disable_line_edit(self, lines: List[str], diagnostic: LintDiagnostic) -> TextEdit:
        start = diagnostic.range.start
        line = lines[start.line]
        return TextEdit(
            range=Range(
                start=Position(line=start.line, character=0),
                end=diagnostic.range.end,
            ),
            new_text=wrap_line(line, leading_whitespace(line), diagnostic.rule, self.tool_name),
        )
