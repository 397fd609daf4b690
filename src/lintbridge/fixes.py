from __future__ import annotations

from typing import List

from lintbridge.markers import disable_marker
from lintbridge.model import DiagnosticRecord, FixCommand, Position, Range, TextEdit
from lintbridge.store import CommandStore

CHANGE_COMMAND = "_tsql-lint.change"

_FILE_START = Position(line=0, character=0)


def _line_fix(uri: str, record: DiagnosticRecord) -> FixCommand:
    return FixCommand(
        title=f"Disable: {record.diagnostic.rule} for this line",
        command=CHANGE_COMMAND,
        uri=uri,
        document_version=record.document_version,
        edits=record.disable_line_edits,
    )


def _file_fix(uri: str, record: DiagnosticRecord, tool_name: str) -> FixCommand:
    rule = record.diagnostic.rule
    edit = TextEdit(
        range=Range(start=_FILE_START, end=_FILE_START),
        new_text=f"{disable_marker(rule, tool_name)}\n",
    )
    return FixCommand(
        title=f"Disable: {rule} for this file",
        command=CHANGE_COMMAND,
        uri=uri,
        document_version=record.document_version,
        edits=(edit,),
    )


def synthesize(store: CommandStore, uri: str, requested: Range) -> List[FixCommand]:
    """Quick fixes for the diagnostics overlapping `requested`.

    Editors list commands in the order returned: every line-scope fix comes
    first, then every file-scope fix, each group in recorded order.
    """
    records = store.query(uri, requested)
    return [
        *(_line_fix(uri, record) for record in records),
        *(_file_fix(uri, record, store.tool_name) for record in records),
    ]
