"""Decoding of the analyzer's line-oriented output.

The analyzer reports one finding per line:

    <path>(<row>,<col>[,<len>]): <rule> : <message>

`extract_error_lines` strips the path so that each line starts at the
parenthesized position group, and `parse_errors` turns those lines into
range-anchored diagnostics for a specific document snapshot. Lines that do
not fit the grammar are dropped; decoding never raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from lintbridge.model import LintDiagnostic
from lintbridge.positions import UnitCounter, document_lines, line_range

logger = logging.getLogger(__name__)

_FINDING_RE = re.compile(
    r"^\s*\((?P<row>[^,()]*)(?:,[^()]*)?\)\s*:(?P<rule>[^:]*):(?P<message>.*)$",
    re.DOTALL,
)
_POSITION_GROUP_RE = re.compile(r"\([^()]*\)\s*:")


@dataclass(frozen=True)
class RawFinding:
    row: int
    rule: str
    message: str


def _parse_row(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def decode_line(raw: str) -> Optional[RawFinding]:
    match = _FINDING_RE.match(raw)
    if match is None:
        return None
    row = _parse_row(match.group("row"))
    if row is None:
        return None
    rule = match.group("rule").strip()
    message = match.group("message").strip()
    if not rule or not message:
        return None
    return RawFinding(row=row, rule=rule, message=message)


def _to_diagnostic(
    finding: RawFinding, lines: Sequence[str], unit_count: UnitCounter
) -> Optional[LintDiagnostic]:
    line = max(finding.row - 1, 0)
    if line >= len(lines):
        return None
    return LintDiagnostic(
        range=line_range(lines, line, unit_count),
        message=finding.message,
        rule=finding.rule,
    )


def parse_errors(
    document_text: str,
    raw_lines: Iterable[str],
    unit_count: UnitCounter = len,
) -> List[LintDiagnostic]:
    lines = document_lines(document_text)
    diagnostics: List[LintDiagnostic] = []
    for raw in raw_lines:
        finding = decode_line(raw)
        diagnostic = None
        if finding is not None:
            diagnostic = _to_diagnostic(finding, lines, unit_count)
        if diagnostic is None:
            logger.debug("dropping analyzer line: %r", raw)
            continue
        diagnostics.append(diagnostic)
    return diagnostics


def extract_error_lines(stdout: str) -> List[str]:
    """Return the finding lines of raw analyzer stdout, without their path prefix."""
    results: List[str] = []
    for line in stdout.splitlines():
        match = _POSITION_GROUP_RE.search(line)
        if match is None:
            continue
        results.append(line[match.start():].rstrip())
    return results
