from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class AnalyzerSettings(BaseModel):
    binary: Optional[str] = None
    install_dir: Optional[str] = None
    platform: Optional[str] = None
    tool_name: str = "tsqllint"
    display_name: str = "TSQLLint"
    timeout_seconds: float = Field(default=30.0, gt=0)
    default_extension: str = ".sql"


class PositionDTO(BaseModel):
    line: int = Field(ge=0)
    character: int = Field(ge=0)


class RangeDTO(BaseModel):
    start: PositionDTO
    end: PositionDTO


class TextEditDTO(BaseModel):
    range: RangeDTO
    newText: str


class ChangeRequest(BaseModel):
    """Arguments of the change command: `[uri, version, edits]`."""

    uri: str
    version: int
    edits: List[TextEditDTO]

    @classmethod
    def from_arguments(cls, arguments: list) -> "ChangeRequest":
        uri, version, edits = (list(arguments) + [None, None, None])[:3]
        return cls.model_validate({"uri": uri, "version": version, "edits": edits})


class DiagnosticDTO(BaseModel):
    range: RangeDTO
    rule: str
    message: str
    severity: str = "error"
    source: str


class CheckResponse(BaseModel):
    path: str
    diagnostics: List[DiagnosticDTO] = []
    errors: List[str] = []
