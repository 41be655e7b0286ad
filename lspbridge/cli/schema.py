# lspbridge/cli/schema.py
"""
JSON input formats accepted by the CLI.

Positions are zero-based. File paths are resolved against the --root option.
"""
from pathlib import Path
from typing import List, Optional, Any

from pydantic import BaseModel, Field

from ..core.models import (
    CodeActionItem, Command, DiagnosticItem, DiagnosticResult, DiagnosticSeverity,
    FileChange, FileKey, Location, Position, Range, TextEdit,
)

class PositionIn(BaseModel):
    line: int = Field(ge=0)
    column: int = Field(ge=0)

    def to_model(self) -> Position:
        return Position(self.line, self.column)

class RangeIn(BaseModel):
    start: PositionIn
    end: PositionIn

    def to_model(self) -> Range:
        return Range(self.start.to_model(), self.end.to_model())

class DiagnosticIn(BaseModel):
    range: RangeIn
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    message: str
    code: Optional[str] = None
    source: Optional[str] = None

    def to_model(self) -> DiagnosticItem:
        return DiagnosticItem(range=self.range.to_model(), severity=self.severity,
                              message=self.message, code=self.code, source=self.source)

class PublishIn(BaseModel):
    file: str
    diagnostics: List[DiagnosticIn] = Field(default_factory=list)

    def to_model(self, root: Path) -> DiagnosticResult:
        items = sorted((d.to_model() for d in self.diagnostics), key=lambda d: d.range.start)
        return DiagnosticResult(file=FileKey.of(root / self.file), diagnostics=tuple(items))

class LocationIn(BaseModel):
    file: str
    range: RangeIn

    def to_model(self, root: Path) -> Location:
        return Location(file=FileKey.of(root / self.file), range=self.range.to_model())

class TextEditIn(BaseModel):
    range: RangeIn
    new_text: str = ""

    def to_model(self) -> TextEdit:
        return TextEdit(range=self.range.to_model(), new_text=self.new_text)

class FileChangeIn(BaseModel):
    file: str
    edits: List[TextEditIn] = Field(default_factory=list)

    def to_model(self, root: Path) -> FileChange:
        return FileChange(file=FileKey.of(root / self.file), edits=[e.to_model() for e in self.edits])

class CommandIn(BaseModel):
    title: str = ""
    command: str
    arguments: List[Any] = Field(default_factory=list)

    def to_model(self) -> Command:
        return Command(title=self.title, command=self.command, arguments=tuple(self.arguments))

class CodeActionIn(BaseModel):
    title: str
    changes: List[FileChangeIn] = Field(default_factory=list)
    command: Optional[CommandIn] = None

    def to_model(self, root: Path) -> CodeActionItem:
        return CodeActionItem(
            title=self.title,
            changes=[c.to_model(root) for c in self.changes],
            command=self.command.to_model() if self.command else None,
        )
