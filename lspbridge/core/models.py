# lspbridge/core/models.py

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, ClassVar, Optional, Tuple, Union

from .errors import DiagnosticConversionError


@dataclass(frozen=True)
class FileKey:
    """
    Canonical identity of a document: an absolute, resolved path.

    Two keys built from different spellings of the same path compare and hash
    equal, so a FileKey is safe to use as the join key between the
    diagnostic store, open-document tracking and edit routing.
    """
    path: Path

    @classmethod
    def of(cls, value: Union[str, PathLike, "FileKey"]) -> "FileKey":
        if isinstance(value, FileKey):
            return value
        return cls(Path(value).expanduser().resolve())

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line and column."""
    line: int
    column: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def of(cls, start_line: int, start_column: int, end_line: int, end_column: int) -> "Range":
        return cls(Position(start_line, start_column), Position(end_line, end_column))

    @classmethod
    def point(cls, line: int, column: int) -> "Range":
        pos = Position(line, column)
        return cls(pos, pos)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, position: Position) -> bool:
        # Both ends inclusive; a zero-width range contains its own point.
        return self.start <= position <= self.end


class DiagnosticSeverity(enum.IntEnum):
    ERROR = 1
    WARNING = 2
    INFO = 3
    HINT = 4


@dataclass(frozen=True)
class OverlayRegion:
    """Highlighting record pushed into a live document's diagnostic overlay."""
    range: Range
    severity: DiagnosticSeverity
    message: str


@dataclass(frozen=True)
class DiagnosticItem:
    """One reported issue in a file."""
    range: Range
    severity: DiagnosticSeverity
    message: str
    code: Optional[str] = None
    source: Optional[str] = None

    def as_overlay_region(self) -> OverlayRegion:
        if self.range.end < self.range.start:
            raise DiagnosticConversionError(f"Inverted range {self.range} for diagnostic '{self.message}'")
        try:
            severity = DiagnosticSeverity(self.severity)
        except ValueError as e:
            raise DiagnosticConversionError(f"Unknown severity {self.severity!r} for diagnostic '{self.message}'") from e
        return OverlayRegion(range=self.range, severity=severity, message=self.message)


@dataclass(frozen=True)
class DiagnosticResult:
    """
    A publish event from the backend: all diagnostics of one file.

    `DiagnosticResult.NO_UPDATE` is the sentinel meaning "leave the store alone".
    """
    file: Optional[FileKey]
    diagnostics: Tuple[DiagnosticItem, ...] = ()

    NO_UPDATE: ClassVar["DiagnosticResult"]

    def __post_init__(self):
        # Stored lists must never be mutated after publish
        object.__setattr__(self, "diagnostics", tuple(self.diagnostics))

DiagnosticResult.NO_UPDATE = DiagnosticResult(file=None)


class VisibilitySignal(enum.Enum):
    UNCHANGED = "unchanged"
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass(frozen=True)
class DiagnosticGroup:
    """A capped, ordered slice of one file's diagnostics prepared for display."""
    file: FileKey
    diagnostics: Tuple[DiagnosticItem, ...]
    icon: str


@dataclass(frozen=True)
class Command:
    """Follow-up command executed by the editor after a code action was applied."""
    title: str
    command: str
    arguments: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class TextEdit:
    range: Range
    new_text: str


@dataclass
class FileChange:
    file: Optional[FileKey]
    edits: list[TextEdit] = field(default_factory=list)


@dataclass
class CodeActionItem:
    title: str
    changes: list[FileChange] = field(default_factory=list)
    command: Optional[Command] = None


@dataclass(frozen=True)
class Location:
    file: FileKey
    range: Range


@dataclass(frozen=True)
class MatchPreview:
    """One row of a "find references / definition" result list."""
    file: FileKey
    range: Range
    line_text: str
    match_text: str


@dataclass(frozen=True)
class ShowDocumentParams:
    file: FileKey
    selection: Range


@dataclass(frozen=True)
class ShowDocumentResult:
    success: bool
