# lspbridge/core/text_content.py

from typing import List, Optional

from loguru import logger

from .errors import TextRangeError
from .models import Command, FileKey, OverlayRegion, Range


class TextContent:
    """
    Line/column addressable text.

    Used to cut preview lines and spans out of files read from disk, and as the
    buffer behind headless documents (CLI apply). Lines are split on '\\n'; a
    trailing '\\r' stays part of its line.
    """

    def __init__(self, text: str = ""):
        self._lines: List[str] = text.split("\n")

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def __str__(self) -> str:
        return "\n".join(self._lines)

    def _check(self, line: int, column: int) -> None:
        if line < 0 or line >= len(self._lines):
            raise TextRangeError(f"Line {line} out of range (0..{len(self._lines) - 1})")
        if column < 0 or column > len(self._lines[line]):
            raise TextRangeError(f"Column {column} out of range for line {line} (0..{len(self._lines[line])})")

    def _offset(self, line: int, column: int) -> int:
        self._check(line, column)
        return sum(len(l) + 1 for l in self._lines[:line]) + column

    def line_string(self, line: int) -> str:
        self._check(line, 0)
        return self._lines[line].rstrip("\r")

    def sub_content(self, start_line: int, start_column: int, end_line: int, end_column: int) -> str:
        start = self._offset(start_line, start_column)
        end = self._offset(end_line, end_column)
        if end < start:
            raise TextRangeError(f"End ({end_line}, {end_column}) precedes start ({start_line}, {start_column})")
        return str(self)[start:end]

    def insert(self, line: int, column: int, text: str) -> None:
        self.replace(line, column, line, column, text)

    def replace(self, start_line: int, start_column: int, end_line: int, end_column: int, text: str) -> None:
        full = str(self)
        start = self._offset(start_line, start_column)
        end = self._offset(end_line, end_column)
        if end < start:
            raise TextRangeError(f"End ({end_line}, {end_column}) precedes start ({start_line}, {start_column})")
        self._lines = (full[:start] + text + full[end:]).split("\n")


class HeadlessDocument:
    """
    DocumentHandle backed by a TextContent, for use without an editor window.

    Commands and overlays have nowhere to go, so they are recorded and logged.
    """

    def __init__(self, file: Optional[FileKey], text: str = ""):
        self.file = file
        self.content = TextContent(text)
        self.overlay: List[OverlayRegion] = []
        self.selection: Optional[Range] = None
        self.executed_commands: List[Command] = []
        self.modified = False

    def insert(self, line: int, column: int, text: str) -> None:
        self.content.insert(line, column, text)
        self.modified = True

    def replace(self, start_line: int, start_column: int, end_line: int, end_column: int, text: str) -> None:
        self.content.replace(start_line, start_column, end_line, end_column, text)
        self.modified = True

    def set_diagnostic_overlay(self, regions) -> None:
        self.overlay = list(regions)

    def set_selection(self, selection: Range) -> None:
        self.selection = selection

    def get_current_file(self) -> Optional[FileKey]:
        return self.file

    def get_text(self) -> str:
        return str(self.content)

    def execute_command(self, command: Optional[Command]) -> None:
        if command is None:
            return
        logger.debug(f"Headless document {self.file} received command '{command.command}'")
        self.executed_commands.append(command)
