# lspbridge/core/interfaces.py

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from .models import Command, DiagnosticGroup, FileKey, MatchPreview, OverlayRegion, Range


@runtime_checkable
class DocumentHandle(Protocol):
    """
    A live, editable document attached to the UI shell.

    Handles are owned by the shell. The bridge borrows one for the duration of
    a single query or edit and never keeps a reference beyond that call.
    Mutating methods must only be invoked on the UI execution context.
    """

    def insert(self, line: int, column: int, text: str) -> None: ...

    def replace(self, start_line: int, start_column: int, end_line: int, end_column: int, text: str) -> None: ...

    def set_diagnostic_overlay(self, regions: Sequence[OverlayRegion]) -> None: ...

    def set_selection(self, selection: Range) -> None: ...

    def get_current_file(self) -> Optional[FileKey]: ...

    def get_text(self) -> str: ...

    def execute_command(self, command: Optional[Command]) -> None: ...


@runtime_checkable
class UiShell(Protocol):
    """The editor window owning tabs, panels and dialogs."""

    def get_open_document(self, file: FileKey) -> Optional[DocumentHandle]: ...

    def open_file(self, file: FileKey) -> Optional[DocumentHandle]: ...

    def list_open_files(self) -> List[FileKey]: ...

    def get_focused_document(self) -> Optional[DocumentHandle]: ...

    def open_file_and_select(self, file: FileKey, selection: Range) -> None: ...

    def set_diagnostics_view(self, groups: List[DiagnosticGroup]) -> None: ...

    def handle_diagnostics_visibility(self, is_empty: bool) -> None: ...

    def hide_diagnostics(self) -> None: ...

    def set_search_results_view(self, results: Dict[FileKey, List[MatchPreview]]) -> None: ...

    def handle_search_results_visibility(self, is_empty: bool) -> None: ...

    def show_error(self, message: str) -> None: ...

    def show_progress(self, message: str) -> None: ...

    def hide_progress(self) -> None: ...


# Returns the currently bound shell, or None while no window is attached
ShellProvider = Callable[[], Optional[UiShell]]

# Schedules a callable on the UI execution context
UiExecutor = Callable[[Callable[[], None]], None]


def run_immediately(fn: Callable[[], None]) -> None:
    """UiExecutor for headless use: runs the callable on the calling thread."""
    fn()
