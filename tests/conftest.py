import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest


def _add_root_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_add_root_to_path()

from PySide6.QtCore import QCoreApplication

from lspbridge.core.models import (
    DiagnosticGroup, DiagnosticItem, DiagnosticSeverity, FileKey, MatchPreview, Range,
)
from lspbridge.core.text_content import HeadlessDocument


class FakeShell:
    """In-memory UiShell that records every call it receives."""

    def __init__(self) -> None:
        self.documents: Dict[FileKey, HeadlessDocument] = {}
        self.focused: Optional[HeadlessDocument] = None
        self.openable = True
        self.open_calls: List[FileKey] = []
        self.selected: List[tuple] = []
        self.diagnostic_views: List[List[DiagnosticGroup]] = []
        self.diagnostics_visibility: List[bool] = []
        self.search_views: List[Dict[FileKey, List[MatchPreview]]] = []
        self.search_visibility: List[bool] = []
        self.errors: List[str] = []
        self.progress: List[str] = []
        self.hidden_diagnostics = 0

    def add_document(self, path: Path, text: Optional[str] = None) -> HeadlessDocument:
        file = FileKey.of(path)
        if text is None:
            text = file.path.read_text(encoding="utf-8") if file.path.exists() else ""
        doc = HeadlessDocument(file, text)
        self.documents[file] = doc
        return doc

    def get_open_document(self, file: FileKey) -> Optional[HeadlessDocument]:
        return self.documents.get(file)

    def open_file(self, file: FileKey) -> Optional[HeadlessDocument]:
        self.open_calls.append(file)
        if not self.openable:
            return None
        return self.add_document(file.path)

    def list_open_files(self) -> List[FileKey]:
        return list(self.documents)

    def get_focused_document(self) -> Optional[HeadlessDocument]:
        return self.focused

    def open_file_and_select(self, file: FileKey, selection: Range) -> None:
        self.selected.append((file, selection))

    def set_diagnostics_view(self, groups: List[DiagnosticGroup]) -> None:
        self.diagnostic_views.append(groups)

    def handle_diagnostics_visibility(self, is_empty: bool) -> None:
        self.diagnostics_visibility.append(is_empty)

    def hide_diagnostics(self) -> None:
        self.hidden_diagnostics += 1

    def set_search_results_view(self, results: Dict[FileKey, List[MatchPreview]]) -> None:
        self.search_views.append(results)

    def handle_search_results_visibility(self, is_empty: bool) -> None:
        self.search_visibility.append(is_empty)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def show_progress(self, message: str) -> None:
        self.progress.append(message)

    def hide_progress(self) -> None:
        self.progress.append("<hidden>")


class QueuedExecutor:
    """UiExecutor that holds callables until drain() is called, like a UI event loop."""

    def __init__(self) -> None:
        self.pending: List[Callable[[], None]] = []

    def __call__(self, fn: Callable[[], None]) -> None:
        self.pending.append(fn)

    def drain(self) -> int:
        count = 0
        while self.pending:
            self.pending.pop(0)()
            count += 1
        return count


class InlinePool:
    """Worker pool running each task synchronously on start()."""

    def __init__(self) -> None:
        self.started = 0

    def start(self, runnable) -> None:
        self.started += 1
        runnable.run()


def make_diagnostic(line: int, start_col: int = 0, end_line: Optional[int] = None, end_col: int = 5,
                    message: str = "problem", severity: DiagnosticSeverity = DiagnosticSeverity.ERROR) -> DiagnosticItem:
    return DiagnosticItem(
        range=Range.of(line, start_col, line if end_line is None else end_line, end_col),
        severity=severity,
        message=message,
    )


@pytest.fixture(scope="session", autouse=True)
def qcore_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def shell() -> FakeShell:
    return FakeShell()


@pytest.fixture
def queued_executor() -> QueuedExecutor:
    return QueuedExecutor()


@pytest.fixture
def inline_pool() -> InlinePool:
    return InlinePool()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "lspbridge-home"
    monkeypatch.setenv("LSPBRIDGE_HOME", str(home))
    from lspbridge.config import loader
    loader.reset_config_cache()
    yield home
    loader.reset_config_cache()
