# lspbridge/core/client.py

from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Slot
from loguru import logger

from ..config.schema import BridgeConfig
from .diagnostic_aggregator import DiagnosticAggregator
from .diagnostic_lookup import DiagnosticLookup
from .diagnostic_store import DiagnosticStore
from .edit_router import CodeActionTask, EditRouter
from .errors import ClientStateError
from .interfaces import DocumentHandle, ShellProvider, UiExecutor, UiShell, run_immediately
from .locations import LocationResultBuilder, LocationResultTask
from .locator import DocumentLocator
from .models import (
    CodeActionItem, DiagnosticItem, DiagnosticResult, FileKey, Location, MatchPreview,
    ShowDocumentParams, ShowDocumentResult, VisibilitySignal,
)


class WorkerPool(Protocol):
    def start(self, runnable: QRunnable) -> None: ...


def _is_utf8(path: Path) -> bool:
    try:
        path.read_bytes().decode("utf-8")
        return True
    except (OSError, UnicodeDecodeError):
        return False


class LanguageClient(QObject):
    """
    Coordinates language-server results with the editor shell.

    Owned by the application's composition root and passed to whoever needs
    it. `initialize()` binds the shell provider and may only be called once
    until `shutdown()`; the backend may publish before that, in which case
    diagnostics are stored but nothing is shown.

    Args:
        config: Display caps, icons and user-facing messages.
        run_on_ui: Schedules a callable on the UI execution context. Every
            document mutation and shell update goes through it.
        thread_pool: Pool for code-action application and location previews.
            Defaults to QThreadPool.globalInstance().

    Create the client on the GUI thread: worker results are delivered to its
    slots through queued connections.
    """

    def __init__(self,
                 config: Optional[BridgeConfig] = None,
                 run_on_ui: UiExecutor = run_immediately,
                 thread_pool: Optional[WorkerPool] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.config = config or BridgeConfig()
        self._run_on_ui = run_on_ui
        self._thread_pool = thread_pool
        self._initialized = False
        # Running tasks keyed by id() of their signals object; the entry keeps
        # task and signals alive until a finished/error slot removes it
        self._code_action_tasks: Dict[int, Tuple[CodeActionTask, DocumentHandle, CodeActionItem]] = {}
        self._location_tasks: Dict[int, LocationResultTask] = {}

        self.locator = DocumentLocator()
        self.store = DiagnosticStore(self.locator, run_on_ui)
        self.aggregator = DiagnosticAggregator(self.locator, self.config)
        self.lookup = DiagnosticLookup(self.store)
        self.edit_router = EditRouter(self.locator, run_on_ui)
        self.location_builder = LocationResultBuilder(self.locator)

    # --- Lifecycle ---

    def initialize(self, shell_provider: ShellProvider) -> "LanguageClient":
        if self._initialized:
            raise ClientStateError("Client is already initialized")
        self.locator.set_shell_provider(shell_provider)
        self._initialized = True
        logger.info("Language client initialized.")
        return self

    def shutdown(self) -> None:
        self.locator.set_shell_provider(None)
        self._initialized = False
        logger.info("Language client shut down.")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def require_initialized(self) -> "LanguageClient":
        if not self._initialized:
            raise ClientStateError("Client not initialized")
        return self

    def set_shell_provider(self, shell_provider: Optional[ShellProvider]) -> None:
        self.locator.set_shell_provider(shell_provider)

    @property
    def shell(self) -> Optional[UiShell]:
        return self.locator.shell()

    @property
    def thread_pool(self) -> WorkerPool:
        if self._thread_pool is None:
            pool = QThreadPool.globalInstance()
            if self.config.max_worker_threads is not None:
                pool.setMaxThreadCount(self.config.max_worker_threads)
            self._thread_pool = pool
        return self._thread_pool

    # --- Diagnostics ---

    def publish_diagnostics(self, result: Optional[DiagnosticResult]) -> VisibilitySignal:
        signal = self.store.publish(result)
        if signal is VisibilitySignal.UNCHANGED:
            return signal

        shell = self.shell
        if shell is None:
            return signal

        is_empty = signal is not VisibilitySignal.POPULATED
        if result is None or result.file is None:
            self._run_on_ui(lambda: shell.handle_diagnostics_visibility(is_empty))
            return signal

        groups = self.aggregator.aggregate(self.store.snapshot())
        def _update_view():
            shell.handle_diagnostics_visibility(is_empty)
            shell.set_diagnostics_view(groups)
        self._run_on_ui(_update_view)
        return signal

    def get_diagnostic_at(self, file: FileKey, line: int, column: int) -> Optional[DiagnosticItem]:
        return self.lookup.find(FileKey.of(file), line, column)

    def hide_diagnostics(self) -> None:
        shell = self.shell
        if shell is None:
            return
        self._run_on_ui(shell.hide_diagnostics)

    # --- Code actions ---

    def perform_code_action_for_file(self, file: FileKey, action: CodeActionItem) -> bool:
        """Performs `action` on behalf of the open document showing `file`, if any."""
        handle = self.locator.locate(FileKey.of(file))
        if handle is None:
            logger.warning(f"No open document for {file}; code action {action.title!r} not performed.")
            return False
        return self.perform_code_action(handle, action)

    def perform_code_action(self, handle: Optional[DocumentHandle], action: Optional[CodeActionItem]) -> bool:
        """
        Applies `action` on a worker thread, then runs its command on `handle`.

        Returns False when the action could not even be started (no shell,
        handle or action). Failures during application are reported to the
        user through the shell.
        """
        shell = self.shell
        if shell is None or handle is None or action is None:
            logger.error(f"Unable to perform code action: shell={shell}, handle={handle}, action={action}")
            if shell is not None:
                message = self.config.messages.cannot_perform_fix
                self._run_on_ui(lambda: shell.show_error(message))
            return False

        self._run_on_ui(lambda: shell.show_progress(self.config.messages.performing_actions))
        task = CodeActionTask(self.edit_router, action, handle)
        self._code_action_tasks[id(task.signals)] = (task, handle, action)
        task.signals.finished.connect(self._on_code_action_finished)
        task.signals.error.connect(self._on_code_action_error)
        self.thread_pool.start(task)
        return True

    def has_pending_tasks(self) -> bool:
        """True while a code action or location task has not reported back."""
        return bool(self._code_action_tasks or self._location_tasks)

    def _take_code_action(self) -> Optional[Tuple[CodeActionTask, DocumentHandle, CodeActionItem]]:
        entry = self._code_action_tasks.pop(id(self.sender()), None)
        if entry is None:
            logger.warning("Code action result received from an unknown task.")
        return entry

    @Slot(bool)
    def _on_code_action_finished(self, applied: bool) -> None:
        entry = self._take_code_action()
        if entry is None:
            return
        _, handle, action = entry
        self._complete_code_action(handle, action, applied)

    @Slot(str)
    def _on_code_action_error(self, message: str) -> None:
        entry = self._take_code_action()
        if entry is None:
            return
        _, handle, action = entry
        logger.error(f"Code action {action.title!r} failed: {message}")
        self._complete_code_action(handle, action, False)

    def _complete_code_action(self, handle: DocumentHandle, action: CodeActionItem, applied: bool) -> None:
        # All edits are already queued on the UI context, so anything queued
        # from here runs after them.
        shell = self.shell
        if shell is not None:
            self._run_on_ui(shell.hide_progress)

        if not applied:
            logger.error(f"Unable to perform code action {action.title!r}")
            if shell is not None:
                message = self.config.messages.cannot_perform_fix
                self._run_on_ui(lambda: shell.show_error(message))
            return

        if action.command is None:
            logger.debug(f"Code action {action.title!r} has no follow-up command.")
            return
        command = action.command
        self._run_on_ui(lambda: handle.execute_command(command))

    # --- Locations / show document ---

    def show_locations(self, locations: Optional[Sequence[Optional[Location]]]) -> None:
        shell = self.shell
        if shell is None:
            return

        is_empty = not locations
        self._run_on_ui(lambda: shell.handle_search_results_visibility(is_empty))
        if is_empty:
            self._run_on_ui(lambda: shell.set_search_results_view({}))
            return

        locations = list(locations)
        self._run_on_ui(lambda: self._start_location_task(locations))

    def _start_location_task(self, locations: List[Optional[Location]]) -> None:
        # Runs on the UI context, the only place live documents may be read
        open_texts = self.location_builder.capture_open_texts(locations)
        task = LocationResultTask(self.location_builder, locations, open_texts)
        self._location_tasks[id(task.signals)] = task
        task.signals.finished.connect(self._on_locations_built)
        task.signals.error.connect(self._on_locations_error)
        self.thread_pool.start(task)

    @Slot(object) # Receives Dict[FileKey, List[MatchPreview]]
    def _on_locations_built(self, results: Dict[FileKey, List[MatchPreview]]) -> None:
        self._location_tasks.pop(id(self.sender()), None)
        shell = self.shell
        if shell is None:
            return
        self._run_on_ui(lambda: shell.set_search_results_view(results))

    @Slot(str)
    def _on_locations_error(self, message: str) -> None:
        self._location_tasks.pop(id(self.sender()), None)
        logger.error(f"Location results failed: {message}")

    def show_document(self, params: Optional[ShowDocumentParams]) -> ShowDocumentResult:
        shell = self.shell
        if shell is None or params is None:
            return ShowDocumentResult(success=False)

        file = FileKey.of(params.file)
        if not file.path.is_file() or not _is_utf8(file.path):
            logger.warning(f"Cannot show document {file}: missing, not a regular file or not UTF-8.")
            return ShowDocumentResult(success=False)

        selection = params.selection
        focused = shell.get_focused_document()
        focused_file = focused.get_current_file() if focused is not None else None
        if focused is not None and focused_file is not None and FileKey.of(focused_file) == file:
            self._run_on_ui(lambda: focused.set_selection(selection))
        else:
            self._run_on_ui(lambda: shell.open_file_and_select(file, selection))
        return ShowDocumentResult(success=True)
