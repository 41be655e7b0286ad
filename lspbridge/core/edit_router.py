# lspbridge/core/edit_router.py

from typing import Optional

from loguru import logger

from .interfaces import DocumentHandle, UiExecutor, run_immediately
from .locator import DocumentLocator
from .models import CodeActionItem, FileChange, FileKey, TextEdit

# --- Core Logic (Pure Python) ---

def edit_in_document(handle: DocumentHandle, edit: TextEdit) -> None:
    """Applies one edit: zero-width ranges insert, anything else replaces [start, end)."""
    start, end = edit.range.start, edit.range.end
    if edit.range.is_empty:
        handle.insert(start.line, start.column, edit.new_text)
    else:
        handle.replace(start.line, start.column, end.line, end.column, edit.new_text)


class EditRouter:
    """
    Applies a code action's edits to the right live documents.

    Each target file resolves to, in order of preference: the document that
    requested the action, another open document, or a document the shell opens
    on demand. Resolution may run on a worker thread; every text mutation is
    handed to `run_on_ui`.

    Edits are applied exactly as given. Ranges are in the coordinates of the
    document before the action, and later edits are not rebased onto earlier
    ones, so callers supply non-overlapping, correctly ordered edits.
    """

    def __init__(self, locator: DocumentLocator, run_on_ui: UiExecutor = run_immediately):
        self._locator = locator
        self._run_on_ui = run_on_ui

    def apply(self, action: CodeActionItem, origin: DocumentHandle) -> bool:
        """
        Routes and schedules every edit of `action`.

        Returns False (doing nothing) when the action carries no changes, True
        otherwise, even if some files or edits had to be skipped.
        """
        logger.debug(f"Performing code action: {action.title!r}")
        if not action.changes:
            logger.warning(f"Code action {action.title!r} has no changes.")
            return False

        origin_file = origin.get_current_file() if origin is not None else None
        for change in action.changes:
            self._apply_change(change, origin, origin_file)
        return True

    def _apply_change(self, change: FileChange, origin: DocumentHandle, origin_file: Optional[FileKey]) -> None:
        if change.file is None:
            return
        file = FileKey.of(change.file)
        if not file.path.exists():
            logger.warning(f"Skipping edits for missing file: {file}")
            return

        for edit in change.edits:
            handle = self._resolve_handle(file, origin, origin_file)
            if handle is None:
                logger.warning(f"No document available for {file.name}; edit at {edit.range.start} skipped.")
                continue
            self._schedule_edit(handle, edit)

    def _resolve_handle(self, file: FileKey, origin: DocumentHandle, origin_file: Optional[FileKey]) -> Optional[DocumentHandle]:
        # Edits in the requesting document always land in that exact instance
        if origin_file is not None and FileKey.of(origin_file) == file:
            return origin

        handle = self._locator.locate(file)
        if handle is not None:
            return handle

        shell = self._locator.shell()
        if shell is None:
            return None
        logger.info(f"Opening {file.name} to apply code action edits.")
        return shell.open_file(file)

    def _schedule_edit(self, handle: DocumentHandle, edit: TextEdit) -> None:
        def _run():
            try:
                edit_in_document(handle, edit)
            except Exception as e:
                logger.exception(f"Failed to apply edit {edit.range}: {e}")
        self._run_on_ui(_run)

# --- Qt Adapter Task ---

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

class CodeActionSignals(QObject):
    finished = Signal(bool); error = Signal(str)

class CodeActionTask(QRunnable):
    """QRunnable adapter running EditRouter.apply on a QThreadPool worker."""
    def __init__(self, router: EditRouter, action: CodeActionItem, origin: DocumentHandle):
        super().__init__()
        self.router = router
        self.action = action
        self.origin = origin
        self.signals = CodeActionSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self) -> None:
        try:
            result = self.router.apply(self.action, self.origin)
            self.signals.finished.emit(bool(result))
        except Exception as e:
            logger.exception(f"Unexpected error performing code action {self.action.title!r}: {e}")
            self.signals.error.emit(f"Unexpected Code Action Error: {e}")
        finally:
            self.origin = None # Handles are borrowed, never retained
