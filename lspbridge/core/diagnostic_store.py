# lspbridge/core/diagnostic_store.py

import threading
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .errors import DiagnosticConversionError
from .interfaces import DocumentHandle, UiExecutor, run_immediately
from .locator import DocumentLocator
from .models import DiagnosticItem, DiagnosticResult, FileKey, OverlayRegion, VisibilitySignal


def to_overlay_regions(items: Sequence[DiagnosticItem]) -> List[OverlayRegion]:
    """
    Maps diagnostics to overlay regions, one item at a time.

    Items that fail to convert are logged and left out; the rest still make it
    into the overlay.
    """
    regions: List[OverlayRegion] = []
    for item in items:
        try:
            regions.append(item.as_overlay_region())
        except DiagnosticConversionError as e:
            logger.error(f"Unable to map diagnostic to overlay region: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error mapping diagnostic '{getattr(item, 'message', item)}': {e}")
    return regions


class DiagnosticStore:
    """
    Latest published diagnostics per file.

    One writer path (`publish`), many readers. Lists are stored as tuples and
    replaced wholesale under a lock, so a reader either sees the previous list
    or the new one, never a mix.
    """

    def __init__(self, locator: DocumentLocator, run_on_ui: UiExecutor = run_immediately):
        self._locator = locator
        self._run_on_ui = run_on_ui
        self._lock = threading.Lock()
        self._diagnostics: Dict[FileKey, Tuple[DiagnosticItem, ...]] = {}

    def publish(self, result: Optional[DiagnosticResult]) -> VisibilitySignal:
        if result is DiagnosticResult.NO_UPDATE:
            return VisibilitySignal.UNCHANGED

        if result is None or result.file is None:
            logger.warning("Received an erroneous diagnostic result; showing empty state.")
            return VisibilitySignal.EMPTY

        file = FileKey.of(result.file)
        items = tuple(result.diagnostics)
        with self._lock:
            self._diagnostics[file] = items
        logger.debug(f"Stored {len(items)} diagnostic(s) for {file.name}")

        handle = self._locator.locate(file)
        if handle is not None:
            self._push_overlay(handle, items)

        return VisibilitySignal.POPULATED if items else VisibilitySignal.EMPTY

    def _push_overlay(self, handle: DocumentHandle, items: Tuple[DiagnosticItem, ...]) -> None:
        regions = to_overlay_regions(items)
        self._run_on_ui(lambda: handle.set_diagnostic_overlay(regions))

    def get(self, file: FileKey) -> Optional[Tuple[DiagnosticItem, ...]]:
        with self._lock:
            return self._diagnostics.get(FileKey.of(file))

    def snapshot(self) -> Dict[FileKey, Tuple[DiagnosticItem, ...]]:
        """A consistent copy of the store, in first-publish order."""
        with self._lock:
            return dict(self._diagnostics)

    def clear(self) -> None:
        with self._lock:
            self._diagnostics.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._diagnostics)
