# lspbridge/ui/executor.py

from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot
from loguru import logger


class QtUiExecutor(QObject):
    """
    UiExecutor that runs callables on the thread owning this object.

    Create it on the GUI thread. Calls from any thread are queued through a
    signal and executed by the GUI event loop in submission order.
    """
    _submitted = Signal(object)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._submitted.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def __call__(self, fn: Callable[[], None]) -> None:
        self._submitted.emit(fn)

    @Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        try:
            fn()
        except Exception as e:
            logger.exception(f"Error in UI task {fn!r}: {e}")

