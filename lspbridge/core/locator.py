# lspbridge/core/locator.py

from typing import List, Optional

from loguru import logger

from .interfaces import DocumentHandle, ShellProvider, UiShell
from .models import FileKey


class DocumentLocator:
    """Finds the live document for a file, if the UI shell has one open."""

    def __init__(self, shell_provider: Optional[ShellProvider] = None):
        self._shell_provider = shell_provider

    def set_shell_provider(self, shell_provider: Optional[ShellProvider]) -> None:
        self._shell_provider = shell_provider

    def shell(self) -> Optional[UiShell]:
        """The currently bound shell, or None when no window is attached."""
        if self._shell_provider is None:
            return None
        return self._shell_provider()

    def locate(self, file: FileKey) -> Optional[DocumentHandle]:
        shell = self.shell()
        if shell is None:
            logger.trace(f"No UI shell bound; {file.name} treated as not open.")
            return None
        return shell.get_open_document(file)

    def open_files(self) -> List[FileKey]:
        """Open files in the shell's tab order."""
        shell = self.shell()
        if shell is None:
            return []
        return [FileKey.of(f) for f in shell.list_open_files()]
