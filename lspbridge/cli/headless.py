# lspbridge/cli/headless.py

from typing import Dict, List, Optional

from loguru import logger

from ..core.models import DiagnosticGroup, FileKey, MatchPreview, Range
from ..core.text_content import HeadlessDocument


class HeadlessShell:
    """
    UiShell without a window: documents are read from disk into memory and
    written back on demand. View updates are only logged.
    """

    def __init__(self, open_files: Optional[List[FileKey]] = None, encoding: str = "utf-8"):
        self.encoding = encoding
        self.documents: Dict[FileKey, HeadlessDocument] = {}
        self.errors: List[str] = []
        for file in open_files or []:
            self.open_file(file)

    def get_open_document(self, file: FileKey) -> Optional[HeadlessDocument]:
        return self.documents.get(file)

    def open_file(self, file: FileKey) -> Optional[HeadlessDocument]:
        if file in self.documents:
            return self.documents[file]
        try:
            text = file.path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not open {file}: {e}")
            return None
        doc = HeadlessDocument(file, text)
        self.documents[file] = doc
        return doc

    def list_open_files(self) -> List[FileKey]:
        return list(self.documents)

    def get_focused_document(self) -> Optional[HeadlessDocument]:
        return None

    def open_file_and_select(self, file: FileKey, selection: Range) -> None:
        doc = self.open_file(file)
        if doc is not None:
            doc.set_selection(selection)

    def set_diagnostics_view(self, groups: List[DiagnosticGroup]) -> None:
        logger.debug(f"Diagnostics view: {len(groups)} group(s)")

    def handle_diagnostics_visibility(self, is_empty: bool) -> None:
        logger.debug(f"Diagnostics panel empty: {is_empty}")

    def hide_diagnostics(self) -> None:
        pass

    def set_search_results_view(self, results: Dict[FileKey, List[MatchPreview]]) -> None:
        logger.debug(f"Search results view: {len(results)} file(s)")

    def handle_search_results_visibility(self, is_empty: bool) -> None:
        logger.debug(f"Search results empty: {is_empty}")

    def show_error(self, message: str) -> None:
        logger.error(message)
        self.errors.append(message)

    def show_progress(self, message: str) -> None:
        logger.info(message)

    def hide_progress(self) -> None:
        pass

    def save_modified(self) -> List[FileKey]:
        """Writes every modified document back to disk. Returns the files written."""
        written: List[FileKey] = []
        for file, doc in self.documents.items():
            if not doc.modified:
                continue
            try:
                file.path.write_text(doc.get_text(), encoding=self.encoding)
                doc.modified = False
                written.append(file)
            except OSError as e:
                logger.error(f"Failed to write {file}: {e}")
        return written
