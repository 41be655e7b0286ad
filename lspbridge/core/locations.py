# lspbridge/core/locations.py

from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from .locator import DocumentLocator
from .models import FileKey, Location, MatchPreview
from .text_content import TextContent

# --- Core Logic (Pure Python) ---

class LocationResultBuilder:
    """
    Builds per-file previews (containing line + matched span) for
    "go to definition / find references" results.

    Text comes from the live document when the file is open, from disk
    otherwise. A location that cannot be read or whose range does not fit the
    text is logged and skipped; the others are still built.

    Live documents belong to the UI thread. When building on a worker, call
    `capture_open_texts` on the UI context first and pass its result to
    `build`; the worker then only reads from disk.
    """

    def __init__(self, locator: DocumentLocator, encoding: str = "utf-8"):
        self._locator = locator
        self._encoding = encoding

    def capture_open_texts(self, locations: Sequence[Optional[Location]]) -> Dict[FileKey, str]:
        """Snapshots the text of every open document referenced by `locations`."""
        texts: Dict[FileKey, str] = {}
        for loc in locations:
            if loc is None:
                continue
            file = FileKey.of(loc.file)
            if file in texts:
                continue
            handle = self._locator.locate(file)
            if handle is not None:
                texts[file] = handle.get_text()
        return texts

    def build(self, locations: Sequence[Optional[Location]],
              open_texts: Optional[Mapping[FileKey, str]] = None) -> Dict[FileKey, List[MatchPreview]]:
        """
        Groups previews per file, in first-seen order.

        With `open_texts`, live documents are not touched: files in the mapping
        use its text, all others are read from disk.
        """
        results: Dict[FileKey, List[MatchPreview]] = {}
        # Each file is read at most once per build
        contents: Dict[FileKey, TextContent] = {}
        for loc in locations:
            if loc is None:
                continue
            try:
                file = FileKey.of(loc.file)
                if not file.path.is_file():
                    logger.debug(f"Skipping location in missing or non-regular file: {file}")
                    continue
                content = contents.get(file)
                if content is None:
                    content = self._load_content(file, open_texts)
                    contents[file] = content
                preview = self._preview(file, loc, content)
                results.setdefault(file, []).append(preview)
            except Exception as e:
                logger.error(f"Failed to show file location {loc}: {e}")
        return results

    def _load_content(self, file: FileKey, open_texts: Optional[Mapping[FileKey, str]]) -> TextContent:
        if open_texts is not None:
            text = open_texts.get(file)
            if text is not None:
                return TextContent(text)
        else:
            handle = self._locator.locate(file)
            if handle is not None:
                return TextContent(handle.get_text())
        return TextContent(file.path.read_text(encoding=self._encoding))

    @staticmethod
    def _preview(file: FileKey, loc: Location, content: TextContent) -> MatchPreview:
        start, end = loc.range.start, loc.range.end
        return MatchPreview(
            file=file,
            range=loc.range,
            line_text=content.line_string(start.line),
            match_text=content.sub_content(start.line, start.column, end.line, end.column),
        )

# --- Qt Adapter Task ---

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

class LocationResultSignals(QObject):
    finished = Signal(object); error = Signal(str) # finished emits Dict[FileKey, List[MatchPreview]]

class LocationResultTask(QRunnable):
    """QRunnable adapter building location previews off the UI thread (disk reads)."""
    def __init__(self, builder: LocationResultBuilder, locations: Sequence[Optional[Location]],
                 open_texts: Optional[Mapping[FileKey, str]] = None):
        super().__init__()
        self.builder = builder
        self.locations = list(locations)
        # Captured on the UI context; the worker never touches live documents
        self.open_texts = dict(open_texts) if open_texts is not None else {}
        self.signals = LocationResultSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self) -> None:
        try:
            self.signals.finished.emit(self.builder.build(self.locations, self.open_texts))
        except Exception as e:
            logger.exception(f"Unexpected error building location results: {e}")
            self.signals.error.emit(f"Unexpected Location Error: {e}")
