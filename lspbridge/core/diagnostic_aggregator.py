# lspbridge/core/diagnostic_aggregator.py

from typing import Dict, List, Mapping, Sequence, Tuple

from loguru import logger

from ..config.schema import BridgeConfig, MAX_DIAGNOSTIC_FILES, MAX_DIAGNOSTIC_ITEMS_PER_FILE
from .locator import DocumentLocator
from .models import DiagnosticGroup, DiagnosticItem, FileKey


class DiagnosticAggregator:
    """
    Turns the diagnostic store into the bounded list of groups the
    diagnostics panel renders.

    At most `max_files` groups are produced, each with at most `max_items`
    diagnostics. When there are more files than slots, files open in the
    editor win, in tab order; leftover slots go to the remaining files sorted
    by name so overflow is reproducible.
    """

    def __init__(self, locator: DocumentLocator, config: BridgeConfig | None = None):
        self._locator = locator
        self._config = config or BridgeConfig()

    @property
    def max_files(self) -> int:
        return self._config.max_diagnostic_files

    @property
    def max_items(self) -> int:
        return self._config.max_diagnostic_items_per_file

    def aggregate(self, snapshot: Mapping[FileKey, Sequence[DiagnosticItem]]) -> List[DiagnosticGroup]:
        populated: Dict[FileKey, Sequence[DiagnosticItem]] = {f: items for f, items in snapshot.items() if items}
        if not populated:
            return []

        if len(populated) > self.max_files:
            logger.warning(f"Limiting the diagnostics to {self.max_files} files ({len(populated)} have diagnostics)")
            selected = self._select_relevant_files(populated)
        else:
            selected = list(populated)

        groups: List[DiagnosticGroup] = []
        for file in selected:
            groups.append(DiagnosticGroup(
                file=file,
                diagnostics=self._trim(file, populated[file]),
                icon=self._config.icon_for(file.name),
            ))
        return groups

    def _trim(self, file: FileKey, items: Sequence[DiagnosticItem]) -> Tuple[DiagnosticItem, ...]:
        if len(items) > self.max_items:
            logger.warning(f"Limiting diagnostics to {self.max_items} items for file {file.name}")
            return tuple(items[:self.max_items])
        return tuple(items)

    def _select_relevant_files(self, populated: Mapping[FileKey, Sequence[DiagnosticItem]]) -> List[FileKey]:
        # Diagnostics of open files must always be included
        selected = self._find_open_files(populated)
        if len(selected) < self.max_files:
            chosen = set(selected)
            for file in sorted(populated, key=lambda f: (f.name, str(f.path))):
                if file in chosen:
                    continue
                selected.append(file)
                chosen.add(file)
                if len(selected) == self.max_files:
                    break
        return selected

    def _find_open_files(self, populated: Mapping[FileKey, Sequence[DiagnosticItem]]) -> List[FileKey]:
        result: List[FileKey] = []
        for opened in self._locator.open_files():
            if opened in populated and opened not in result:
                result.append(opened)
            if len(result) == self.max_files:
                break
        return result
