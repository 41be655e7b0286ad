# lspbridge/core/diagnostic_lookup.py

from bisect import bisect_right
from typing import Optional, Sequence

from .diagnostic_store import DiagnosticStore
from .models import DiagnosticItem, FileKey, Position


def binary_search_diagnostic(diagnostics: Optional[Sequence[DiagnosticItem]], line: int, column: int) -> Optional[DiagnosticItem]:
    """
    Returns the diagnostic whose range covers (line, column), or None.

    `diagnostics` must be sorted by range start. Candidates are the items
    sharing the start of the last item starting at or before the point; range
    ends are inclusive. A range that starts earlier and overlaps a later one
    is not found when the point lies past the later start.
    """
    if not diagnostics:
        return None
    point = Position(line, column)
    index = bisect_right(diagnostics, point, key=lambda d: d.range.start)
    if index == 0:
        return None
    start = diagnostics[index - 1].range.start
    for i in range(index - 1, -1, -1):
        candidate = diagnostics[i]
        if candidate.range.start != start:
            break
        if candidate.range.contains(point):
            return candidate
    return None


class DiagnosticLookup:
    """Point queries (hover, click) against the diagnostic store."""

    def __init__(self, store: DiagnosticStore):
        self._store = store

    def find(self, file: FileKey, line: int, column: int) -> Optional[DiagnosticItem]:
        return binary_search_diagnostic(self._store.get(file), line, column)
