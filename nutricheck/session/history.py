"""Bounded most-recent-first list of past analyses."""
from typing import Iterator, List

from nutricheck import config
from nutricheck.data_layer.models import AnalysisResponse


class AnalysisHistory:
    """Keeps the last ``capacity`` successful analyses, newest first."""

    def __init__(self, capacity: int = config.HISTORY_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: List[AnalysisResponse] = []

    def add(self, response: AnalysisResponse) -> None:
        self._items.insert(0, response)
        del self._items[self.capacity:]

    def items(self) -> List[AnalysisResponse]:
        """Copy of the entries, most recent first."""
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AnalysisResponse]:
        return iter(list(self._items))
