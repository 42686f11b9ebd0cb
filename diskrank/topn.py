from __future__ import annotations
import heapq
from typing import Any, Generic, Iterable, List, Optional, Tuple, TypeVar

from .errors import InvalidConfiguration

T = TypeVar("T")


class TopN(Generic[T]):
    """Keeps the ``capacity`` largest records of a stream.

    Heap items are (key, -seq, record): the heap root is the smallest key and,
    among equal keys, the latest offered one. A record is only displaced by a
    strictly larger key, so the result is always the first ``capacity`` records
    of a stable descending sort of the whole stream.
    """

    def __init__(self, capacity: int):
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
            raise InvalidConfiguration(f"top-N capacity must be an integer >= 1, got {capacity!r}")
        self.capacity = capacity
        self.offered = 0
        self._heap: Optional[List[Tuple[Any, int, T]]] = []

    def _live(self) -> List[Tuple[Any, int, T]]:
        if self._heap is None:
            raise RuntimeError("TopN already drained")
        return self._heap

    def __len__(self) -> int:
        return len(self._live())

    @property
    def min_key(self):
        heap = self._live()
        return heap[0][0] if heap else None

    def offer(self, key, record: T) -> bool:
        heap = self._live()
        seq = self.offered
        self.offered += 1
        if len(heap) < self.capacity:
            heapq.heappush(heap, (key, -seq, record))
            return True
        if key > heap[0][0]:
            heapq.heapreplace(heap, (key, -seq, record))
            return True
        return False

    def drain_items(self) -> List[Tuple[Any, T]]:
        heap = self._live()
        self._heap = None
        heap.sort(key=lambda x: (-x[0], -x[1]))
        return [(k, r) for k, _, r in heap]

    def drain(self) -> List[T]:
        return [r for _, r in self.drain_items()]


def merge(drained: Iterable[List[Tuple[Any, T]]], capacity: int) -> TopN[T]:
    """Re-offer the drained (key, record) lists, in order, into one selector."""
    out: TopN[T] = TopN(capacity)
    for items in drained:
        for key, rec in items:
            out.offer(key, rec)
    return out
