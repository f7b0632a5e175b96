"""
Priority Queue Module
=====================

Binary min-heap over (item, priority) entries.
"""

from typing import Any, List, Optional, Tuple


class MinPriorityQueue:
    """
    Minimum-priority queue backed by a dense, zero-indexed binary heap.

    Heap invariant: every parent's priority <= both children's priorities.
    Items are opaque and never compared; only priorities are. Ties resolve
    by heap layout, so no ordering among equal priorities is guaranteed.
    """

    def __init__(self):
        self._heap: List[Tuple[Any, float]] = []

    def push(self, item: Any, priority: float) -> None:
        """Append an entry then sift it up to restore the heap"""
        self._heap.append((item, priority))
        self._sift_up(len(self._heap) - 1)

    def pop(self) -> Optional[Any]:
        """Remove and return a minimum-priority item, or None if empty"""
        if not self._heap:
            return None

        top = self._heap[0][0]
        last = self._heap.pop()
        if self._heap:
            self._heap[0] = last
            self._sift_down(0)
        return top

    def peek(self) -> Optional[Any]:
        """Minimum-priority item without removing it, or None if empty"""
        return self._heap[0][0] if self._heap else None

    def size(self) -> int:
        return len(self._heap)

    def _sift_up(self, i: int) -> None:
        heap = self._heap
        while i > 0:
            parent = (i - 1) // 2
            if heap[parent][1] <= heap[i][1]:
                break
            heap[parent], heap[i] = heap[i], heap[parent]
            i = parent

    def _sift_down(self, i: int) -> None:
        heap = self._heap
        n = len(heap)
        while True:
            left = 2 * i + 1
            right = left + 1
            smallest = i
            if left < n and heap[left][1] < heap[smallest][1]:
                smallest = left
            if right < n and heap[right][1] < heap[smallest][1]:
                smallest = right
            if smallest == i:
                break
            heap[i], heap[smallest] = heap[smallest], heap[i]
            i = smallest

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __repr__(self) -> str:
        return f"MinPriorityQueue(size={len(self._heap)})"
