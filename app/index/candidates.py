"""Bounded best-so-far working set for k-nearest-neighbour search."""

from __future__ import annotations

import heapq
import math

from app.models.driver import Driver


class CandidateSet:
    """Keeps at most `k` drivers, evicting the farthest one when a closer driver shows up.

    Stored as a max-heap keyed on `(-distance, -seq)` where `seq` is the visit order,
    so among equal distances the latest visited driver is evicted first and results
    keep traversal order for ties.
    """

    __slots__ = ("_k", "_heap", "_seq")

    def __init__(self, k: int) -> None:
        self._k = max(0, int(k))
        self._heap: list[tuple[float, int, Driver]] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._heap)

    @property
    def capacity(self) -> int:
        return self._k

    def is_full(self) -> bool:
        return len(self._heap) >= self._k

    def worst_distance(self) -> float:
        """Distance of the current k-th candidate, or +inf while the set is not full."""

        if not self.is_full() or not self._heap:
            return math.inf
        return -self._heap[0][0]

    def offer(self, distance: float, driver: Driver) -> bool:
        """Consider `driver` at `distance`; return True when it was kept."""

        if self._k == 0:
            return False
        self._seq += 1
        entry = (-distance, -self._seq, driver)
        if len(self._heap) < self._k:
            heapq.heappush(self._heap, entry)
            return True
        if distance < -self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def ordered(self) -> list[tuple[float, Driver]]:
        """Return `(distance, driver)` pairs nearest-first."""

        entries = sorted(self._heap, key=lambda e: (-e[0], -e[1]))
        return [(-neg_dist, driver) for neg_dist, _, driver in entries]

    def drivers(self) -> list[Driver]:
        return [driver for _, driver in self.ordered()]


__all__ = ["CandidateSet"]
