"""In-memory driver repository backed by the KD-tree."""

from __future__ import annotations

import math

import structlog

from app.index.kdtree import KDTree
from app.models.driver import Driver
from app.repositories.interfaces import IndexStats

logger = structlog.get_logger(__name__)


class InMemoryDriverRepository:
    """Holds every driver in one `KDTree`.

    When `rebuild_height_factor` is positive, an insert that lands deeper than
    ``factor * log2(n + 1)`` triggers a median-split rebuild. When a rebuild
    cannot bring the height under that limit (co-located drivers), the next one waits
    until the tree is twice as tall.
    """

    def __init__(self, tree: KDTree | None = None, *, rebuild_height_factor: float = 0.0) -> None:
        self._tree = tree if tree is not None else KDTree()
        self._rebuild_height_factor = float(rebuild_height_factor)
        self._stalled_height = 0

    @property
    def tree(self) -> KDTree:
        return self._tree

    def add(self, driver: Driver) -> bool:
        if not self._tree.insert(driver):
            return False
        self._rebalance_if_deep(driver.id)
        return True

    def get(self, driver_id: int) -> Driver | None:
        return self._tree.get(driver_id)

    def list(self, *, available: bool | None = None) -> list[Driver]:
        drivers = sorted(self._tree, key=lambda d: d.id)
        if available is None:
            return drivers
        return [d for d in drivers if d.available is available]

    def next_id(self) -> int:
        return max((d.id for d in self._tree), default=0) + 1

    def replace(self, driver: Driver) -> bool:
        if driver.id not in self._tree:
            return False
        self._tree.update(driver)
        self._rebalance_if_deep(driver.id)
        return True

    def set_available(self, driver_id: int, available: bool) -> bool:
        return self._tree.set_available(driver_id, available)

    def delete(self, driver_id: int) -> bool:
        return self._tree.remove(driver_id)

    def clear(self) -> int:
        self._stalled_height = 0
        return self._tree.clear()

    def nearest(self, lat: float, lng: float, k: int) -> list[tuple[float, Driver]]:
        return self._tree.nearest_with_distance(lat, lng, k)

    def stats(self) -> IndexStats:
        drivers = list(self._tree)
        return IndexStats(
            size=len(drivers),
            available=sum(1 for d in drivers if d.available),
            height=self._tree.height(),
            partitioned=self._tree.is_partitioned(),
        )

    def _rebalance_if_deep(self, driver_id: int) -> None:
        if self._rebuild_height_factor <= 0:
            return
        depth = self._tree.depth_of(driver_id)
        if depth is None:
            return
        size = len(self._tree)
        limit = self._rebuild_height_factor * math.log2(size + 1)
        if depth + 1 <= limit or depth + 1 <= 2 * self._stalled_height:
            return
        self._tree.rebuild()
        height = self._tree.height()
        # equal coordinates cannot be split; wait for the chain to double before retrying
        self._stalled_height = height if height > limit else 0
        logger.info("index_rebuilt", size=size, depth_before=depth + 1, height_after=height)
