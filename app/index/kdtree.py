"""Two-dimensional KD-tree over driver positions.

Nodes split on latitude at even depth and on longitude at odd depth. For a node
at depth ``d`` holding split value ``v``::

    left  subtree: axis(e, d) <  v
    right subtree: axis(e, d) >= v

The tree is not self-balancing; its shape follows insertion order, so a monotonic
insertion sequence degenerates into a list. ``rebuild()`` restores a median-split
shape on demand.

Nearest-neighbour ordering uses planar squared distance on raw degrees
(``Δlat² + Δlng²``). Callers that need great-circle ordering re-rank a candidate
superset themselves.

Every walk uses an explicit stack, so a degenerate chain of any length is
searched, edited and rebuilt without hitting the interpreter's recursion limit.

The tree performs no locking. Callers serialize mutations against each other and
against queries.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

from app.index.candidates import CandidateSet
from app.models.driver import Driver
from app.utils.geo import LatLng, squared_planar_distance


@dataclass(eq=False)
class KDNode:
    driver: Driver
    depth: int
    left: KDNode | None = None
    right: KDNode | None = None

    @property
    def axis(self) -> int:
        return self.depth % 2

    @property
    def split_value(self) -> float:
        return self.driver.axis_value(self.depth)


class KDTree:
    """Mutable KD-tree of drivers keyed by driver id.

    Ids are unique: ``insert`` refuses a second driver with an id that is already
    indexed and returns False. ``remove`` and ``update`` return False when the id is
    unknown. No operation raises for those cases.
    """

    def __init__(self, drivers: Iterable[Driver] = ()) -> None:
        self._root: KDNode | None = None
        # id -> the driver object owned by its node; used to find the descent path
        self._drivers: dict[int, Driver] = {}
        for driver in drivers:
            self.insert(driver)

    def __len__(self) -> int:
        return len(self._drivers)

    def __contains__(self, driver_id: object) -> bool:
        return driver_id in self._drivers

    def __iter__(self) -> Iterator[Driver]:
        for driver in self._drivers.values():
            yield replace(driver)

    @property
    def root(self) -> KDNode | None:
        return self._root

    def get(self, driver_id: int) -> Driver | None:
        driver = self._drivers.get(driver_id)
        return replace(driver) if driver is not None else None

    # --- mutation -----------------------------------------------------------

    def insert(self, driver: Driver) -> bool:
        """Add one node for `driver`. Returns False (and does nothing) on a duplicate id."""

        if driver.id in self._drivers:
            return False
        owned = replace(driver)
        if self._root is None:
            self._root = KDNode(owned, 0)
        else:
            node = self._root
            while True:
                if owned.axis_value(node.depth) < node.split_value:
                    if node.left is None:
                        node.left = KDNode(owned, node.depth + 1)
                        break
                    node = node.left
                else:
                    if node.right is None:
                        node.right = KDNode(owned, node.depth + 1)
                        break
                    node = node.right
        self._drivers[owned.id] = owned
        return True

    def remove(self, driver_id: int) -> bool:
        """Delete the node holding `driver_id`. Returns False when the id is not indexed."""

        target = self._drivers.get(driver_id)
        if target is None:
            return False
        self._delete(target)
        del self._drivers[driver_id]
        return True

    def update(self, driver: Driver) -> bool:
        """Replace the stored state for `driver.id` by removing and reinserting it.

        The node is rebuilt from the current tree shape, so its depth may change.
        Returns True when a previous node for the id existed.
        """

        existed = self.remove(driver.id)
        self.insert(driver)
        return existed

    def set_available(self, driver_id: int, available: bool) -> bool:
        """Toggle availability in place. The tree structure is untouched."""

        driver = self._drivers.get(driver_id)
        if driver is None:
            return False
        driver.available = bool(available)
        return True

    def clear(self) -> int:
        removed = len(self._drivers)
        self._root = None
        self._drivers.clear()
        return removed

    def rebuild(self) -> None:
        """Rebuild a median-split tree from the current drivers."""

        drivers = list(self._drivers.values())
        self._root = self._build(drivers)

    # --- queries ------------------------------------------------------------

    def nearest(self, lat: float, lng: float, k: int) -> list[Driver]:
        """Up to `k` available drivers nearest-first by planar squared distance."""

        candidates = self._collect(lat, lng, k)
        if candidates is None:
            return []
        return [replace(driver) for driver in candidates.drivers()]

    def nearest_with_distance(self, lat: float, lng: float, k: int) -> list[tuple[float, Driver]]:
        candidates = self._collect(lat, lng, k)
        if candidates is None:
            return []
        return [(dist, replace(driver)) for dist, driver in candidates.ordered()]

    def depth_of(self, driver_id: int) -> int | None:
        """Depth of the node holding `driver_id`, following the insert descent path."""

        target = self._drivers.get(driver_id)
        node = self._root
        while target is not None and node is not None:
            if node.driver.id == driver_id:
                return node.depth
            if target.axis_value(node.depth) < node.split_value:
                node = node.left
            else:
                node = node.right
        return None

    def height(self) -> int:
        """Number of levels in the tree (0 when empty)."""

        if self._root is None:
            return 0
        deepest = 0
        for node in self.iter_nodes():
            deepest = max(deepest, node.depth + 1)
        return deepest

    def iter_nodes(self) -> Iterator[KDNode]:
        """Pre-order walk over the nodes."""

        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def partition_violations(self) -> list[tuple[int, int]]:
        """Return `(node_id, descendant_id)` pairs that break the split invariant."""

        violations: list[tuple[int, int]] = []
        for node in self.iter_nodes():
            split = node.split_value
            for side, child in (("left", node.left), ("right", node.right)):
                stack = [child] if child is not None else []
                while stack:
                    current = stack.pop()
                    value = current.driver.axis_value(node.depth)
                    if (side == "left" and not value < split) or (
                        side == "right" and not value >= split
                    ):
                        violations.append((node.driver.id, current.driver.id))
                    stack.extend(c for c in (current.left, current.right) if c is not None)
        return violations

    def is_partitioned(self) -> bool:
        return not self.partition_violations()

    # --- internals ----------------------------------------------------------

    def _collect(self, lat: float, lng: float, k: int) -> CandidateSet | None:
        if k <= 0 or self._root is None:
            return None
        candidates = CandidateSet(k)
        self._search((float(lat), float(lng)), candidates)
        return candidates

    def _search(self, query: LatLng, candidates: CandidateSet) -> None:
        # (node, squared gap to the parent's splitting line); None for a near child
        stack: list[tuple[KDNode, float | None]] = [(self._root, None)]
        while stack:
            node, gap2 = stack.pop()
            if gap2 is not None and candidates.is_full() and gap2 >= candidates.worst_distance():
                continue
            if node.driver.available:
                candidates.offer(squared_planar_distance(query, node.driver.position), node.driver)

            query_value = query[node.axis]
            split = node.split_value
            if query_value < split:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left

            # far is pushed first so it is popped after the whole near subtree
            if far is not None:
                gap = query_value - split
                stack.append((far, gap * gap))
            if near is not None:
                stack.append((near, None))

    def _delete(self, target: Driver) -> None:
        parent: KDNode | None = None
        node = self._root
        while node is not None and node.driver.id != target.id:
            parent = node
            node = node.left if target.axis_value(node.depth) < node.split_value else node.right

        while node is not None:
            if node.right is None and node.left is None:
                if parent is None:
                    self._root = None
                elif parent.left is node:
                    parent.left = None
                else:
                    parent.right = None
                return
            if node.right is None:
                # the left subtree moves to the right slot, so its minimum takes this node
                node.right, node.left = node.left, None
            successor = self._find_min(node.right, node.depth)
            node.driver = successor

            parent, node = node, node.right
            while node is not None and node.driver.id != successor.id:
                parent = node
                if successor.axis_value(node.depth) < node.split_value:
                    node = node.left
                else:
                    node = node.right

    def _find_min(self, subtree: KDNode, depth: int) -> Driver:
        """Driver with the smallest value on the split axis of `depth` within `subtree`."""

        best = subtree.driver
        stack = [subtree]
        while stack:
            node = stack.pop()
            if node.driver.axis_value(depth) < best.axis_value(depth):
                best = node.driver
            if node.left is not None:
                stack.append(node.left)
            # everything on the right is >= this node on the same axis
            if node.right is not None and node.axis != depth % 2:
                stack.append(node.right)
        return best

    def _build(self, drivers: list[Driver]) -> KDNode | None:
        root: KDNode | None = None
        work: list[tuple[list[Driver], int, KDNode | None, str]] = [(drivers, 0, None, "")]
        while work:
            items, depth, parent, side = work.pop()
            if not items:
                continue
            items.sort(key=lambda d: d.axis_value(depth))
            median = len(items) // 2
            # equal split values must end up on the right
            while median > 0 and items[median - 1].axis_value(depth) == items[median].axis_value(
                depth
            ):
                median -= 1
            node = KDNode(items[median], depth)
            if parent is None:
                root = node
            elif side == "left":
                parent.left = node
            else:
                parent.right = node
            work.append((items[median + 1 :], depth + 1, node, "right"))
            work.append((items[:median], depth + 1, node, "left"))
        return root


__all__ = ["KDNode", "KDTree"]
