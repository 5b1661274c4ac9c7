"""Randomized checks of the KD-tree against the linear scan."""

from __future__ import annotations

import random

import pytest

from app.index.kdtree import KDTree
from app.models.driver import Driver
from app.services.linear_scan import find_nearest_linear


def _random_driver(rng: random.Random, driver_id: int) -> Driver:
    return Driver(
        id=driver_id,
        lat=rng.uniform(35.0, 36.0),
        lng=rng.uniform(139.0, 140.0),
        name=f"Driver {driver_id}",
        available=rng.random() > 0.25,
    )


def _expected_ids(drivers, lat, lng, k) -> list[int]:
    return [d.id for _, d in find_nearest_linear(drivers, lat, lng, k, metric="planar")]


@pytest.mark.parametrize("size", [1, 2, 7, 64, 300])
@pytest.mark.parametrize("seed", [0, 1, 2])
@pytest.mark.parametrize("order", ["random", "sorted"])
def test_nearest_matches_linear_scan(size, seed, order):
    rng = random.Random(seed * 1000 + size)
    drivers = [_random_driver(rng, i) for i in range(1, size + 1)]
    if order == "sorted":
        drivers.sort(key=lambda d: (d.lat, d.lng))
    tree = KDTree(drivers)

    assert tree.is_partitioned()
    for _ in range(20):
        lat, lng = rng.uniform(34.8, 36.2), rng.uniform(138.8, 140.2)
        k = rng.randint(0, size + 2)
        got = tree.nearest_with_distance(lat, lng, k)

        assert [d.id for _, d in got] == _expected_ids(drivers, lat, lng, k)
        distances = [dist for dist, _ in got]
        assert distances == sorted(distances)
        assert all(d.available for _, d in got)


@pytest.mark.parametrize("seed", [3, 4, 5, 6])
def test_random_mutations_keep_invariants(seed):
    rng = random.Random(seed)
    tree = KDTree()
    live: dict[int, Driver] = {}
    next_id = 1

    for _ in range(600):
        op = rng.random()
        if op < 0.45 or not live:
            driver = _random_driver(rng, next_id)
            next_id += 1
            assert tree.insert(driver) is True
            live[driver.id] = driver
        elif op < 0.65:
            victim = rng.choice(sorted(live))
            assert tree.remove(victim) is True
            del live[victim]
            assert victim not in {d.id for d in tree.nearest(35.5, 139.5, len(live) + 1)}
        elif op < 0.85:
            target = rng.choice(sorted(live))
            moved = _random_driver(rng, target)
            assert tree.update(moved) is True
            live[target] = moved
        else:
            target = rng.choice(sorted(live))
            flag = rng.random() > 0.5
            assert tree.set_available(target, flag) is True
            live[target].available = flag

    assert tree.partition_violations() == []
    assert len(tree) == len(live) == len(list(tree.iter_nodes()))
    assert {d.id: (d.lat, d.lng, d.available) for d in tree} == {
        d.id: (d.lat, d.lng, d.available) for d in live.values()
    }
    for _ in range(25):
        lat, lng = rng.uniform(35.0, 36.0), rng.uniform(139.0, 140.0)
        k = rng.randint(1, 12)
        got = [d.id for d in tree.nearest(lat, lng, k)]
        assert got == _expected_ids(list(live.values()), lat, lng, k)


def test_removed_ids_never_come_back():
    rng = random.Random(11)
    drivers = [_random_driver(rng, i) for i in range(1, 201)]
    for d in drivers:
        d.available = True
    tree = KDTree(drivers)

    removed = set(rng.sample(range(1, 201), 80))
    for driver_id in sorted(removed):
        tree.remove(driver_id)

    returned = {d.id for d in tree.nearest(35.5, 139.5, 500)}
    assert returned.isdisjoint(removed)
    assert len(returned) == 120
    assert tree.is_partitioned()
