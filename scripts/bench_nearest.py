"""Compare KD-tree k-NN against the linear scan on random drivers around a point.

Usage: python scripts/bench_nearest.py --drivers 20000 --queries 500 --k 5
"""

from __future__ import annotations

import argparse
import random
import time

from app.index.kdtree import KDTree
from app.models.driver import Driver
from app.services.linear_scan import find_nearest_linear


def _random_drivers(rng: random.Random, n: int, center: tuple[float, float], spread: float):
    return [
        Driver(
            id=i,
            lat=center[0] + rng.uniform(-spread, spread),
            lng=center[1] + rng.uniform(-spread, spread),
            name=f"Driver {i}",
            available=rng.random() > 0.2,
        )
        for i in range(1, n + 1)
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--drivers", type=int, default=20000)
    parser.add_argument("--queries", type=int, default=500)
    parser.add_argument("--k", type=int, default=5)
    parser.add_argument("--spread", type=float, default=0.2, help="degrees around the center")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    center = (40.7128, -74.0060)
    drivers = _random_drivers(rng, args.drivers, center, args.spread)

    t0 = time.perf_counter()
    tree = KDTree(drivers)
    build_ms = (time.perf_counter() - t0) * 1000.0

    queries = [
        (
            center[0] + rng.uniform(-args.spread, args.spread),
            center[1] + rng.uniform(-args.spread, args.spread),
        )
        for _ in range(args.queries)
    ]

    t0 = time.perf_counter()
    kd_results = [tree.nearest(lat, lng, args.k) for lat, lng in queries]
    kd_ms = (time.perf_counter() - t0) * 1000.0

    t0 = time.perf_counter()
    linear_results = [
        find_nearest_linear(drivers, lat, lng, args.k, metric="planar") for lat, lng in queries
    ]
    linear_ms = (time.perf_counter() - t0) * 1000.0

    mismatches = sum(
        1
        for kd, lin in zip(kd_results, linear_results)
        if {d.id for d in kd} != {d.id for _, d in lin}
    )

    print(f"drivers={args.drivers} height={tree.height()} build={build_ms:.1f}ms")
    print(f"kdtree: {kd_ms / args.queries:.3f}ms/query")
    print(f"linear: {linear_ms / args.queries:.3f}ms/query")
    print(f"mismatches={mismatches}")
    return 0 if mismatches == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
