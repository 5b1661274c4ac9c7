"""Brute-force nearest driver lookup: filter, sort everything, take the top k."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Literal

from app.models.driver import Driver
from app.utils.geo import LatLng, haversine_distance_km, squared_planar_distance

Metric = Literal["planar", "haversine"]

_METRICS: dict[str, Callable[[LatLng, LatLng], float]] = {
    "planar": squared_planar_distance,
    "haversine": haversine_distance_km,
}


def find_nearest_linear(
    drivers: Iterable[Driver],
    lat: float,
    lng: float,
    k: int,
    *,
    metric: Metric = "haversine",
) -> list[tuple[float, Driver]]:
    """Return up to `k` `(distance, driver)` pairs for available drivers, nearest first.

    Sorting is stable, so drivers at equal distance keep their input order.
    """

    if k <= 0:
        return []
    try:
        distance = _METRICS[metric]
    except KeyError as exc:
        raise ValueError(f"unknown metric: {metric}") from exc

    origin = (float(lat), float(lng))
    scored = [(distance(origin, d.position), d) for d in drivers if d.available]
    scored.sort(key=lambda pair: pair[0])
    return scored[:k]


__all__ = ["Metric", "find_nearest_linear"]
