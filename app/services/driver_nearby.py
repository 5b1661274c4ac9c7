from __future__ import annotations

import structlog

from app.core.exceptions import ValidationError
from app.infra.unit_of_work import UnitOfWork
from app.models.driver import Driver
from app.schemas.driver import DriverNearbyItem, DriverNearbyResponse, NearestStrategy
from app.services.drivers import UnitOfWorkFactory
from app.services.linear_scan import find_nearest_linear
from app.utils.geo import haversine_distance_km


def _item(driver: Driver, distance_km: float) -> DriverNearbyItem:
    return DriverNearbyItem(
        id=driver.id,
        lat=driver.lat,
        lng=driver.lng,
        name=driver.name,
        available=driver.available,
        distance_km=round(float(distance_km), 6),
    )


def _kdtree_candidates(uow: UnitOfWork, lat: float, lng: float, k: int) -> list[Driver]:
    return [driver for _, driver in uow.drivers.nearest(lat, lng, k)]


class DriverNearbyService:
    """Nearest available drivers around a point.

    The KD-tree orders by planar squared distance on degrees. With `rerank=True` the
    service fetches `k * overfetch` candidates and re-orders them by great-circle
    distance before truncating to k.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, *, max_k: int, overfetch: int) -> None:
        self._uow_factory = uow_factory
        self._max_k = max(1, int(max_k))
        self._overfetch = max(1, int(overfetch))

    async def nearest(
        self,
        *,
        lat: float,
        lng: float,
        k: int,
        strategy: NearestStrategy = "kdtree",
        rerank: bool = False,
    ) -> DriverNearbyResponse:
        logger = structlog.get_logger(__name__)

        limit = max(0, min(int(k), self._max_k))
        origin = (float(lat), float(lng))

        async with self._uow_factory() as uow:
            if strategy == "kdtree":
                fetch = limit * self._overfetch if rerank else limit
                drivers = _kdtree_candidates(uow, origin[0], origin[1], fetch)
            elif strategy == "linear":
                pairs = find_nearest_linear(
                    uow.drivers.list(available=True), origin[0], origin[1], limit
                )
                drivers = [driver for _, driver in pairs]
            else:
                raise ValidationError(f"unknown strategy: {strategy}")

        scored = [(haversine_distance_km(origin, d.position), d) for d in drivers]
        reranked = strategy == "kdtree" and rerank
        if reranked:
            scored.sort(key=lambda pair: pair[0])
        items = [_item(d, dist) for dist, d in scored[:limit]]

        logger.info(
            "drivers_nearby",
            lat=origin[0],
            lng=origin[1],
            k=limit,
            strategy=strategy,
            reranked=reranked,
            returned=len(items),
        )
        return DriverNearbyResponse(
            items=items,
            lat=origin[0],
            lng=origin[1],
            k=limit,
            strategy=strategy,
            reranked=reranked,
        )
