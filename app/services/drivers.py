"""Driver registry use cases backed by the driver repository."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

import structlog

from app.core.exceptions import ConflictError, NotFoundError
from app.infra.unit_of_work import UnitOfWork
from app.models.driver import Driver
from app.repositories.interfaces import IndexStats

UnitOfWorkFactory = Callable[[], UnitOfWork]

logger = structlog.get_logger(__name__)


def default_driver_name(driver_id: int) -> str:
    return f"Driver {driver_id}"


class DriverService:
    """Register, relocate, toggle and remove drivers."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def register(
        self,
        *,
        lat: float,
        lng: float,
        name: str | None = None,
        available: bool = True,
        driver_id: int | None = None,
    ) -> Driver:
        async with self._uow_factory() as uow:
            new_id = driver_id if driver_id is not None else uow.drivers.next_id()
            driver = Driver(
                id=new_id,
                lat=float(lat),
                lng=float(lng),
                name=name or default_driver_name(new_id),
                available=available,
            )
            if not uow.drivers.add(driver):
                raise ConflictError(f"driver {new_id} already exists")
        logger.info("driver_registered", driver_id=driver.id, lat=driver.lat, lng=driver.lng)
        return driver

    async def get(self, driver_id: int) -> Driver:
        async with self._uow_factory() as uow:
            driver = uow.drivers.get(driver_id)
        if driver is None:
            raise NotFoundError("driver not found")
        return driver

    async def list(self, available: bool | None = None) -> list[Driver]:
        async with self._uow_factory() as uow:
            return uow.drivers.list(available=available)

    async def update(
        self,
        driver_id: int,
        *,
        lat: float | None = None,
        lng: float | None = None,
        name: str | None = None,
        available: bool | None = None,
    ) -> Driver:
        """Merge the given fields into the stored state and reinsert the driver."""

        async with self._uow_factory() as uow:
            current = uow.drivers.get(driver_id)
            if current is None:
                raise NotFoundError("driver not found")
            updated = replace(
                current,
                lat=current.lat if lat is None else float(lat),
                lng=current.lng if lng is None else float(lng),
                name=current.name if name is None else name,
                available=current.available if available is None else available,
            )
            uow.drivers.replace(updated)
        logger.info(
            "driver_updated",
            driver_id=driver_id,
            lat=updated.lat,
            lng=updated.lng,
            available=updated.available,
        )
        return updated

    async def set_availability(self, driver_id: int, available: bool) -> Driver:
        async with self._uow_factory() as uow:
            if not uow.drivers.set_available(driver_id, available):
                raise NotFoundError("driver not found")
            driver = uow.drivers.get(driver_id)
        logger.info("driver_availability_changed", driver_id=driver_id, available=available)
        return driver

    async def cancel(self, driver_id: int) -> Driver:
        return await self.set_availability(driver_id, False)

    async def remove(self, driver_id: int) -> None:
        async with self._uow_factory() as uow:
            if not uow.drivers.delete(driver_id):
                raise NotFoundError("driver not found")
        logger.info("driver_removed", driver_id=driver_id)

    async def clear(self) -> int:
        async with self._uow_factory() as uow:
            removed = uow.drivers.clear()
        logger.info("drivers_cleared", removed=removed)
        return removed

    async def stats(self) -> IndexStats:
        async with self._uow_factory() as uow:
            return uow.drivers.stats()
