"""Random-walk movement of available drivers.

Each driver keeps a heading and a speed between 20% and 100% of `max_speed`
(degrees per tick). On every tick the heading (and speed) is re-drawn with
probability `direction_change_probability`. Unavailable drivers stay put.
"""

from __future__ import annotations

import asyncio
import math
import random
from dataclasses import dataclass

import structlog

from app.services.drivers import UnitOfWorkFactory

logger = structlog.get_logger(__name__)


@dataclass
class Movement:
    direction_lat: float
    direction_lng: float
    speed: float


def _wrap_lng(lng: float) -> float:
    return ((lng + 180.0) % 360.0) - 180.0


def _clamp_lat(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


class DriverSimulator:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        max_speed: float = 0.0005,
        direction_change_probability: float = 0.2,
        rng: random.Random | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._max_speed = float(max_speed)
        self._change_probability = float(direction_change_probability)
        self._rng = rng or random.Random()
        self._movements: dict[int, Movement] = {}

    def movement_of(self, driver_id: int) -> Movement | None:
        return self._movements.get(driver_id)

    def _draw_movement(self) -> Movement:
        angle = self._rng.random() * 2 * math.pi
        return Movement(
            direction_lat=math.sin(angle),
            direction_lng=math.cos(angle),
            speed=self._max_speed * (0.2 + self._rng.random() * 0.8),
        )

    async def step(self) -> int:
        """Advance one tick. Returns how many drivers moved."""

        moved = 0
        async with self._uow_factory() as uow:
            drivers = uow.drivers.list(available=True)
            for driver in drivers:
                movement = self._movements.get(driver.id)
                if movement is None:
                    movement = self._draw_movement()
                elif self._rng.random() < self._change_probability:
                    movement = self._draw_movement()
                self._movements[driver.id] = movement

                lat = _clamp_lat(driver.lat + movement.direction_lat * movement.speed)
                lng = _wrap_lng(driver.lng + movement.direction_lng * movement.speed)
                if uow.drivers.replace(driver.moved_to(lat, lng)):
                    moved += 1

            known = {d.id for d in uow.drivers.list()}
        for driver_id in [i for i in self._movements if i not in known]:
            del self._movements[driver_id]

        logger.debug("simulation_step", moved=moved)
        return moved

    async def run(self, interval_seconds: float) -> None:
        """Tick forever until cancelled."""

        logger.info("simulation_started", interval_seconds=interval_seconds)
        try:
            while True:
                await self.step()
                await asyncio.sleep(interval_seconds)
        finally:
            logger.info("simulation_stopped")
