"""Startup helpers: in-memory store construction and sample data seeding."""

from __future__ import annotations

from typing import Final

import structlog

from app.core.config import Settings
from app.infra.unit_of_work import DriverStore
from app.models.driver import Driver
from app.repositories.memory import InMemoryDriverRepository
from app.utils.geo import LatLng

# New York City
DEFAULT_USER_LOCATION: Final[LatLng] = (40.7128, -74.0060)


def sample_drivers() -> list[Driver]:
    return [
        Driver(id=1, lat=40.7128, lng=-74.0060, name="John", available=True),
        Driver(id=2, lat=40.7589, lng=-73.9851, name="Alice", available=True),
        Driver(id=3, lat=40.7829, lng=-73.9654, name="Bob", available=True),
    ]


def build_driver_store(settings: Settings) -> DriverStore:
    """Create the process-wide store, seeding the sample drivers when enabled."""

    repository = InMemoryDriverRepository(rebuild_height_factor=settings.rebuild_height_factor)
    if settings.seed_sample_drivers:
        seeded = sum(1 for driver in sample_drivers() if repository.add(driver))
        structlog.get_logger(__name__).info("drivers_seeded", count=seeded)
    return DriverStore(repository)
