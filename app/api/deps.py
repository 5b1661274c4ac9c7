"""API dependency helpers and service providers."""

from fastapi import Depends, Request

from app.core.config import Settings
from app.infra.unit_of_work import DriverStore
from app.services.driver_nearby import DriverNearbyService
from app.services.drivers import DriverService
from app.services.simulation import DriverSimulator

__all__ = [
    "get_settings",
    "get_driver_store",
    "get_driver_service",
    "get_driver_nearby_service",
    "get_simulator",
]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_driver_store(request: Request) -> DriverStore:
    return request.app.state.driver_store


# --- Service providers for DI ---


def get_driver_service(store: DriverStore = Depends(get_driver_store)) -> DriverService:
    return DriverService(store.unit_of_work)


def get_driver_nearby_service(
    store: DriverStore = Depends(get_driver_store),
    settings: Settings = Depends(get_settings),
) -> DriverNearbyService:
    """Provides the nearest-driver query service bound to the app's store."""

    return DriverNearbyService(
        store.unit_of_work,
        max_k=settings.max_k,
        overfetch=settings.rerank_overfetch,
    )


def get_simulator(request: Request) -> DriverSimulator:
    return request.app.state.simulator
