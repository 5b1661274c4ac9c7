"""Repository abstractions for the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from app.models.driver import Driver


@dataclass
class IndexStats:
    size: int
    available: int
    height: int
    partitioned: bool


class DriverRepository(Protocol):
    """Storage boundary for drivers and their spatial index.

    Mutations report "nothing to do" through their boolean result instead of raising.
    """

    def add(self, driver: Driver) -> bool: ...

    def get(self, driver_id: int) -> Driver | None: ...

    def list(self, *, available: bool | None = None) -> list[Driver]: ...

    def next_id(self) -> int: ...

    def replace(self, driver: Driver) -> bool: ...

    def set_available(self, driver_id: int, available: bool) -> bool: ...

    def delete(self, driver_id: int) -> bool: ...

    def clear(self) -> int: ...

    def nearest(self, lat: float, lng: float, k: int) -> list[tuple[float, Driver]]: ...

    def stats(self) -> IndexStats: ...
