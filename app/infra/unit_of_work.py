"""Unit of Work abstraction used by the service layer."""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from app.repositories.interfaces import DriverRepository


class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Defines the repository boundary exposed to services."""

    drivers: DriverRepository


class InMemoryUnitOfWork(UnitOfWork):
    """Serializes access to the shared in-memory driver store.

    The KD-tree has no internal locking, so every query and mutation runs while
    holding the store lock for the whole `async with` block.
    """

    def __init__(self, repository: DriverRepository, lock: asyncio.Lock) -> None:
        self._repository = repository
        self._lock = lock
        self._entered = False
        self.drivers: DriverRepository

    async def __aenter__(self) -> InMemoryUnitOfWork:
        await self._lock.acquire()
        self._entered = True
        self.drivers = self._repository
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self._entered:
            return
        self._entered = False
        self._lock.release()


class DriverStore:
    """Process-wide driver repository plus the lock that guards it."""

    def __init__(self, repository: DriverRepository) -> None:
        self.repository = repository
        self.lock = asyncio.Lock()

    def unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.repository, self.lock)
