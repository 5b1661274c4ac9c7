"""Infrastructure helpers such as Unit of Work implementations."""

from .unit_of_work import DriverStore, InMemoryUnitOfWork, UnitOfWork

__all__ = ["DriverStore", "InMemoryUnitOfWork", "UnitOfWork"]
