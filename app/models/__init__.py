# app/models/__init__.py
from .driver import Driver

__all__ = ["Driver"]
