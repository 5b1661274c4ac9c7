"""Router modules exposed for convenient imports."""

from . import drivers, healthz, simulation

__all__ = ["drivers", "healthz", "simulation"]
