from .common import ErrorResponse, OkResponse, RemovedResponse
from .driver import (
    DriverAvailabilityUpdate,
    DriverCreate,
    DriverNearbyItem,
    DriverNearbyResponse,
    DriverOut,
    DriverStatsResponse,
    DriverUpdate,
)
from .simulation import SimulationStepResponse

__all__ = [
    "ErrorResponse",
    "OkResponse",
    "RemovedResponse",
    "DriverAvailabilityUpdate",
    "DriverCreate",
    "DriverNearbyItem",
    "DriverNearbyResponse",
    "DriverOut",
    "DriverStatsResponse",
    "DriverUpdate",
    "SimulationStepResponse",
]
