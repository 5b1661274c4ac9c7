from __future__ import annotations

from dataclasses import dataclass, replace

from app.utils.geo import LatLng


@dataclass
class Driver:
    """A trackable driver position.

    `id` is the only key used to find a driver again. `available` may be toggled
    in place; position changes go through the index so the tree stays consistent.
    """

    id: int
    lat: float
    lng: float
    name: str = ""
    available: bool = True

    @property
    def position(self) -> LatLng:
        return (self.lat, self.lng)

    def axis_value(self, depth: int) -> float:
        # even depth splits on latitude, odd depth on longitude
        return self.lat if depth % 2 == 0 else self.lng

    def moved_to(self, lat: float, lng: float) -> Driver:
        return replace(self, lat=float(lat), lng=float(lng))
