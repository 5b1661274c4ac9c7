# app/schemas/driver.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "DriverAvailabilityUpdate",
    "DriverCreate",
    "DriverNearbyItem",
    "DriverNearbyResponse",
    "DriverOut",
    "DriverStatsResponse",
    "DriverUpdate",
    "NearestStrategy",
]

NearestStrategy = Literal["kdtree", "linear"]


class DriverOut(BaseModel):
    id: int = Field(description="ドライバーID")
    lat: float = Field(description="緯度")
    lng: float = Field(description="経度")
    name: str = Field(description="表示名")
    available: bool = Field(description="配車可能か")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [{"id": 1, "lat": 40.7128, "lng": -74.006, "name": "John", "available": True}]
        },
    )


class DriverCreate(BaseModel):
    id: int | None = Field(default=None, ge=1, description="省略時は最大ID+1を採番")
    lat: float = Field(ge=-90.0, le=90.0, description="緯度（-90〜90）")
    lng: float = Field(ge=-180.0, le=180.0, description="経度（-180〜180）")
    name: str | None = Field(default=None, max_length=120, description="省略時は 'Driver {id}'")
    available: bool = Field(default=True, description="配車可能か")


class DriverUpdate(BaseModel):
    """部分更新。指定した項目だけを現在の状態にマージして木へ入れ直す。"""

    lat: float | None = Field(default=None, ge=-90.0, le=90.0, description="緯度")
    lng: float | None = Field(default=None, ge=-180.0, le=180.0, description="経度")
    name: str | None = Field(default=None, max_length=120, description="表示名")
    available: bool | None = Field(default=None, description="配車可能か")

    @model_validator(mode="after")
    def _require_any(self) -> DriverUpdate:
        if all(v is None for v in (self.lat, self.lng, self.name, self.available)):
            raise ValueError("at least one field is required")
        return self


class DriverAvailabilityUpdate(BaseModel):
    available: bool = Field(description="配車可能か")


class DriverNearbyItem(DriverOut):
    distance_km: float = Field(description="指定座標からの大円距離（km）")


class DriverNearbyResponse(BaseModel):
    items: list[DriverNearbyItem] = Field(description="近い順のドライバー")
    lat: float = Field(description="検索基準点の緯度")
    lng: float = Field(description="検索基準点の経度")
    k: int = Field(description="要求件数（max_k で丸めた値）")
    strategy: NearestStrategy = Field(description="kdtree / linear")
    reranked: bool = Field(default=False, description="大円距離で並べ替えたか")


class DriverStatsResponse(BaseModel):
    size: int = Field(description="登録ドライバー数")
    available: int = Field(description="配車可能なドライバー数")
    height: int = Field(description="KD木の高さ")
    partitioned: bool = Field(description="分割不変条件を満たしているか")
