from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_driver_nearby_service, get_driver_service, get_settings
from app.core.config import Settings
from app.core.startup import DEFAULT_USER_LOCATION
from app.schemas.common import ErrorResponse, RemovedResponse
from app.schemas.driver import (
    DriverAvailabilityUpdate,
    DriverCreate,
    DriverNearbyResponse,
    DriverOut,
    DriverStatsResponse,
    DriverUpdate,
    NearestStrategy,
)
from app.services.driver_nearby import DriverNearbyService
from app.services.drivers import DriverService

router = APIRouter(prefix="/drivers", tags=["drivers"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "driver not found"}}


@router.get(
    "",
    response_model=list[DriverOut],
    summary="ドライバー一覧",
    description="ID昇順。`available` を指定すると配車可否で絞り込みます。",
)
async def list_drivers(
    available: bool | None = Query(None, description="true / false で絞り込み"),
    svc: DriverService = Depends(get_driver_service),
):
    return await svc.list(available=available)


@router.post(
    "",
    response_model=DriverOut,
    status_code=status.HTTP_201_CREATED,
    summary="ドライバー登録",
    responses={409: {"model": ErrorResponse, "description": "duplicate driver id"}},
)
async def register_driver(body: DriverCreate, svc: DriverService = Depends(get_driver_service)):
    return await svc.register(
        lat=body.lat,
        lng=body.lng,
        name=body.name,
        available=body.available,
        driver_id=body.id,
    )


@router.delete("", response_model=RemovedResponse, summary="全ドライバー削除")
async def clear_drivers(svc: DriverService = Depends(get_driver_service)):
    return RemovedResponse(removed=await svc.clear())


@router.get(
    "/nearest",
    response_model=DriverNearbyResponse,
    summary="近傍の配車可能ドライバー（KD木）",
    description=(
        "指定座標から近い順に最大 k 件の配車可能ドライバーを返します。\n"
        "- strategy=kdtree: KD木（緯度経度の平面二乗距離）\n"
        "- strategy=linear: 全件を大円距離で並べ替え\n"
        "- rerank=true: KD木の候補を多めに取り大円距離で並べ直す\n"
    ),
    responses={422: {"model": ErrorResponse, "description": "validation error"}},
)
async def nearest_drivers(
    lat: float = Query(DEFAULT_USER_LOCATION[0], ge=-90.0, le=90.0, description="緯度（-90〜90）"),
    lng: float = Query(
        DEFAULT_USER_LOCATION[1], ge=-180.0, le=180.0, description="経度（-180〜180）"
    ),
    k: int | None = Query(None, ge=0, description="件数（省略時は DEFAULT_K, 上限 MAX_K）"),
    strategy: NearestStrategy = Query("kdtree", description="kdtree / linear"),
    rerank: bool = Query(False, description="大円距離で並べ直すか（kdtree のみ）"),
    svc: DriverNearbyService = Depends(get_driver_nearby_service),
    settings: Settings = Depends(get_settings),
):
    return await svc.nearest(
        lat=lat,
        lng=lng,
        k=settings.default_k if k is None else k,
        strategy=strategy,
        rerank=rerank,
    )


@router.get("/stats", response_model=DriverStatsResponse, summary="KD木の統計")
async def driver_stats(svc: DriverService = Depends(get_driver_service)):
    stats = await svc.stats()
    return DriverStatsResponse(
        size=stats.size,
        available=stats.available,
        height=stats.height,
        partitioned=stats.partitioned,
    )


@router.get("/{driver_id}", response_model=DriverOut, summary="ドライバー取得", responses=_NOT_FOUND)
async def get_driver(driver_id: int, svc: DriverService = Depends(get_driver_service)):
    return await svc.get(driver_id)


@router.put(
    "/{driver_id}",
    response_model=DriverOut,
    summary="ドライバー更新（削除して再挿入）",
    responses=_NOT_FOUND,
)
async def update_driver(
    driver_id: int, body: DriverUpdate, svc: DriverService = Depends(get_driver_service)
):
    return await svc.update(
        driver_id,
        lat=body.lat,
        lng=body.lng,
        name=body.name,
        available=body.available,
    )


@router.patch(
    "/{driver_id}/availability",
    response_model=DriverOut,
    summary="配車可否の切り替え（木構造は変えない）",
    responses=_NOT_FOUND,
)
async def set_driver_availability(
    driver_id: int,
    body: DriverAvailabilityUpdate,
    svc: DriverService = Depends(get_driver_service),
):
    return await svc.set_availability(driver_id, body.available)


@router.post(
    "/{driver_id}/cancel",
    response_model=DriverOut,
    summary="ドライバーをキャンセル（配車不可にする）",
    responses=_NOT_FOUND,
)
async def cancel_driver(driver_id: int, svc: DriverService = Depends(get_driver_service)):
    return await svc.cancel(driver_id)


@router.delete(
    "/{driver_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="ドライバー削除",
    responses=_NOT_FOUND,
)
async def delete_driver(driver_id: int, svc: DriverService = Depends(get_driver_service)):
    await svc.remove(driver_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
