from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_simulator
from app.schemas.simulation import SimulationStepResponse
from app.services.simulation import DriverSimulator

router = APIRouter(prefix="/simulation", tags=["simulation"])


@router.post(
    "/step",
    response_model=SimulationStepResponse,
    summary="移動シミュレーションを進める",
    description="配車可能なドライバーをランダムウォークで移動させ、KD木を更新します。",
)
async def simulation_step(
    steps: int = Query(1, ge=1, le=100, description="進めるティック数"),
    simulator: DriverSimulator = Depends(get_simulator),
):
    moved = 0
    for _ in range(steps):
        moved = await simulator.step()
    return SimulationStepResponse(steps=steps, moved=moved)
