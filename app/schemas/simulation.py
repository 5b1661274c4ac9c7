from __future__ import annotations

from pydantic import BaseModel, Field


class SimulationStepResponse(BaseModel):
    steps: int = Field(description="進めたティック数")
    moved: int = Field(description="最後のティックで移動したドライバー数")
