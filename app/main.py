import asyncio
import contextlib
import random
from collections.abc import AsyncIterator

import sentry_sdk
import structlog
from fastapi import FastAPI
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.cors import CORSMiddleware

from app.api import errors
from app.api.routers.drivers import router as drivers_router
from app.api.routers.healthz import router as healthz_router
from app.api.routers.simulation import router as simulation_router
from app.core.config import Settings
from app.core.startup import build_driver_store
from app.logging import setup_logging
from app.middleware.request_id import request_id_middleware
from app.services.simulation import DriverSimulator


@contextlib.asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    task: asyncio.Task | None = None
    if settings.simulation_enabled:
        task = asyncio.create_task(app.state.simulator.run(settings.simulation_interval_ms / 1000))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()

    # Initialize structured logging first
    setup_logging(settings)

    # Initialize Sentry (no-op if DSN is missing)
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.app_env,
            release=settings.release,
            integrations=[StarletteIntegration()],
            traces_sample_rate=settings.sentry_traces_rate,
            send_default_pii=False,
        )

    app = FastAPI(
        title="Driver Locator API",
        version="0.1.0",
        description=(
            "配車可能ドライバーの近傍検索API。\n"
            "- インデックスはメモリ上の緯度経度 KD木（平衡化なし）\n"
            "- 並び順は緯度経度の平面二乗距離。大円距離が必要なら rerank=true\n"
        ),
        openapi_tags=[
            {"name": "drivers", "description": "ドライバー登録・更新・近傍検索"},
            {"name": "simulation", "description": "移動シミュレーション"},
            {"name": "health", "description": "疎通・監視用"},
        ],
        lifespan=_lifespan,
    )

    store = build_driver_store(settings)
    app.state.settings = settings
    app.state.driver_store = store
    app.state.simulator = DriverSimulator(
        store.unit_of_work,
        max_speed=settings.simulation_max_speed,
        direction_change_probability=settings.simulation_direction_change_probability,
        rng=random.Random(settings.simulation_seed),
    )

    # Request-ID middleware (JSON access log)
    app.middleware("http")(request_id_middleware)

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )

    errors.install(app)
    app.include_router(drivers_router)
    app.include_router(simulation_router)
    app.include_router(healthz_router)

    structlog.get_logger(__name__).info(
        "app_startup",
        env=settings.app_env,
        seeded=settings.seed_sample_drivers,
        simulation=settings.simulation_enabled,
    )
    return app


app = create_app()
