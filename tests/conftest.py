# tests/conftest.py
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.infra.unit_of_work import DriverStore
from app.main import create_app
from app.repositories.memory import InMemoryDriverRepository


@pytest.fixture
def settings() -> Settings:
    # 環境変数や .env の影響を受けないよう明示的に固定
    return Settings(
        app_env="test",
        log_format="json",
        log_level="WARNING",
        seed_sample_drivers=True,
        simulation_enabled=False,
        simulation_seed=1234,
        default_k=5,
        max_k=50,
        rerank_overfetch=3,
        rebuild_height_factor=4.0,
        sentry_dsn=None,
    )


@pytest_asyncio.fixture
async def app_client(settings: Settings):
    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def store() -> DriverStore:
    return DriverStore(InMemoryDriverRepository())
