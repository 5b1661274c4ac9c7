# app/core/config.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "dev"
    log_level: str = "INFO"
    log_format: str | None = None  # json / console（未指定なら APP_ENV で決める）

    # nearest query
    default_k: int = Field(default=5, ge=0)
    max_k: int = Field(default=100, ge=1)
    rerank_overfetch: int = Field(default=3, ge=1)

    # 木の高さが factor * log2(n + 1) を超えたら中央値分割で再構築（0 で無効）
    rebuild_height_factor: float = Field(default=4.0, ge=0.0)

    seed_sample_drivers: bool = False

    simulation_enabled: bool = False
    simulation_interval_ms: int = Field(default=500, ge=10)
    simulation_max_speed: float = Field(default=0.0005, gt=0.0)
    simulation_direction_change_probability: float = Field(default=0.2, ge=0.0, le=1.0)
    simulation_seed: int | None = None

    allow_origins: str = ""  # CSV
    sentry_dsn: str | None = None
    sentry_traces_rate: float = 0.0
    release: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",  # そのまま DEFAULT_K などを読む
        extra="ignore",
    )

    @field_validator("sentry_traces_rate")
    @classmethod
    def _clamp_traces_rate(cls, value: float) -> float:
        return max(0.0, min(0.2, value))

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.allow_origins.split(",") if o.strip()]

