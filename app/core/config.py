from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(
        default="postgresql+asyncpg://cx:cx@localhost:5432/cx_regen",
        alias="DATABASE_URL",
    )

    regen_tick_seconds: int = Field(default=900, alias="REGEN_TICK_SECONDS")
    regen_yield_per_tick: int = Field(default=5, alias="REGEN_YIELD_PER_TICK")
    regen_max_commit_attempts: int = Field(default=3, alias="REGEN_MAX_COMMIT_ATTEMPTS")
    regen_max_catch_up_ticks: int | None = Field(default=None, alias="REGEN_MAX_CATCH_UP_TICKS")

    regen_api_base_url: str = Field(default="http://127.0.0.1:8000", alias="REGEN_API_BASE_URL")
    regen_poll_interval_seconds: float | None = Field(
        default=None,
        alias="REGEN_POLL_INTERVAL_SECONDS",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
