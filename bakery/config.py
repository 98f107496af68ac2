"""
Configuration settings for the bakery system.

Uses Pydantic Settings to load environment variables (prefixed `BAKERY_`) for
logging, the snapshot location and the sizing of the in-memory indices.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="BAKERY_APP_ENV")
    log_level: str = Field("WARNING", alias="BAKERY_LOG_LEVEL")
    json_logs: bool = Field(False, alias="BAKERY_JSON_LOGS")

    # Persistence
    data_dir: Path = Field(Path("data"), alias="BAKERY_DATA_DIR")
    snapshot_file: str = Field("bakery.json", alias="BAKERY_SNAPSHOT_FILE")

    # Indices and identifiers
    customer_buckets: int = Field(20, gt=0, alias="BAKERY_CUSTOMER_BUCKETS")
    employee_buckets: int = Field(20, gt=0, alias="BAKERY_EMPLOYEE_BUCKETS")
    id_start: int = Field(1000, ge=0, alias="BAKERY_ID_START")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_file


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
