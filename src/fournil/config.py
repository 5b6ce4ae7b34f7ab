"""Runtime settings, read from the environment (``FOURNIL_*``) or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FOURNIL_", env_file=".env")

    data_dir: Path = Path("data")
    store_file: str = "store.json"
    log_level: str = "INFO"
    lot_alert_lead_days: int = 3
    reservation_ttl_hours: int | None = None
    lock_timeout_seconds: float = 10.0

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
