"""Runtime settings, read from ``STOREFRONT_*`` environment variables or ``.env``."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_", env_file=".env", extra="ignore"
    )

    environment: str = "development"
    log_level: str | None = None
    data_dir: Path = _DEFAULT_DATA_DIR
    low_stock_threshold: int = 5
    total_tolerance: Decimal = Decimal("0.01")
    transaction_timeout: float = 10.0
    notification_workers: int = 2

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
