from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

ROOT = Path(__file__).resolve().parents[1]
ENV_FILE = ROOT / "env" / ".env.local"


class LocalSettings(BaseSettings):
    DATABASE_URL: str = f"sqlite+aiosqlite:///{ROOT / 'assets_local.db'}"
    APP_ENV: str = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"

    # How many times a procurement request is re-numbered after a
    # (tenant_id, request_number) unique violation before giving up
    REQUEST_NUMBER_MAX_RETRIES: int = 3

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
    )
