from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

ROOT = Path(__file__).resolve().parents[1]
ENV_FILE = ROOT / "env" / ".env.test"


class TestSettings(BaseSettings):
    # tests/conftest.py uses TEST_DATABASE_URL instead when it is set
    DATABASE_URL: str = f"sqlite+aiosqlite:///{ROOT / 'assets_test.db'}"
    APP_ENV: str = "test"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"
    REQUEST_NUMBER_MAX_RETRIES: int = 3

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
    )
