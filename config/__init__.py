from __future__ import annotations

import os

# Settings classes come from the `pydantic-settings` package (Pydantic v2).
# Each one points at its own env file under <project root>/env/.

# Mode selector: MODE env var first, then APP_ENV, then 'local'
MODE = (os.environ.get("MODE") or os.environ.get("APP_ENV") or "local").lower()

from .local import LocalSettings
from .dev import DevSettings
from .test import TestSettings
from .stage import StageSettings
from .prod import ProdSettings


_MAPPING = {
    "local": LocalSettings,
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "stage": StageSettings,
    "staging": StageSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


def _choose_settings_class(mode: str):
    return _MAPPING.get(mode, LocalSettings)


SettingsClass = _choose_settings_class(MODE)
settings = SettingsClass()

__all__ = ["settings", "SettingsClass", "MODE"]
