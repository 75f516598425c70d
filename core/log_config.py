# core/log_config.py
"""Logging setup, applied once from the FastAPI lifespan."""
import logging.config

from config import settings


def build_logging_config(level: str | None = None) -> dict:
    level = (level or settings.LOG_LEVEL).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "{asctime} {levelname} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
            },
        },
        "loggers": {
            # Lifecycle core and business operations
            "core": {"handlers": ["console"], "level": level, "propagate": False},
            "api": {"handlers": ["console"], "level": level, "propagate": False},
            "main": {"handlers": ["console"], "level": level, "propagate": False},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig(build_logging_config(level))
