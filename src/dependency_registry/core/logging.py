"""Logging configuration helpers."""

from __future__ import annotations

import logging
import logging.config
from typing import Any

from .config import LoggingSettings

PACKAGE_LOGGER = "dependency_registry"


def _structured_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment emitting ``key=value`` log lines."""
    return {
        "format": "time={asctime} level={levelname} logger={name} message={message!r}",
        "style": "{",
    }


def _plain_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment for human readable logs."""
    return {
        "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
    }


def configure_logging(
    settings: LoggingSettings, logger_name: str = PACKAGE_LOGGER
) -> logging.Logger:
    """Attach a console handler to the registry's logger namespace.

    The root logger is left alone so host applications keep control of
    their own logging setup.
    """
    formatter = _structured_formatter() if settings.structured else _plain_formatter()
    level = settings.level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"registry": formatter},
            "handlers": {
                "registry_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "registry",
                    "level": level,
                },
            },
            "loggers": {
                logger_name: {
                    "handlers": ["registry_console"],
                    "level": level,
                    "propagate": True,
                },
            },
        }
    )
    return logging.getLogger(logger_name)


__all__ = ["PACKAGE_LOGGER", "configure_logging"]
