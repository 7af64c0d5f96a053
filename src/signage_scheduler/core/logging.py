"""Logging setup shared by the API process and the maintenance scripts."""

from __future__ import annotations

import logging
from logging.config import dictConfig

_configured = False


def configure_logging(level: str = "INFO") -> None:
    global _configured
    if _configured:
        logging.getLogger("signage_scheduler").setLevel(level.upper())
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "signage_scheduler": {
                    "handlers": ["console"],
                    "level": level.upper(),
                    "propagate": True,
                },
            },
        }
    )
    # Players poll every few seconds; keep the access log to warnings and errors.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
