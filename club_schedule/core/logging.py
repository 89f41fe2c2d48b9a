"""Centralized logging configuration."""
import logging
from logging.config import dictConfig

from club_schedule.core.config import settings


def configure_logging(*, log_level: str | None = None) -> None:
    """Configure logging once for scripts and host applications."""
    if getattr(configure_logging, "_configured", False):
        return

    level = (log_level or settings.log_level_resolved).upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": level,
                }
            },
            "root": {
                "handlers": ["console"],
                "level": level,
            },
        }
    )

    logging.getLogger(__name__).debug("Logging configured at %s", level)
    setattr(configure_logging, "_configured", True)
