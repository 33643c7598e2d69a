"""Logging for the spacing votes service.

One stdout handler on the root logger carries the `spacing.*` module loggers
and uvicorn's own loggers, so the server and the application share a single
format. SQLAlchemy's engine logger stays at WARNING unless the configured
level is DEBUG.
"""

from __future__ import annotations

import logging
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def build_logging_config(level: str = "INFO") -> dict:
    """Return a `dictConfig` mapping; also usable as uvicorn's `log_config`."""
    level = level.upper()
    loggers = {
        name: {"level": level, "handlers": ["stdout"], "propagate": False}
        for name in _SERVER_LOGGERS
    }
    loggers["spacing"] = {"level": level}
    loggers["sqlalchemy.engine"] = {"level": "DEBUG" if level == "DEBUG" else "WARNING"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": LOG_FORMAT}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": loggers,
    }


def configure_logging(level: str = "INFO") -> None:
    """Install the stdout handler unless the root logger already has one.

    Test runners and reloaders install their own handlers first; adding ours
    on top would print every record twice.
    """
    if logging.getLogger().handlers:
        return
    dictConfig(build_logging_config(level))


__all__ = ["LOG_FORMAT", "build_logging_config", "configure_logging"]
