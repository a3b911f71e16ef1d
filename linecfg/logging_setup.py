"""Logging configuration for the ``linecfg`` logger tree."""
from __future__ import annotations

import json
import logging

from linecfg.config.schemas.observability import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

ROOT_LOGGER = "linecfg"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def configure_logging(cfg: LoggingConfig | None = None) -> logging.Logger:
    """Attach one StreamHandler to the ``linecfg`` logger.

    Calling again replaces the handler installed by a previous call, so the
    level/format can be switched at runtime without duplicating output.
    """
    if cfg is None:
        from linecfg.config import get_config

        cfg = get_config().logging
    logger = logging.getLogger(ROOT_LOGGER)
    for h in list(logger.handlers):
        if getattr(h, "_linecfg_handler", False):
            logger.removeHandler(h)
    handler = logging.StreamHandler()
    handler._linecfg_handler = True  # type: ignore[attr-defined]
    if cfg.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("[%(levelname)s] [%(name)s] %(message)s")
        )
    logger.addHandler(handler)
    logger.setLevel(_LEVELS[cfg.level])
    return logger


__all__ = ["configure_logging", "JsonFormatter"]
