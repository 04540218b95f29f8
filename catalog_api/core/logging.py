from __future__ import annotations

import logging
import sys
from typing import Optional

CATALOG_LOGGER = "catalog_api"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    """
    Route catalog logs to stdout at ``level`` (LOG_LEVEL).

    When something else owns the root logger already (uvicorn, pytest), its
    handlers are kept and only the ``catalog_api`` logger level is set, so
    LOG_LEVEL still decides what the service emits. Safe to call repeatedly.
    """
    numeric_level = _level(level)
    logging.getLogger(CATALOG_LOGGER).setLevel(numeric_level)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stdout)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or CATALOG_LOGGER)
