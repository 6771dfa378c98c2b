"""Logging setup for the HomeFinder backend and Streamlit app.

One namespaced ``homefinder`` logger is configured on first use; modules
take child loggers from :func:`get_logger` and describe events as an event
name followed by ``key=value`` fields (see :func:`fields`).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

NAMESPACE = "homefinder"


def configure_logging(namespace: str = NAMESPACE, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(namespace)
    if logger.handlers:
        if level:
            logger.setLevel(level.upper())
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel((level or _LOG_LEVEL).upper())
    logger.propagate = False
    return logger


def get_logger(child: Optional[str] = None) -> logging.Logger:
    base = configure_logging()
    if child:
        return base.getChild(child)
    return base


def fields(event: str, **values: Any) -> str:
    """Render ``event key=value ...``; values containing spaces are quoted."""

    parts = [event]
    for key, value in values.items():
        text = "-" if value is None else str(value)
        if not text or any(ch.isspace() for ch in text):
            text = f'"{text}"'
        parts.append(f"{key}={text}")
    return " ".join(parts)


__all__ = ["NAMESPACE", "configure_logging", "get_logger", "fields"]
