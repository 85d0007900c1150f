"""Logging utilities for chartrepo.

This module provides standardized logging functionality for registry operations.
"""

import logging
import sys
from enum import Enum
from typing import Any, Dict, Optional, Union

ROOT_LOGGER_NAME = "chartrepo"


class LogEvent(str, Enum):
    """Event types for chartrepo logging."""

    REPOSITORY_REGISTRY = "repository_registry"
    INDEX_FETCH = "index_fetch"
    REGISTRY_LOCK = "registry_lock"
    REGISTRY_UPDATE = "registry_update"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the chartrepo namespace.

    Args:
        name: Module or component name. Module names such as ``chartrepo.lock``
            are used as is, bare names are nested under ``chartrepo``.

    Returns:
        Logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Send chartrepo logs to stderr at the given level.

    Calling this more than once only adjusts the level.
    """
    logger = get_logger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not any(isinstance(h, _StderrHandler) for h in logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)


class _StderrHandler(logging.StreamHandler):
    """Stream handler that writes to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):  # type: ignore[no-untyped-def,override]
        return sys.stderr


def _format_data(data: Dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in data.items() if value is not None)


def _log(level: int, event: LogEvent, message: str, data: Dict[str, Any]) -> None:
    """Log an event with its structured context.

    Args:
        level: Severity level
        event: Event type
        message: Human readable message
        data: Dictionary of event data
    """
    logger = get_logger(event.value)
    if not logger.isEnabledFor(level):
        return
    context = _format_data(data)
    if context:
        logger.log(level, "%s [%s]", message, context)
    else:
        logger.log(level, "%s", message)


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    _log(logging.DEBUG, event, message, data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    _log(logging.INFO, event, message, data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    _log(logging.WARNING, event, message, data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    _log(logging.ERROR, event, message, data)
