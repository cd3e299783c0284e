"""Logging setup shared by the library and the ``markerlift-lift`` command."""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "markerlift"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Install a root handler unless the host application already has one."""

    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)


def set_level(level: int) -> None:
    """Change verbosity of markerlift's own loggers only (``--verbose``).

    Third-party loggers keep the root level.
    """

    configure_logging()
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    for handler in logging.getLogger().handlers:
        if handler.level > level:
            handler.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``markerlift`` namespace.

    Module names already in the package (``markerlift.lift.mapper``) are used
    as-is; anything else (``__main__``, scripts) is nested beneath it.
    """

    configure_logging()
    if not name or name == PACKAGE_LOGGER:
        return logging.getLogger(PACKAGE_LOGGER)
    if name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


__all__ = ["PACKAGE_LOGGER", "LOG_FORMAT", "configure_logging", "get_logger", "set_level"]
