"""Centralized logging configuration for the ``ledgerkit`` package.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the
  package root logger. Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger, ensuring the package root logger
  has a ``NullHandler`` when nothing has been configured.

Library modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "ledgerkit"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_configured = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.WARNING
    env_val = os.getenv("LEDGERKIT_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Logging level as ``int`` or level name. If ``None``, the
            ``LEDGERKIT_LOG_LEVEL`` environment variable is used when set,
            otherwise ``WARNING``.
        fmt: Optional format string
        stream: Output stream for the handler (defaults to ``sys.stderr``)
    """
    global _configured
    if _configured:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(numeric_level)
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until an application configures one."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
