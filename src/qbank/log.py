# src/qbank/log.py
"""Logging setup for qbank.

Library modules log through ``get_logger(__name__)`` and never attach
handlers themselves. Applications (and the CLI) call ``configure_logging``
once to route the ``qbank`` logger tree to the console.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "qbank"
LOG_LEVEL_ENV = "QBANK_LOG_LEVEL"
PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def configure_logging(
    level: str | int | None = None,
    *,
    rich: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a console handler to the ``qbank`` logger.

    Args:
        level: Level name or number. Defaults to $QBANK_LOG_LEVEL, then WARNING.
        rich: Use Rich formatting. Plain "time | level | name | message" otherwise.
        console: Optional Rich console to log to (defaults to stderr).

    Returns:
        The configured ``qbank`` logger.
    """
    global _configured

    base = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str) or level is None:
        level_name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
        resolved = logging.getLevelName(level_name)
        level = resolved if isinstance(resolved, int) else logging.WARNING
    base.setLevel(level)

    if _configured:
        return base

    handler: logging.Handler
    if rich:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    base.addHandler(handler)
    _configured = True
    return base


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``qbank`` tree."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
