"""Logging setup for shellgate."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = "INFO"


def setup_logging(level: str | None = None, console: Console | None = None) -> None:
    """Configure root logging with a rich handler on stderr.

    Args:
        level: Log level name. Unknown names fall back to INFO.
        console: Console to log to; defaults to a stderr console.
    """
    level_name = (level or DEFAULT_LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=log_level == logging.DEBUG,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=log_level,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[handler],
        force=True,
    )
