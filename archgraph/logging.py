"""Loggers of the archgraph.* namespace.

Library code only asks for loggers; handlers and levels are set up by the
command line, so an embedding service keeps control of its own logging.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "archgraph"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def level_from_env(default: int = logging.WARNING) -> int:
    """Level named by ARCHGRAPH_LOG_LEVEL; unknown names fall back to INFO."""
    raw = os.environ.get("ARCHGRAPH_LOG_LEVEL", "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def configure_cli_logging(*, quiet: bool = False, verbose: bool = False) -> logging.Logger:
    """Send archgraph logs to stderr through rich; --verbose/--quiet win over the env level."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = level_from_env()
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
