"""Centralized logging configuration for Bundle Forge."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from config import settings

__all__ = ["console", "configure_logging"]

console = Console()


def _resolve_level(level_name: Optional[str]) -> int:
    """Map a level name to a logging level, defaulting to INFO."""
    name = (level_name or settings.log_level).upper()
    return getattr(logging, name, logging.INFO)


def configure_logging(level_name: Optional[str] = None) -> None:
    """Install a single Rich handler on the root logger.

    Calling this again only adjusts the level.
    """
    root_logger = logging.getLogger()

    managed = [
        handler for handler in root_logger.handlers
        if isinstance(handler, RichHandler) and getattr(handler, "_bundle_forge_managed", False)
    ]

    if not managed:
        root_logger.handlers.clear()
        handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._bundle_forge_managed = True
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_level(level_name))
    logging.captureWarnings(True)
