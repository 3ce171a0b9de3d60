"""Interactive development-environment installer."""

from __future__ import annotations

import logging

from rich.console import Console

__all__ = [
    "console",
    "logger",
    "configure_logging",
]

__version__ = "0.1.0"

console = Console()
logger = logging.getLogger("devinstaller")


def configure_logging(level: str = "INFO") -> None:
    """Configure package-wide logging (idempotent)."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level.upper())
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
