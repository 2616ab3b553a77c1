"""Logging utilities for Backview."""

from __future__ import annotations

import logging
import os

_NOISY_LOGGERS: tuple[str, ...] = ("matplotlib", "PIL", "urllib3", "httpx", "httpcore")


def _parse_level(level: str) -> int:
    """Parse a logging level string into a logging numeric level."""
    resolved_level = getattr(logging, level.upper(), None)
    if not isinstance(resolved_level, int):
        raise ValueError(f"Invalid logging level: {level}")
    return resolved_level


def configure_logging(level: str | None = None) -> None:
    """
    Configure process-wide logging.

    Args:
        level: Logging level (for example ``INFO`` or ``DEBUG``). Falls back to
            ``BACKVIEW_LOG_LEVEL`` and then ``INFO``.
    """
    resolved = level or os.getenv("BACKVIEW_LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=_parse_level(resolved),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    return logging.getLogger(name)
