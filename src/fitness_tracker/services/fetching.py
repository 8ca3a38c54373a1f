"""Helpers for degrading gracefully when the backend fails."""

import logging
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)


def fetch_or_default(func: Callable[[], T], default: T, *, action: str) -> T:
    """Run a read, logging failures and returning ``default`` instead."""
    try:
        return func()
    except Exception:
        _logger.exception("Failed to %s", action)
        return default


def write_or_log(func: Callable[[], object], *, action: str) -> bool:
    """Run a write, logging failures. Returns True when the write succeeded."""
    try:
        func()
    except Exception:
        _logger.exception("Failed to %s", action)
        return False
    return True
