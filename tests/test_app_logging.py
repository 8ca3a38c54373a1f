"""Tests for logging configuration."""

import logging

from fitness_tracker.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("fitness_tracker")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging("chatty")

    assert logging.getLogger("fitness_tracker").level == logging.INFO
