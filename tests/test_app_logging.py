"""Tests for logging configuration."""

import logging

from can_i_have_this.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("can_i_have_this")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_default_level_shows_warnings_only() -> None:
    configure_logging()

    assert logging.getLogger("can_i_have_this").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_verbose_enables_debug_output() -> None:
    configure_logging(verbose=True)

    assert logging.getLogger("can_i_have_this").level == logging.DEBUG
    assert logging.getLogger("openai").level == logging.DEBUG

    configure_logging()
