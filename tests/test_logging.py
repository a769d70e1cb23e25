"""Tests for logging infrastructure."""

from __future__ import annotations

import logging
from pathlib import Path

from poll_report.log import setup_logging


def _clear_logger() -> None:
    """Remove all handlers from the poll_report logger so each test starts fresh."""
    logger = logging.getLogger("poll_report")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_setup_logging_creates_stderr_handler():
    _clear_logger()
    setup_logging()
    logger = logging.getLogger("poll_report")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.level == logging.WARNING
    _clear_logger()


def test_setup_logging_verbose_sets_debug():
    _clear_logger()
    setup_logging(verbose=True)
    assert logging.getLogger("poll_report").level == logging.DEBUG
    _clear_logger()


def test_setup_logging_none_sets_info():
    _clear_logger()
    setup_logging(verbose=None)
    assert logging.getLogger("poll_report").level == logging.INFO
    _clear_logger()


def test_setup_logging_with_log_file(tmp_path):
    _clear_logger()
    log_file = str(tmp_path / "test.log")
    setup_logging(log_file=log_file)
    logger = logging.getLogger("poll_report")
    assert len(logger.handlers) == 2
    assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    # Child loggers used by the renderer reach the file too
    logging.getLogger("poll_report.fonts").warning("لا يوجد خط")
    for h in logger.handlers:
        h.flush()
    content = Path(log_file).read_text(encoding="utf-8")
    assert "لا يوجد خط" in content
    assert "poll_report.fonts" in content
    _clear_logger()


def test_setup_logging_idempotent():
    _clear_logger()
    setup_logging()
    setup_logging()  # second call should be a no-op
    assert len(logging.getLogger("poll_report").handlers) == 1
    _clear_logger()


def test_setup_logging_updates_level_on_repeat_call(tmp_path):
    _clear_logger()
    log_file = tmp_path / "debug.log"
    setup_logging(log_file=str(log_file))
    setup_logging(verbose=True)
    logger = logging.getLogger("poll_report")
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)
    logging.getLogger("poll_report.paginator").debug("page break")
    for h in logger.handlers:
        h.flush()
    assert "page break" in log_file.read_text(encoding="utf-8")
    _clear_logger()
