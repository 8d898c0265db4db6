"""Tests for the logging helper."""

from __future__ import annotations

import logging

from promo_kit.logging_setup import setup_logging


def test_console_only(tmp_path):
    logger = setup_logging(level="DEBUG", name="promo_kit.test_console")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_file_handler_writes(tmp_path):
    logger = setup_logging(level=logging.INFO, log_dir=tmp_path / "logs", name="promo_kit.test_file")
    logger.info("palette ready")
    for h in logger.handlers:
        h.flush()
    assert "palette ready" in (tmp_path / "logs" / "promo_kit.log").read_text("utf-8")


def test_repeat_calls_replace_handlers():
    setup_logging(name="promo_kit.test_repeat")
    logger = setup_logging(name="promo_kit.test_repeat")
    assert len(logger.handlers) == 1


def test_unknown_level_name_defaults_to_info():
    logger = setup_logging(level="LOUD", name="promo_kit.test_level")
    assert logger.level == logging.INFO
