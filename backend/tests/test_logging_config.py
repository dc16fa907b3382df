"""Tests for logger setup."""

import logging

from designkit import logging_config


class TestSetupLogger:
    def test_file_and_console_handlers(self):
        logger = logging_config.setup_logger("tests.setup", "tests-setup.log")
        kinds = sorted(type(h).__name__ for h in logger.handlers)
        assert kinds == ["FileHandler", "StreamHandler"]
        assert logger.propagate is False
        assert (logging_config.LOG_DIR / "tests-setup.log").exists()

    def test_console_only(self):
        logger = logging_config.setup_logger("tests.console")
        assert [type(h).__name__ for h in logger.handlers] == ["StreamHandler"]

    def test_configured_once(self):
        first = logging_config.setup_logger("tests.once", "tests-once.log")
        second = logging_config.setup_logger("tests.once", "tests-once.log", level="DEBUG")
        assert first is second
        assert len(second.handlers) == 2
        assert second.level == logging.INFO

    def test_explicit_level(self):
        logger = logging_config.setup_logger("tests.debug", level="DEBUG")
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        logger = logging_config.setup_logger("tests.bogus", level="NOPE")
        assert logger.level == logging.INFO

    def test_bundle_logger(self):
        logger = logging_config.get_bundle_logger()
        assert logger.name == "publish"
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
