"""Tests for logging setup."""

import logging

from cv_master.utils.logging_config import LOG_FILENAME, setup_logging


class TestSetupLogging:
    def test_creates_log_file(self, tmp_path):
        logger = setup_logging(str(tmp_path / "logs"))
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "logs" / LOG_FILENAME).read_text(encoding="utf-8")

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path):
        setup_logging(str(tmp_path))
        logger = setup_logging(str(tmp_path))
        assert len(logger.handlers) == 2

    def test_quiets_sdk_loggers(self, tmp_path):
        setup_logging(str(tmp_path), level=logging.DEBUG)
        assert logging.getLogger("httpx").level == logging.WARNING
