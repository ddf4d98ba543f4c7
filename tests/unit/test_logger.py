"""Unit tests for logging setup."""

import logging

import pytest

from aniorder.config import LoggingConfig
from aniorder.utils.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Reset root handlers after each test."""
    yield
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)


class TestSetupLogging:
    """Test sink and level configuration."""

    def test_console_only(self):
        setup_logging(LoggingConfig(level="warning"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert [type(h) for h in root.handlers] == [logging.StreamHandler]

    def test_console_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "aniorder.log"

        setup_logging(LoggingConfig(level="debug", format="json", output=str(log_file)))
        get_logger("aniorder.test").info("Resolving relations", media_id=5)
        for handler in logging.getLogger().handlers:
            handler.flush()

        handler_types = {type(h) for h in logging.getLogger().handlers}
        assert handler_types == {logging.StreamHandler, logging.FileHandler}
        content = log_file.read_text(encoding="utf-8")
        assert "Resolving relations" in content
        assert '"media_id": 5' in content

    def test_file_only(self, tmp_path):
        log_file = tmp_path / "aniorder.log"

        setup_logging(LoggingConfig(console=False, output=str(log_file)))

        assert [type(h) for h in logging.getLogger().handlers] == [logging.FileHandler]

    def test_no_sinks(self):
        setup_logging(LoggingConfig(console=False))

        assert [type(h) for h in logging.getLogger().handlers] == [logging.NullHandler]
