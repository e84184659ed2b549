"""Unit tests for the logging helpers."""

import logging
import logging.handlers

import pytest

from pishock_client.core.logging_config import configure_logging
from pishock_client.core.logging_utils import get_module_logger, mask_secret


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


class TestStructuredLogger:

    def test_module_logger_namespace(self):
        logger = get_module_logger("Shocker")

        assert logger.name == "pishock_client.Shocker"
        assert logger.component == "Shocker"

    def test_messages_are_prefixed(self, caplog):
        logger = get_module_logger("Shocker")

        with caplog.at_level(logging.INFO, logger="pishock_client"):
            logger.info("Vibrating with intensity %d", 20)

        assert "[Shocker] Vibrating with intensity 20" in caplog.messages

    def test_percent_in_message_without_args(self, caplog):
        logger = get_module_logger("Test")

        with caplog.at_level(logging.INFO, logger="pishock_client"):
            logger.info("100% done")

        assert caplog.messages == ["[Test] 100% done"]

    def test_bad_format_args_are_kept(self, caplog):
        logger = get_module_logger("Test")

        with caplog.at_level(logging.INFO, logger="pishock_client"):
            logger.info("no placeholders", 1, 2)

        assert caplog.messages == ["[Test] no placeholders | args=1 2"]

    def test_disabled_level_is_skipped(self, caplog):
        logger = get_module_logger("Quiet")

        with caplog.at_level(logging.WARNING, logger="pishock_client"):
            logger.debug("hidden %s", "value")

        assert caplog.records == []


class TestMaskSecret:

    @pytest.mark.parametrize("value, expected", [
        ("5c678926-d19e", "*********d19e"),
        ("abc", "***"),
        ("", ""),
        (None, ""),
    ])
    def test_mask(self, value, expected):
        assert mask_secret(value) == expected


class TestConfigureLogging:

    def test_installs_console_and_file_handlers(self, restore_root_logging, tmp_path):
        log_file = tmp_path / "logs" / "pishock.log"

        configure_logging("DEBUG", log_file=log_file, suppressed_loggers=("aiohttp",))

        root = restore_root_logging
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
        assert log_file.parent.is_dir()
        assert logging.getLogger("aiohttp").level == logging.ERROR

    def test_replaces_previous_handlers(self, restore_root_logging):
        configure_logging("info")
        configure_logging("warning")

        assert len(restore_root_logging.handlers) == 1
        assert restore_root_logging.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logging):
        configure_logging("chatty")

        assert restore_root_logging.level == logging.INFO
