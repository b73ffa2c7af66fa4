"""Tests for loguru sink configuration."""

from unittest.mock import patch

from studyrag.config import logging as logging_config


class TestConfigureLogging:

    def setup_method(self):
        logging_config._configured_level = None

    def test_same_level_is_idempotent(self):
        with patch.object(logging_config, "logger") as mock_logger:
            logging_config.configure_logging("info")
            logging_config.configure_logging("INFO")

        assert mock_logger.add.call_count == 1
        assert mock_logger.remove.call_count == 1

    def test_new_level_replaces_sink(self):
        with patch.object(logging_config, "logger") as mock_logger:
            logging_config.configure_logging("INFO")
            logging_config.configure_logging("DEBUG")

        assert mock_logger.add.call_count == 2
        assert mock_logger.add.call_args.kwargs["level"] == "DEBUG"
