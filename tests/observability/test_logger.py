"""Tests for logging configuration."""

import logging

import pytest

from vault_index.observability import configure_logging, get_logger


@pytest.fixture
def restore_root_logger():
    """Restore root handlers and level after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """Test root logger setup."""

    def test_single_handler_with_level(self, restore_root_logger) -> None:
        # Act
        configure_logging("debug")
        configure_logging("warning")

        # Assert
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.WARNING

    def test_quiets_http_client_loggers(self, restore_root_logger) -> None:
        configure_logging()

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_get_logger_returns_named_logger(self) -> None:
        assert get_logger("vault_index.test").name == "vault_index.test"
