"""
Tests for the Logging Utilities module.

Tests cover:
- Logger configuration with setup_logging()
- Rotating file handlers
- Structured widget sync logging helpers
- SyncLogContext context manager
"""

import logging
import logging.handlers
from unittest.mock import MagicMock

import pytest
import structlog

from affirmation_core.services.widget_sync import WidgetSyncBridge
from affirmation_core.utils.logging import (
    SYNC_LOGGER_NAME,
    SyncLogContext,
    get_sync_logger,
    log_sync_error,
    setup_logging,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clean_logging_state():
    """Clean up logging state before and after each test."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)

    yield

    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)

    sync_logger = logging.getLogger(SYNC_LOGGER_NAME)
    for handler in sync_logger.handlers:
        handler.close()
    sync_logger.handlers.clear()
    structlog.reset_defaults()


# =============================================================================
# Setup Logging Tests
# =============================================================================


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_console_only_by_default(self, clean_logging_state, tmp_path):
        setup_logging(log_dir=tmp_path / "logs")

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], logging.StreamHandler)
        assert not (tmp_path / "logs").exists()

    @pytest.mark.parametrize(
        "log_level,expected",
        [("DEBUG", logging.DEBUG), ("info", logging.INFO), ("ERROR", logging.ERROR)],
    )
    def test_log_level_settings(self, clean_logging_state, log_level, expected):
        setup_logging(log_level=log_level)
        assert logging.getLogger().level == expected

    def test_file_handlers(self, clean_logging_state, tmp_path):
        logs_dir = tmp_path / "logs"
        setup_logging(log_to_file=True, log_dir=logs_dir)

        root_handlers = logging.getLogger().handlers
        rotating = [h for h in root_handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert {h.level for h in rotating} == {logging.INFO, logging.ERROR}
        assert (logs_dir / "app.log").exists()
        assert (logs_dir / "errors.log").exists()

        sync_handlers = logging.getLogger(SYNC_LOGGER_NAME).handlers
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in sync_handlers)

    def test_setup_is_repeatable(self, clean_logging_state):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_repeated_file_setup_keeps_one_sync_handler(self, clean_logging_state, tmp_path):
        setup_logging(log_to_file=True, log_dir=tmp_path / "first")
        setup_logging(log_to_file=True, log_dir=tmp_path / "second")

        sync_handlers = logging.getLogger(SYNC_LOGGER_NAME).handlers
        assert len(sync_handlers) == 1
        assert sync_handlers[0].baseFilename == str(tmp_path / "second" / "widget_sync.log")

    @pytest.mark.asyncio
    async def test_bridge_events_reach_sync_log(
        self,
        clean_logging_state,
        tmp_path,
        affirmation_repo,
        settings_repo,
        app_state_repo,
        widget_storage,
    ):
        logs_dir = tmp_path / "logs"
        setup_logging(log_level="DEBUG", log_to_file=True, log_dir=logs_dir)
        bridge = WidgetSyncBridge(affirmation_repo, settings_repo, app_state_repo, widget_storage)

        assert await bridge.sync(reason="manual") is True

        content = (logs_dir / "widget_sync.log").read_text(encoding="utf-8")
        assert "widget_sync - done" in content
        assert "manual" in content


# =============================================================================
# Structured Sync Logging Tests
# =============================================================================


class TestSyncLogging:
    def test_get_sync_logger(self):
        assert get_sync_logger() is not None

    def test_log_sync_error(self):
        logger = MagicMock()
        log_sync_error(ValueError("disk full"), {"reason": "startup"}, logger)

        logger.error.assert_called_once()
        _, kwargs = logger.error.call_args
        assert kwargs["error_type"] == "ValueError"
        assert kwargs["error_message"] == "disk full"
        assert kwargs["reason"] == "startup"


class TestSyncLogContext:
    def test_success_logs_info_with_details(self):
        logger = MagicMock()
        with SyncLogContext("widget_sync", logger, reason="manual") as ctx:
            ctx.add(affirmations_count=3)

        logger.info.assert_called_once()
        _, kwargs = logger.info.call_args
        assert kwargs["reason"] == "manual"
        assert kwargs["affirmations_count"] == 3
        assert kwargs["duration_seconds"] >= 0

    def test_failure_logs_error_and_reraises(self):
        logger = MagicMock()
        with pytest.raises(RuntimeError):
            with SyncLogContext("widget_sync", logger):
                raise RuntimeError("boom")

        logger.error.assert_called_once()
        _, kwargs = logger.error.call_args
        assert kwargs["operation"] == "widget_sync"
        assert kwargs["error_type"] == "RuntimeError"
        logger.info.assert_not_called()
