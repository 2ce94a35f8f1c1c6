"""
Tests for graceful_failure module.

This module tests the graceful_failure context manager used for follow-up
work that must not fail the request that triggered it.
"""

import logging
from unittest.mock import MagicMock

import pytest

from rating_service.core.graceful_failure import graceful_failure


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


class TestGracefulFailure:
    """Tests for the graceful_failure context manager."""

    async def test_success_case_no_exception(self, mock_logger):
        """Test that code executes normally when no exception occurs."""
        result = []

        async with graceful_failure("test operation", mock_logger):
            result.append("executed")

        assert result == ["executed"]
        mock_logger.log.assert_not_called()

    async def test_exception_is_swallowed(self, mock_logger):
        """Test that exceptions are swallowed and don't propagate."""
        result = []

        async with graceful_failure("failing operation", mock_logger):
            raise ValueError("test error")

        result.append("continued")
        assert result == ["continued"]

    async def test_logs_exception_with_default_warning_level(self, mock_logger):
        """Test that exceptions are logged at WARNING level by default."""
        async with graceful_failure("test operation", mock_logger):
            raise ValueError("something went wrong")

        mock_logger.log.assert_called_once()
        call_args = mock_logger.log.call_args
        assert call_args[0][0] == logging.WARNING
        assert "Failed to test operation" in call_args[0][1]
        assert "something went wrong" in call_args[0][1]
        assert call_args[1]["exc_info"] is False

    async def test_custom_log_level_and_exc_info(self, mock_logger):
        """Test custom logging level with a stack trace."""
        async with graceful_failure(
            "update subject summary",
            mock_logger,
            log_level=logging.ERROR,
            exc_info=True,
        ):
            raise ValueError("critical issue")

        call_args = mock_logger.log.call_args
        assert call_args[0][0] == logging.ERROR
        assert call_args[1]["exc_info"] is True

    async def test_context_in_log_message(self, mock_logger):
        """Test that context is included in log message."""
        async with graceful_failure(
            "update subject summary",
            mock_logger,
            context={"subject_id": "movie:603"},
        ):
            raise ValueError("database error")

        log_message = mock_logger.log.call_args[0][1]
        assert "subject_id=movie:603" in log_message
        assert "Failed to update subject summary" in log_message
