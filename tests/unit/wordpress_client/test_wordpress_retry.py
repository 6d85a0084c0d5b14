"""Unit tests for wordpress_client.retry_logic module."""

import pytest
from unittest.mock import MagicMock, patch

from src.wordpress_client.errors import ContentNotFoundError, TransportError
from src.wordpress_client.retry_logic import (
    _is_rate_limit_error,
    retry_on_rate_limit,
)


class TestIsRateLimitError:
    """Test cases for _is_rate_limit_error function."""

    def test_transport_error_429(self):
        assert _is_rate_limit_error(TransportError(429)) is True

    def test_transport_error_other_status(self):
        assert _is_rate_limit_error(TransportError(500)) is False

    def test_response_status_code(self):
        error = Exception("API error")
        error.response = MagicMock()
        error.response.status_code = 429
        assert _is_rate_limit_error(error) is True

    def test_plain_exception(self):
        assert _is_rate_limit_error(Exception("Something went wrong")) is False


class TestRetryOnRateLimit:
    """Test cases for retry_on_rate_limit function."""

    def test_success_on_first_attempt(self):
        mock_func = MagicMock(return_value="success")
        result = retry_on_rate_limit(mock_func, "arg1", kwarg1="value1")

        assert result == "success"
        mock_func.assert_called_once_with("arg1", kwarg1="value1")

    @patch('src.wordpress_client.retry_logic.time.sleep')
    def test_retries_with_exponential_backoff(self, mock_sleep):
        """Rate limits are retried after 1s and 2s before succeeding."""
        mock_func = MagicMock(side_effect=[TransportError(429), TransportError(429), "ok"])

        assert retry_on_rate_limit(mock_func) == "ok"
        assert mock_func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @patch('src.wordpress_client.retry_logic.time.sleep')
    def test_gives_up_after_three_retries(self, mock_sleep):
        mock_func = MagicMock(side_effect=TransportError(429))

        with pytest.raises(TransportError) as exc_info:
            retry_on_rate_limit(mock_func)

        assert exc_info.value.status == 429
        assert "after 3 retries" in str(exc_info.value)
        assert mock_func.call_count == 4
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2, 4]

    @patch('src.wordpress_client.retry_logic.time.sleep')
    def test_other_errors_fail_fast(self, mock_sleep):
        mock_func = MagicMock(side_effect=ContentNotFoundError("42"))

        with pytest.raises(ContentNotFoundError):
            retry_on_rate_limit(mock_func)

        mock_func.assert_called_once()
        mock_sleep.assert_not_called()
