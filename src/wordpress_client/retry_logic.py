"""Retry logic with exponential backoff for WordPress API rate limits.

Only HTTP 429 responses are retried, with exponential backoff (1s, 2s, 4s).
Every other error fails fast.
"""

import time
import logging
from typing import Callable, TypeVar

from .errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Retry function on 429 rate limit with exponential backoff.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        TransportError: With status 429 if the rate limit persists after 3 retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> raw = retry_on_rate_limit(client.fetch_document, "42")
    """
    for retry_num in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"Rate limit persisted after {MAX_RETRIES} retries, giving up"
                )
                raise TransportError(
                    429, f"WordPress API failure (after {MAX_RETRIES} retries)"
                ) from e

            wait_time = 2 ** retry_num
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise TransportError(429, f"WordPress API failure (after {MAX_RETRIES} retries)")


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a rate limit (429) error.

    Args:
        exception: The exception to check

    Returns:
        True if this is a rate limit error, False otherwise
    """
    if isinstance(exception, TransportError):
        return exception.status == 429

    # requests.HTTPError carries the response
    response = getattr(exception, 'response', None)
    if response is not None and getattr(response, 'status_code', None) == 429:
        return True

    return False
