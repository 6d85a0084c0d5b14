"""Typed exception hierarchy for WordPress store errors.

This module defines the base exception for the whole editing engine and the
errors raised by the WordPress store client. All exceptions include
descriptive messages and keep their context as attributes to help with
debugging.
"""

from typing import Optional


class ElementorError(Exception):
    """Base exception for all elementor-editor errors.

    Use this to catch any application-level error from the editing engine.
    """
    pass


class StoreError(ElementorError):
    """Base exception for all content-store errors."""
    pass


class InvalidCredentialsError(StoreError):
    """Raised when WordPress credentials are missing or authentication fails."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"Application password is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class ContentNotFoundError(StoreError):
    """Raised when no post or page record exists for a content id."""

    def __init__(self, content_id: str):
        super().__init__(f"Post/page {content_id} not found in posts or pages")
        self.content_id = content_id


class APIUnreachableError(StoreError):
    """Raised when the WordPress REST API is not available or times out."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class TransportError(StoreError):
    """Raised when a store request fails with a non-recoverable HTTP status."""

    def __init__(self, status: Optional[int], message: str = ""):
        if message:
            full_message = f"HTTP {status}: {message}"
        else:
            full_message = f"HTTP {status}: WordPress API failure"
        super().__init__(full_message)
        self.status = status
        self.original_message = message
