"""WordPress client library for Elementor documents.

This package reads and writes the `_elementor_data` meta field of WordPress
posts and pages over the REST API, and defines the error hierarchy shared
by the editing engine.

Import the client from `src.wordpress_client.api_wrapper`.
"""

from .errors import (
    ElementorError,
    StoreError,
    InvalidCredentialsError,
    ContentNotFoundError,
    APIUnreachableError,
    TransportError,
)

__all__ = [
    "ElementorError",
    "StoreError",
    "InvalidCredentialsError",
    "ContentNotFoundError",
    "APIUnreachableError",
    "TransportError",
]
