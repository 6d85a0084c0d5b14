"""Typed exceptions for document staging."""

from typing import Optional

from src.wordpress_client.errors import ElementorError


class StagingError(ElementorError):
    """Raised when a staged document cannot be written, read or evicted."""

    def __init__(self, path: str, operation: str, reason: Optional[str] = None):
        message = f"Staging operation '{operation}' failed for {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path
        self.operation = operation
        self.reason = reason
