"""Typed exceptions for the edit orchestrator layer."""

from typing import Optional

from src.wordpress_client.errors import ElementorError


class ConfigError(ElementorError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
