"""Edit orchestrator for Elementor documents.

This module composes the element tree engine, staging and a document store
into read-modify-write operations on stored Elementor pages.

Key classes:
    EditOperations: Read and edit operations returning EditResult
    EditorConfig: Engine settings (see ConfigLoader)
"""

from .config_loader import ConfigLoader
from .edit_operations import EditOperations
from .errors import ConfigError
from .logging_config import configure_logging
from .models import EditorConfig, EditResult

__all__ = [
    "EditOperations",
    "EditResult",
    "EditorConfig",
    "ConfigLoader",
    "ConfigError",
    "configure_logging",
]
