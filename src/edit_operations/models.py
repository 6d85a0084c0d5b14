"""Data models for the edit orchestrator.

This module defines the engine configuration and the structured result
returned by every orchestrated operation.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional


@dataclass
class EditorConfig:
    """Engine settings loaded from the YAML configuration file.

    Attributes:
        staging_dir: Directory staged documents are written to
        staging_max_age_hours: Staged files older than this are evicted
        inline_size_limit_bytes: Largest encoded document returned inline
        default_page_size: Page size used when a caller gives none
        request_timeout: Store request timeout in seconds
    """

    staging_dir: str = "tmp/elementor-data"
    staging_max_age_hours: float = 24
    inline_size_limit_bytes: int = 100000
    default_page_size: int = 5
    request_timeout: int = 60

    @property
    def staging_max_age(self) -> timedelta:
        return timedelta(hours=self.staging_max_age_hours)


@dataclass
class EditResult:
    """Outcome of one orchestrated operation.

    Attributes:
        success: Whether the operation completed (and was stored, for edits)
        operation: Name of the operation
        content_id: Post/page id the operation targeted
        data: Operation-specific payload (element, ids, descriptor, ...)
        message: Human-readable summary
        error: Error message if the operation failed
        error_type: Exception class name if the operation failed
    """

    success: bool
    operation: str
    content_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    message: str = ""
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "success": self.success,
            "operation": self.operation,
            "content_id": self.content_id,
        }
        if self.data:
            result["data"] = self.data
        if self.message:
            result["message"] = self.message
        if self.error is not None:
            result["error"] = self.error
            result["error_type"] = self.error_type
        return result
