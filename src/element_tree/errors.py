"""Typed exception hierarchy for element tree errors.

Every failure of the codec, the tree algorithms and pagination is one of
these exceptions. They inherit from DocumentError so callers can catch the
whole engine in one clause.
"""

from typing import Any, List, Optional

from src.wordpress_client.errors import ElementorError

# Excerpts of offending payloads are capped so large documents never end up
# in error messages or logs.
EXCERPT_LENGTH = 200


class DocumentError(ElementorError):
    """Base exception for all element tree errors."""
    pass


class DecodeError(DocumentError):
    """Raised when raw Elementor data cannot be turned into a Document.

    Attributes:
        reason: "absent" when there is no Elementor data at all,
            "malformed" when parsing failed at any stage
        raw_excerpt: First characters of the offending raw value
    """

    ABSENT = "absent"
    MALFORMED = "malformed"

    def __init__(self, reason: str, raw_excerpt: str = "", detail: str = ""):
        if reason == self.ABSENT:
            message = "No Elementor data found"
        else:
            message = "Elementor data is malformed"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.reason = reason
        self.raw_excerpt = raw_excerpt[:EXCERPT_LENGTH]
        self.detail = detail


class ElementNotFoundError(DocumentError):
    """Raised when an element id does not occur in the document."""

    def __init__(self, element_id: str):
        super().__init__(f"Element {element_id} not found")
        self.element_id = element_id


class OutOfRangeError(DocumentError):
    """Raised when an index or page index falls outside the valid range."""

    def __init__(self, field: str, value: int, limit: Optional[int] = None):
        if limit is None:
            message = f"{field} {value} is out of range"
        else:
            message = f"{field} {value} is out of range (limit: {limit})"
        super().__init__(message)
        self.field = field
        self.value = value
        self.limit = limit


class InvalidTargetError(DocumentError):
    """Raised when an element cannot serve as the target of an operation."""

    def __init__(self, element_id: Optional[str], message: str):
        super().__init__(message)
        self.element_id = element_id


class ValidationFailure(DocumentError):
    """Raised when a mutation leaves the document with new violations."""

    def __init__(self, violations: List[Any]):
        count = len(violations)
        summary = "; ".join(str(v) for v in violations[:3])
        if count > 3:
            summary += f"; ... ({count - 3} more)"
        super().__init__(f"Document has {count} violation(s): {summary}")
        self.violations = violations
