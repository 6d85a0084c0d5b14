"""Pagination over the top-level elements of a document.

Large pages can hold hundreds of sections. Callers that cannot take the
whole tree at once read it in fixed-size windows of top-level elements.
Unlike insert positions, page indexes are never clamped.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import OutOfRangeError
from .models import Document, Element


@dataclass
class DocumentPage:
    """One window of top-level elements.

    Attributes:
        page: Elements in this window
        page_index: Zero-based index of this window
        page_size: Maximum number of elements per window
        total_pages: Number of windows in the document
        total_count: Number of top-level elements in the document
        has_next: Whether a following window exists
        has_prev: Whether a preceding window exists
        start_index: Position of the first element of the window
        end_index: Position of the last element of the window
    """

    page_index: int
    page_size: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool
    start_index: int
    end_index: int
    page: List[Element] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": [element.to_dict() for element in self.page],
            "page_index": self.page_index,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "total_count": self.total_count,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
            "start_index": self.start_index,
            "end_index": self.end_index,
        }


def paginate(doc: Document, page_size: int, page_index: int) -> DocumentPage:
    """Return one window of the document's top-level elements.

    Args:
        doc: Document to paginate
        page_size: Number of top-level elements per window (at least 1)
        page_index: Zero-based window index

    Returns:
        DocumentPage for the requested window

    Raises:
        OutOfRangeError: If page_size < 1, or page_index is negative or
            not below the number of windows
    """
    if page_size < 1:
        raise OutOfRangeError("page_size", page_size)

    total_count = len(doc.elements)
    total_pages = math.ceil(total_count / page_size)

    if page_index < 0 or page_index >= total_pages:
        raise OutOfRangeError("page_index", page_index, total_pages)

    start = page_index * page_size
    end = min(start + page_size, total_count)

    return DocumentPage(
        page=doc.elements[start:end],
        page_index=page_index,
        page_size=page_size,
        total_pages=total_pages,
        total_count=total_count,
        has_next=page_index < total_pages - 1,
        has_prev=page_index > 0,
        start_index=start,
        end_index=end - 1,
    )
