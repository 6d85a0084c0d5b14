"""Element tree module for Elementor documents.

This module provides the data model, codec and tree algorithms used to
edit Elementor page-builder data: an ordered, nested tree of sections,
columns, containers and widgets.

Key classes:
    Document: Ordered top-level elements of one page
    Element: One node of the tree
    DocumentCodec: Decodes and encodes raw `_elementor_data`
    TreeEditor: Recursive search and mutation operations
    DocumentPage: One window of top-level elements (see paginate)
"""

from .errors import (
    DocumentError,
    DecodeError,
    ElementNotFoundError,
    OutOfRangeError,
    InvalidTargetError,
    ValidationFailure,
)
from .models import (
    ABSENT,
    Document,
    Element,
    ElementKind,
    ElementMatch,
    FlatElement,
    StructureNode,
    Violation,
    WidgetUpdate,
    generate_element_id,
    is_container_kind,
    requires_widget_type,
    new_column,
    new_container,
    new_section,
    new_widget,
)
from .codec import DocumentCodec
from .tree_editor import TreeEditor, WIDGET_CONTENT_FIELDS
from .pagination import DocumentPage, paginate

__all__ = [
    # Core classes
    "DocumentCodec",
    "TreeEditor",
    "paginate",
    # Data models
    "Document",
    "Element",
    "ElementKind",
    "ElementMatch",
    "FlatElement",
    "StructureNode",
    "Violation",
    "WidgetUpdate",
    "DocumentPage",
    "WIDGET_CONTENT_FIELDS",
    # Helpers
    "ABSENT",
    "generate_element_id",
    "is_container_kind",
    "requires_widget_type",
    "new_column",
    "new_container",
    "new_section",
    "new_widget",
    # Errors
    "DocumentError",
    "DecodeError",
    "ElementNotFoundError",
    "OutOfRangeError",
    "InvalidTargetError",
    "ValidationFailure",
]
