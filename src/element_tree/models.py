"""Data models for Elementor documents.

This module defines the data structures for working with Elementor data,
the JSON tree a page builder stores in a post's `_elementor_data` meta
field. Every node carries a short id that the builder uses to address it,
which lets edits target elements precisely.
"""

import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

# Elementor ids are 7 lowercase hex characters
ELEMENT_ID_LENGTH = 7
ELEMENT_ID_ALPHABET = "0123456789abcdef"


class ElementKind(Enum):
    """Types of Elementor elements (the `elType` field)."""

    SECTION = "section"
    COLUMN = "column"
    CONTAINER = "container"
    WIDGET = "widget"


# Element kinds that hold child elements
CONTAINER_KINDS = {
    ElementKind.SECTION,
    ElementKind.COLUMN,
    ElementKind.CONTAINER,
}

KNOWN_KINDS = {kind.value for kind in ElementKind}


class _Absent:
    """Marker for an element key that was not present in the stored data."""

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Absent":
        return self


ABSENT = _Absent()


def is_container_kind(kind: Optional[str]) -> bool:
    """Check whether an element kind holds child elements."""
    return kind in {k.value for k in CONTAINER_KINDS}


def requires_widget_type(kind: Optional[str]) -> bool:
    """Check whether an element kind must name a widget type."""
    return kind == ElementKind.WIDGET.value


def generate_element_id(existing_ids: Optional[Set[str]] = None) -> str:
    """Generate a new element id in Elementor's format.

    Args:
        existing_ids: Ids already used in the document. The new id is
            guaranteed not to be one of them.

    Returns:
        A 7 character lowercase hex token
    """
    existing_ids = existing_ids or set()
    while True:
        candidate = "".join(
            secrets.choice(ELEMENT_ID_ALPHABET) for _ in range(ELEMENT_ID_LENGTH)
        )
        if candidate not in existing_ids:
            return candidate


@dataclass
class Element:
    """Represents a node in the Elementor tree.

    Attributes:
        id: Element id, unique within one document
        kind: Raw elType value (section, column, container, widget)
        widget_type: Widget behavior name; only set for widgets
        settings: Open mapping of setting keys to JSON values
        children: Ordered child elements (always empty for widgets)
        is_inner: Stored isInner value carried through untouched, or ABSENT
            when the stored element had no such key
        extra: Any other keys of the element object, preserved verbatim
    """

    id: str
    kind: str
    widget_type: Optional[str] = None
    settings: Dict[str, Any] = field(default_factory=dict)
    children: List["Element"] = field(default_factory=list)
    is_inner: Any = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def element_kind(self) -> Optional[ElementKind]:
        """Get the ElementKind enum value, or None for unknown kinds."""
        try:
            return ElementKind(self.kind)
        except ValueError:
            return None

    @property
    def is_widget(self) -> bool:
        """Check if this element is a widget."""
        return requires_widget_type(self.kind)

    @property
    def is_container(self) -> bool:
        """Check if this element can hold children."""
        return is_container_kind(self.kind)

    def iter_subtree(self) -> Iterator["Element"]:
        """Walk this element and its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()

    def to_dict(self) -> Dict[str, Any]:
        """Convert this element back to Elementor JSON format.

        Returns:
            Dictionary suitable for JSON serialization
        """
        result: Dict[str, Any] = {"id": self.id, "elType": self.kind}
        if self.is_inner is not ABSENT:
            result["isInner"] = self.is_inner
        result["settings"] = self.settings
        result["elements"] = [child.to_dict() for child in self.children]
        result["widgetType"] = self.widget_type
        for key, value in self.extra.items():
            result.setdefault(key, value)
        return result


@dataclass
class Document:
    """Represents a complete Elementor document.

    Attributes:
        elements: Ordered top-level elements (usually sections or containers)
    """

    elements: List[Element] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.elements)

    def iter_elements(self) -> Iterator[Element]:
        """Walk every element of the document in pre-order."""
        for element in self.elements:
            yield from element.iter_subtree()

    def element_ids(self) -> Set[str]:
        """Get the set of all ids used in the document."""
        return {element.id for element in self.iter_elements() if element.id}

    def to_list(self) -> List[Dict[str, Any]]:
        """Convert the document to Elementor JSON format."""
        return [element.to_dict() for element in self.elements]


@dataclass
class Violation:
    """A single structural problem found by validation.

    Attributes:
        path: Structural path of the element, e.g. root[2].children[0]
        code: Short machine-readable violation code
        message: Human-readable description
        element_id: Id of the offending element, if it has one
    """

    path: str
    code: str
    message: str
    element_id: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.message} at {self.path}"


@dataclass
class WidgetUpdate:
    """Settings and/or content change for one widget.

    Attributes:
        widget_id: Id of the widget to update
        settings: Settings to shallow-merge into the widget
        content: Text for the widget's content field
    """

    widget_id: str
    settings: Dict[str, Any] = field(default_factory=dict)
    content: Optional[str] = None


@dataclass
class StructureNode:
    """Display projection of one element, mirroring the document shape."""

    id: str
    kind: str
    widget_type: Optional[str]
    depth: int
    settings: Optional[Dict[str, Any]] = None
    children: List["StructureNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "widgetType": self.widget_type,
            "level": self.depth,
        }
        if self.settings is not None:
            result["settings"] = self.settings
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class FlatElement:
    """One row of the flattened element listing."""

    id: str
    kind: str
    widget_type: Optional[str]
    depth: int
    content_preview: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "type": self.kind, "level": self.depth}
        if self.widget_type:
            result["widgetType"] = self.widget_type
        if self.content_preview is not None:
            result["contentPreview"] = self.content_preview
        return result


@dataclass
class ElementMatch:
    """One element found by a widget type search.

    Attributes:
        id: Element id
        widget_type: Matched widget type
        path: Structural path, e.g. root[0].children[1]
        settings: Copy of the element settings, if requested
    """

    id: str
    widget_type: str
    path: str
    settings: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "widgetType": self.widget_type,
            "path": self.path,
        }
        if self.settings is not None:
            result["settings"] = self.settings
        return result

def new_column(column_size: int = 50, existing_ids: Optional[Set[str]] = None) -> Element:
    """Create an empty column sized to a percentage of its section."""
    return Element(
        id=generate_element_id(existing_ids),
        kind=ElementKind.COLUMN.value,
        settings={"_column_size": column_size, "_inline_size": None},
    )


def new_section(
    columns: int = 1,
    settings: Optional[Dict[str, Any]] = None,
    existing_ids: Optional[Set[str]] = None,
) -> Element:
    """Create a section with evenly sized empty columns.

    Args:
        columns: Number of columns to create (at least 1)
        settings: Initial section settings
        existing_ids: Ids already used in the target document

    Returns:
        New section Element
    """
    used = set(existing_ids or ())
    columns = max(1, columns)
    column_size = 100 // columns

    section_id = generate_element_id(used)
    used.add(section_id)

    children = []
    for _ in range(columns):
        column = new_column(column_size, used)
        used.add(column.id)
        children.append(column)

    return Element(
        id=section_id,
        kind=ElementKind.SECTION.value,
        settings=dict(settings or {}),
        children=children,
    )


def new_container(
    settings: Optional[Dict[str, Any]] = None,
    existing_ids: Optional[Set[str]] = None,
) -> Element:
    """Create an empty flexbox container."""
    return Element(
        id=generate_element_id(existing_ids),
        kind=ElementKind.CONTAINER.value,
        settings=dict(settings or {}),
    )


def new_widget(
    widget_type: str,
    settings: Optional[Dict[str, Any]] = None,
    existing_ids: Optional[Iterable[str]] = None,
) -> Element:
    """Create a widget of the given type."""
    if not widget_type:
        raise ValueError("widget_type cannot be empty")
    return Element(
        id=generate_element_id(set(existing_ids or ())),
        kind=ElementKind.WIDGET.value,
        widget_type=widget_type,
        settings=dict(settings or {}),
    )
