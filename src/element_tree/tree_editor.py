"""Tree editor for Elementor documents.

This module provides the recursive search and mutation operations over an
Elementor element tree. Operations target elements by id. Lookups always
resolve to the first pre-order match, so documents that (wrongly) contain
duplicate ids still behave deterministically.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .errors import ElementNotFoundError, InvalidTargetError
from .models import (
    KNOWN_KINDS,
    Document,
    Element,
    ElementKind,
    ElementMatch,
    FlatElement,
    StructureNode,
    Violation,
    WidgetUpdate,
    generate_element_id,
    new_column,
)

logger = logging.getLogger(__name__)

# Settings field holding the editable content of each widget type. Widget
# types missing here have no single content field.
WIDGET_CONTENT_FIELDS = {
    "html": "html",
    "text-editor": "editor",
    "heading": "title",
}

PREVIEW_LENGTH = 100

PLACEMENTS = ("before", "after", "inside")

# (parent element or None for top level, sibling list, index in siblings)
Location = Tuple[Optional[Element], List[Element], int]


class TreeEditor:
    """Search and mutation operations for Elementor documents.

    The editor is stateless. Every method mutates the Document it is given
    in place and raises a typed error when its target cannot be resolved.
    Failing operations never leave a partial structural change behind.
    """

    # --- Lookup ---

    def find(self, doc: Document, element_id: str) -> Element:
        """Find an element anywhere in the document.

        Args:
            doc: Document to search
            element_id: Id to look for

        Returns:
            The first element in pre-order with a matching id

        Raises:
            ElementNotFoundError: If no element has this id
        """
        _, siblings, index = self._locate(doc, element_id)
        return siblings[index]

    def find_parent(
        self, doc: Document, element_id: str
    ) -> Tuple[Optional[Element], int]:
        """Find the container holding an element and its position there.

        Returns:
            Tuple of (parent element, or None for top level; index)

        Raises:
            ElementNotFoundError: If no element has this id
        """
        parent, _, index = self._locate(doc, element_id)
        return parent, index

    def find_within(self, root: Element, element_id: str) -> Optional[Element]:
        """Find a descendant of `root` (or root itself) by id."""
        for element in root.iter_subtree():
            if element.id == element_id:
                return element
        return None

    def widget_content(self, element: Element) -> Optional[Any]:
        """Read the content field of a widget, if its type has one."""
        field_name = WIDGET_CONTENT_FIELDS.get(element.widget_type or "")
        if field_name is None:
            return None
        return element.settings.get(field_name)

    # --- Structural mutations ---

    def insert(
        self,
        doc: Document,
        container_id: Optional[str],
        index: Optional[int],
        element: Element,
    ) -> int:
        """Insert an element into a container or the top-level sequence.

        A missing, negative or too large index appends instead of failing.

        Args:
            doc: Document to modify
            container_id: Id of the container, or None for top level
            index: Desired position among the container's children
            element: Element to insert

        Returns:
            The index the element ended up at

        Raises:
            ElementNotFoundError: If the container does not exist
            InvalidTargetError: If the container is a widget
        """
        siblings = self._children_of(doc, container_id)
        position = self._insert_into(siblings, index, element)
        logger.debug(
            f"Inserted {element.kind} {element.id} into "
            f"{container_id or 'top level'} at {position}"
        )
        return position

    def insert_relative(
        self,
        doc: Document,
        target_id: str,
        element: Element,
        placement: str = "after",
    ) -> Tuple[Optional[Element], int]:
        """Insert an element before, after or inside another element.

        Args:
            doc: Document to modify
            target_id: Id of the anchor element
            element: Element to insert
            placement: "before", "after" or "inside"

        Returns:
            Tuple of (container the element was placed in, index there)

        Raises:
            ValueError: If placement is not a known value
            ElementNotFoundError: If the anchor does not exist
            InvalidTargetError: If placing inside a widget
        """
        if placement not in PLACEMENTS:
            raise ValueError(
                f"Invalid placement '{placement}'. Expected one of: {', '.join(PLACEMENTS)}"
            )

        parent, siblings, index = self._locate(doc, target_id)
        target = siblings[index]

        if placement == "inside":
            self._require_container(target)
            target.children.append(element)
            return target, len(target.children) - 1

        position = index if placement == "before" else index + 1
        siblings.insert(position, element)
        return parent, position

    def remove(self, doc: Document, element_id: str) -> Element:
        """Remove an element and its whole subtree.

        Returns:
            The removed element

        Raises:
            ElementNotFoundError: If no element has this id
        """
        _, siblings, index = self._locate(doc, element_id)
        removed = siblings.pop(index)
        logger.debug(f"Removed {removed.kind} {element_id} from position {index}")
        return removed

    def move(
        self,
        doc: Document,
        element_id: str,
        target_container_id: Optional[str],
        index: Optional[int] = None,
    ) -> int:
        """Move an element to another container (or the top level).

        The target is resolved before anything is detached, so a failing
        move leaves the document untouched.

        Returns:
            The index the element ended up at in the target container

        Raises:
            ElementNotFoundError: If the element or the target does not exist
            InvalidTargetError: If the target is a widget or lies inside the
                element being moved
        """
        _, source_siblings, source_index = self._locate(doc, element_id)
        element = source_siblings[source_index]

        if target_container_id is None:
            target_siblings = doc.elements
        else:
            target = self.find(doc, target_container_id)
            self._require_container(target)
            if any(node is target for node in element.iter_subtree()):
                raise InvalidTargetError(
                    target_container_id,
                    f"Cannot move element {element_id} into its own subtree",
                )
            target_siblings = target.children

        source_siblings.pop(source_index)
        position = self._insert_into(target_siblings, index, element)
        logger.debug(
            f"Moved {element_id} to {target_container_id or 'top level'} at {position}"
        )
        return position

    def duplicate(
        self,
        doc: Document,
        element_id: str,
        position: Optional[int] = None,
    ) -> Element:
        """Deep-copy an element's subtree with fresh ids.

        The copy lands right after the source in the same container, unless
        an explicit position is given (clamped like insert).

        Returns:
            The inserted copy

        Raises:
            ElementNotFoundError: If no element has this id
        """
        _, siblings, index = self._locate(doc, element_id)
        source = siblings[index]

        clone = copy.deepcopy(source)
        self._assign_fresh_ids(clone, doc.element_ids())

        if position is None:
            siblings.insert(index + 1, clone)
        else:
            self._insert_into(siblings, position, clone)

        logger.debug(f"Duplicated {element_id} as {clone.id}")
        return clone

    def reorder(
        self,
        doc: Document,
        container_id: Optional[str],
        ordered_ids: Iterable[str],
    ) -> List[str]:
        """Rearrange a container's direct children.

        Children named in `ordered_ids` come first, in that order. Children
        not named follow in their original relative order. Names that are
        not children are skipped.

        Returns:
            The resulting order of child ids

        Raises:
            ElementNotFoundError: If the container does not exist
        """
        siblings = self._children_of(doc, container_id)
        remaining = list(siblings)
        reordered: List[Element] = []

        for wanted in ordered_ids:
            for i, child in enumerate(remaining):
                if child.id == wanted:
                    reordered.append(remaining.pop(i))
                    break
            else:
                logger.debug(f"Skipping unknown child id in reorder: {wanted}")

        reordered.extend(remaining)
        siblings[:] = reordered
        return [child.id for child in siblings]

    def add_columns(
        self, doc: Document, section_id: str, count: int = 1
    ) -> List[Element]:
        """Append empty columns to a section and resize all its columns evenly.

        Returns:
            The newly created columns

        Raises:
            ValueError: If count is less than 1
            ElementNotFoundError: If the section does not exist
            InvalidTargetError: If the element is not a section
        """
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")

        section = self.find(doc, section_id)
        if section.kind != ElementKind.SECTION.value:
            raise InvalidTargetError(
                section_id, f"Element {section_id} is a {section.kind or 'element'}, not a section"
            )

        total = len(section.children) + count
        column_size = 100 // total

        for child in section.children:
            if child.kind == ElementKind.COLUMN.value:
                child.settings = {**child.settings, "_column_size": column_size}

        used = doc.element_ids()
        added = []
        for _ in range(count):
            column = new_column(column_size, used)
            used.add(column.id)
            section.children.append(column)
            added.append(column)

        return added

    def first_column(self, doc: Document, section_id: str) -> Element:
        """Resolve the first child of a section, used as a drop target.

        Raises:
            ElementNotFoundError: If the section does not exist
            InvalidTargetError: If the section has no children
        """
        section = self.find(doc, section_id)
        if not section.children:
            raise InvalidTargetError(section_id, f"Section {section_id} has no columns")
        return section.children[0]

    # --- Settings mutations ---

    def merge_settings(
        self, doc: Document, element_id: str, partial_settings: Dict[str, Any]
    ) -> Element:
        """Shallow-merge settings into an element.

        Raises:
            ElementNotFoundError: If no element has this id
        """
        element = self.find(doc, element_id)
        element.settings = {**element.settings, **partial_settings}
        return element

    def set_widget_content(self, doc: Document, element_id: str, content: str) -> bool:
        """Write content into the settings field of a widget's type.

        Widget types without a known content field are left untouched.

        Returns:
            True if a content field was written

        Raises:
            ElementNotFoundError: If no element has this id
        """
        element = self.find(doc, element_id)
        field_name = WIDGET_CONTENT_FIELDS.get(element.widget_type or "")
        if field_name is None:
            logger.debug(
                f"No content field for widget type '{element.widget_type}' ({element_id})"
            )
            return False

        element.settings = {**element.settings, field_name: content}
        return True

    def copy_settings(
        self,
        doc: Document,
        source_id: str,
        target_id: str,
        keys: Optional[Iterable[str]] = None,
    ) -> List[str]:
        """Copy settings from one element to another.

        With no keys the target's settings are replaced wholesale by a copy
        of the source's. With keys only those present on the source are
        copied, overwriting the target's values.

        Returns:
            The keys that were copied

        Raises:
            ElementNotFoundError: If either element does not exist
        """
        source = self.find(doc, source_id)
        target = self.find(doc, target_id)

        keys = list(keys or [])
        if not keys:
            target.settings = copy.deepcopy(source.settings)
            return list(target.settings.keys())

        copied = [key for key in keys if key in source.settings]
        updated = dict(target.settings)
        for key in copied:
            updated[key] = copy.deepcopy(source.settings[key])
        target.settings = updated
        return copied

    def update_widgets(
        self,
        doc: Document,
        section_id: str,
        updates: Iterable[WidgetUpdate],
    ) -> Tuple[List[str], List[str]]:
        """Apply settings and content updates to widgets inside a section.

        Returns:
            Tuple of (updated widget ids, widget ids not found in the section)

        Raises:
            ElementNotFoundError: If the section does not exist
        """
        section = self.find(doc, section_id)
        updated: List[str] = []
        not_found: List[str] = []

        for update in updates:
            widget = self.find_within(section, update.widget_id)
            if widget is None:
                not_found.append(update.widget_id)
                continue
            if update.settings:
                widget.settings = {**widget.settings, **update.settings}
            if update.content is not None:
                field_name = WIDGET_CONTENT_FIELDS.get(widget.widget_type or "")
                if field_name:
                    widget.settings = {**widget.settings, field_name: update.content}
            updated.append(update.widget_id)

        if not_found:
            logger.warning(
                f"{len(not_found)} widget(s) not found in section {section_id}: "
                f"{', '.join(not_found)}"
            )
        return updated, not_found

    # --- Read-only projections ---

    def validate(self, doc: Document) -> List[Violation]:
        """Check every element of the document for structural problems.

        Never stops at the first problem: the whole tree is walked and all
        violations are returned.

        Returns:
            List of violations; empty means the document is valid
        """
        violations: List[Violation] = []
        seen: Set[str] = set()

        for index, element in enumerate(doc.elements):
            self._validate_element(element, f"root[{index}]", seen, violations)

        return violations

    def project_structure(
        self, doc: Document, include_settings: bool = False
    ) -> List[StructureNode]:
        """Build a display tree mirroring the document shape."""

        def project(element: Element, depth: int) -> StructureNode:
            return StructureNode(
                id=element.id,
                kind=element.kind,
                widget_type=element.widget_type,
                depth=depth,
                settings=dict(element.settings) if include_settings else None,
                children=[project(child, depth + 1) for child in element.children],
            )

        return [project(element, 0) for element in doc.elements]

    def flatten(self, doc: Document, include_content: bool = False) -> List[FlatElement]:
        """List every element in pre-order with its depth.

        With include_content, widgets with a known content field get a
        preview of that content.
        """
        result: List[FlatElement] = []

        def collect(element: Element, depth: int):
            preview = None
            if include_content:
                content = self.widget_content(element)
                if isinstance(content, str) and content:
                    preview = content[:PREVIEW_LENGTH]
                    if len(content) > PREVIEW_LENGTH:
                        preview += "..."
            result.append(
                FlatElement(
                    id=element.id,
                    kind=element.kind,
                    widget_type=element.widget_type,
                    depth=depth,
                    content_preview=preview,
                )
            )
            for child in element.children:
                collect(child, depth + 1)

        for element in doc.elements:
            collect(element, 0)

        return result

    def find_by_widget_type(
        self, doc: Document, widget_type: str, include_settings: bool = False
    ) -> List[ElementMatch]:
        """Find every element with the given widget type, in pre-order.

        Args:
            doc: Document to search
            widget_type: Widget type to match exactly (e.g. "heading")
            include_settings: Attach a copy of each match's settings

        Returns:
            Matches in document order; empty if none
        """
        matches: List[ElementMatch] = []

        def collect(siblings: List[Element], parent_path: Optional[str]):
            for index, element in enumerate(siblings):
                if parent_path is None:
                    path = f"root[{index}]"
                else:
                    path = f"{parent_path}.children[{index}]"
                if element.widget_type == widget_type:
                    matches.append(
                        ElementMatch(
                            id=element.id,
                            widget_type=widget_type,
                            path=path,
                            settings=copy.deepcopy(element.settings)
                            if include_settings else None,
                        )
                    )
                collect(element.children, path)

        collect(doc.elements, None)
        logger.debug(f"Found {len(matches)} {widget_type} element(s)")
        return matches

    # --- Helper Methods ---

    def _locate(self, doc: Document, element_id: str) -> Location:
        """Find the first pre-order match and where it sits."""

        def search(
            parent: Optional[Element], siblings: List[Element]
        ) -> Optional[Location]:
            for index, element in enumerate(siblings):
                if element.id == element_id:
                    return parent, siblings, index
                found = search(element, element.children)
                if found:
                    return found
            return None

        location = search(None, doc.elements) if element_id else None
        if location is None:
            raise ElementNotFoundError(element_id)
        return location

    def _children_of(self, doc: Document, container_id: Optional[str]) -> List[Element]:
        """Get the child list of a container, or the top-level sequence."""
        if container_id is None:
            return doc.elements
        container = self.find(doc, container_id)
        self._require_container(container)
        return container.children

    def _require_container(self, element: Element) -> None:
        """Refuse to use a widget as a container."""
        if element.is_widget:
            raise InvalidTargetError(
                element.id, f"Widget {element.id} cannot contain other elements"
            )

    def _insert_into(
        self, siblings: List[Element], index: Optional[int], element: Element
    ) -> int:
        """Insert at index, appending when the index is missing or out of bounds."""
        if index is None or index < 0 or index >= len(siblings):
            siblings.append(element)
            return len(siblings) - 1
        siblings.insert(index, element)
        return index

    def _assign_fresh_ids(self, root: Element, used: Set[str]) -> None:
        """Give root and all its descendants ids not present in `used`."""
        for element in root.iter_subtree():
            element.id = generate_element_id(used)
            used.add(element.id)

    def _validate_element(
        self,
        element: Element,
        path: str,
        seen: Set[str],
        violations: List[Violation],
    ) -> None:
        """Record the violations of one element, then recurse into children."""
        element_id = element.id or None

        if not element.id:
            violations.append(Violation(path, "missing_id", "Missing id"))
        elif element.id in seen:
            violations.append(
                Violation(path, "duplicate_id", f"Duplicate id {element.id}", element_id)
            )
        else:
            seen.add(element.id)

        if not element.kind:
            violations.append(Violation(path, "missing_kind", "Missing elType", element_id))
        elif element.kind not in KNOWN_KINDS:
            violations.append(
                Violation(path, "unknown_kind", f"Unknown elType '{element.kind}'", element_id)
            )

        if element.is_widget and not element.widget_type:
            violations.append(
                Violation(path, "missing_widget_type", "Widget without widgetType", element_id)
            )
        if element.kind and not element.is_widget and element.widget_type:
            violations.append(
                Violation(
                    path,
                    "unexpected_widget_type",
                    f"{element.kind} carries widgetType '{element.widget_type}'",
                    element_id,
                )
            )
        if element.is_widget and element.children:
            violations.append(
                Violation(path, "widget_children", "Widget with child elements", element_id)
            )

        for index, child in enumerate(element.children):
            self._validate_element(child, f"{path}.children[{index}]", seen, violations)
