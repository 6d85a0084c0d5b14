"""Edit orchestrator for Elementor documents.

This module provides the EditOperations class that composes the codec, the
tree editor, pagination and staging into read-modify-write cycles against a
document store:

    fetch -> decode -> mutate -> validate -> encode -> store

Read-only operations stop after decoding. The store offers no conditional
write, so two concurrent edits of the same content id race and the last
write wins.
"""

import json
import logging
from collections import Counter
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..element_tree.codec import DocumentCodec
from ..element_tree.errors import (
    ElementNotFoundError,
    InvalidTargetError,
    ValidationFailure,
)
from ..element_tree.models import (
    Document,
    ElementKind,
    Violation,
    WidgetUpdate,
    generate_element_id,
    new_container,
    new_section,
    new_widget,
)
from ..element_tree.pagination import paginate
from ..element_tree.tree_editor import WIDGET_CONTENT_FIELDS, TreeEditor
from ..staging.staging_store import StagingStore
from ..wordpress_client.api_wrapper import DocumentStore, WordPressClient
from ..wordpress_client.errors import ElementorError
from .models import EditorConfig, EditResult

logger = logging.getLogger(__name__)

# A mutation returns (result data, summary message)
Mutation = Callable[[Document], Tuple[Dict[str, Any], str]]


class EditOperations:
    """Orchestrates read and edit operations on stored Elementor documents.

    Every operation except get_document returns an EditResult. Engine and
    store failures become EditResult(success=False) with the error message
    and exception class name; nothing is raised to the caller.

    Edits are validated before they are stored. An edit that introduces a
    structural violation the document did not already have is refused and
    nothing is written.

    Example:
        >>> ops = EditOperations(WordPressClient())
        >>> result = ops.update_element("42", "a1b2c3d", settings={"title": "Hi"})
        >>> if result.success:
        ...     print(result.message)
    """

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        codec: Optional[DocumentCodec] = None,
        config: Optional[EditorConfig] = None,
        staging: Optional[StagingStore] = None,
    ):
        """Initialize the orchestrator.

        Args:
            store: Fetch/store collaborator (creates a WordPressClient if not provided)
            codec: Document codec (creates one if not provided)
            config: Engine settings (defaults if not provided)
            staging: Staging store (created from config if not provided)
        """
        self.config = config or EditorConfig()
        if store is None:
            store = WordPressClient(timeout=self.config.request_timeout)
        self.store = store
        self.codec = codec or DocumentCodec()
        self.editor = TreeEditor()
        self.staging = staging if staging is not None else StagingStore(
            self.config.staging_dir, self.config.staging_max_age
        )

    # --- Read-only operations ---

    def get_document(self, content_id: str) -> Document:
        """Fetch and decode a document.

        Raises:
            StoreError: If the store cannot provide the document
            DecodeError: If the stored data is absent or malformed
        """
        raw = self.store.fetch_document(content_id)
        document = self.codec.decode(raw)
        logger.debug(f"Loaded document {content_id} ({len(document)} top-level elements)")
        return document

    def get_element(self, content_id: str, element_id: str) -> EditResult:
        """Get one element with its position in the tree."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            element = self.editor.find(doc, element_id)
            parent, index = self.editor.find_parent(doc, element_id)
            return {
                "element": element.to_dict(),
                "parent_id": parent.id if parent else None,
                "index": index,
            }, f"Found {element.kind} {element_id}"

        return self._read("get_element", content_id, read)

    def list_elements(self, content_id: str, include_content: bool = False) -> EditResult:
        """List every element in pre-order with its depth."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            rows = self.editor.flatten(doc, include_content=include_content)
            return {
                "elements": [row.to_dict() for row in rows],
                "count": len(rows),
            }, f"{len(rows)} elements"

        return self._read("list_elements", content_id, read)

    def get_page_structure(
        self, content_id: str, include_settings: bool = False
    ) -> EditResult:
        """Get the nested structure of a document without widget content."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            structure = self.editor.project_structure(doc, include_settings=include_settings)
            return {
                "structure": [node.to_dict() for node in structure],
                "total_elements": len(doc),
            }, f"{len(doc)} top-level elements"

        return self._read("get_page_structure", content_id, read)

    def find_elements_by_type(
        self, content_id: str, widget_type: str, include_settings: bool = False
    ) -> EditResult:
        """Find every widget of one type anywhere in a document."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            matches = self.editor.find_by_widget_type(
                doc, widget_type, include_settings=include_settings
            )
            return {
                "widget_type": widget_type,
                "found_elements": [match.to_dict() for match in matches],
                "total_found": len(matches),
                "include_settings": include_settings,
            }, f"Found {len(matches)} {widget_type} element(s)"

        return self._read("find_elements_by_type", content_id, read)

    def get_document_page(
        self,
        content_id: str,
        page_size: Optional[int] = None,
        page_index: int = 0,
    ) -> EditResult:
        """Get one window of top-level elements.

        Args:
            content_id: Post/page id
            page_size: Elements per window (config default_page_size if None)
            page_index: Zero-based window index
        """
        size = self.config.default_page_size if page_size is None else page_size

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            window = paginate(doc, size, page_index)
            return window.to_dict(), (
                f"Page {page_index + 1} of {window.total_pages} "
                f"({len(window.page)} of {window.total_count} elements)"
            )

        return self._read("get_document_page", content_id, read)

    def validate_document(self, content_id: str) -> EditResult:
        """Report every structural violation of a stored document."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            violations = self.editor.validate(doc)
            if violations:
                message = f"{len(violations)} violation(s) found"
            else:
                message = "Document is valid"
            return {
                "is_valid": not violations,
                "violations": _violations_to_dicts(violations),
            }, message

        return self._read("validate_document", content_id, read)

    def stage_document(self, content_id: str) -> EditResult:
        """Write the full document to a staged file and describe it."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            staged = self._stage(content_id, doc.to_list())
            return staged.to_dict(), f"Staged at {staged.location}"

        return self._read("stage_document", content_id, read)

    def stage_page_structure(
        self, content_id: str, include_settings: bool = False
    ) -> EditResult:
        """Write the structure projection to a staged file and describe it."""

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            structure = self.editor.project_structure(doc, include_settings=include_settings)
            staged = self._stage(
                content_id, [node.to_dict() for node in structure], label="structure"
            )
            return staged.to_dict(), f"Structure staged at {staged.location}"

        return self._read("stage_page_structure", content_id, read)

    def backup_document(
        self, content_id: str, backup_name: Optional[str] = None
    ) -> EditResult:
        """Stage a named copy of the current document.

        The backup name defaults to backup-<UTC ISO timestamp>.
        """
        name = backup_name or f"backup-{datetime.now(timezone.utc).isoformat()}"

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            staged = self._stage(content_id, doc.to_list(), label=name)
            data = staged.to_dict()
            data["backup_name"] = name
            return data, f"Backup '{name}' written to {staged.location}"

        return self._read("backup_document", content_id, read)

    def get_document_inline_or_staged(self, content_id: str) -> EditResult:
        """Return the document inline if small enough, otherwise stage it.

        The encoded size is compared against config.inline_size_limit_bytes.
        """

        def read(doc: Document) -> Tuple[Dict[str, Any], str]:
            size_bytes = len(self.codec.encode(doc).encode("utf-8"))
            limit = self.config.inline_size_limit_bytes
            if size_bytes <= limit:
                return {
                    "inline": True,
                    "size_bytes": size_bytes,
                    "elements": doc.to_list(),
                }, f"Document returned inline ({size_bytes} bytes)"

            logger.info(
                f"Document {content_id} is {size_bytes} bytes (limit {limit}), staging it"
            )
            staged = self._stage(content_id, doc.to_list())
            return {
                "inline": False,
                "size_bytes": size_bytes,
                "staged": staged.to_dict(),
            }, f"Document too large to return inline, staged at {staged.location}"

        return self._read("get_document_inline_or_staged", content_id, read)

    # --- Mutating operations ---

    def replace_document(self, content_id: str, raw: Union[str, bytes, List[Any]]) -> EditResult:
        """Replace the whole stored document.

        The replacement is decoded (and so normalized) before anything is
        written; malformed input is rejected.
        """
        operation = "replace_document"
        try:
            if not isinstance(raw, (str, bytes)):
                raw = json.dumps(raw, ensure_ascii=False)
            document = self.codec.decode(raw)

            violations = self.editor.validate(document)
            if violations:
                raise ValidationFailure(violations)

            self.store.store_document(content_id, self.codec.encode(document))
        except (ElementorError, ValueError) as e:
            return self._failure(operation, content_id, e)

        logger.info(f"Replaced document {content_id} ({len(document)} top-level elements)")
        return EditResult(
            success=True,
            operation=operation,
            content_id=content_id,
            data={"total_elements": len(document)},
            message=f"Replaced document with {len(document)} top-level elements",
        )

    def update_element(
        self,
        content_id: str,
        element_id: str,
        settings: Optional[Dict[str, Any]] = None,
        content: Optional[str] = None,
    ) -> EditResult:
        """Merge settings into an element and/or set a widget's content.

        Content for a widget type without a content field fails with
        InvalidTargetError before anything is changed.
        """

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            if not settings and content is None:
                raise ValueError("Nothing to update: provide settings and/or content")

            element = self.editor.find(doc, element_id)
            if content is not None and (element.widget_type or "") not in WIDGET_CONTENT_FIELDS:
                raise InvalidTargetError(
                    element_id,
                    f"Element {element_id} ({element.widget_type or element.kind}) "
                    f"has no content field",
                )

            if settings:
                self.editor.merge_settings(doc, element_id, settings)
            if content is not None:
                self.editor.set_widget_content(doc, element_id, content)

            return {
                "element_id": element_id,
                "updated_keys": sorted((settings or {}).keys()),
                "content_updated": content is not None,
            }, f"Updated {element.kind} {element_id}"

        return self._edit("update_element", content_id, mutate)

    def update_section_widgets(
        self,
        content_id: str,
        section_id: str,
        updates: Iterable[Union[WidgetUpdate, Dict[str, Any]]],
    ) -> EditResult:
        """Update several widgets inside one section in a single write.

        Each update is a WidgetUpdate or a dict with "widget_id" (or "id"),
        optional "settings" and optional "content". Widgets not found inside
        the section are reported, not fatal.
        """
        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            parsed = [_to_widget_update(update) for update in updates]
            if not parsed:
                raise ValueError("No widget updates given")

            updated, not_found = self.editor.update_widgets(doc, section_id, parsed)
            if not updated:
                raise ElementNotFoundError(not_found[0])

            return {
                "section_id": section_id,
                "updated": updated,
                "not_found": not_found,
            }, f"Updated {len(updated)} widget(s), {len(not_found)} not found"

        return self._edit("update_section_widgets", content_id, mutate)

    def create_section(
        self,
        content_id: str,
        position: Optional[int] = None,
        columns: int = 1,
        settings: Optional[Dict[str, Any]] = None,
    ) -> EditResult:
        """Add a top-level section with evenly sized empty columns."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            if columns < 1:
                raise ValueError(f"columns must be at least 1, got {columns}")

            section = new_section(columns, settings, doc.element_ids())
            index = self.editor.insert(doc, None, position, section)
            return {
                "element_id": section.id,
                "column_ids": [column.id for column in section.children],
                "index": index,
            }, f"Created section {section.id} with {columns} column(s) at {index}"

        return self._edit("create_section", content_id, mutate)

    def create_container(
        self,
        content_id: str,
        position: Optional[int] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> EditResult:
        """Add a top-level flexbox container."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            container = new_container(settings, doc.element_ids())
            index = self.editor.insert(doc, None, position, container)
            return {
                "element_id": container.id,
                "index": index,
            }, f"Created container {container.id} at {index}"

        return self._edit("create_container", content_id, mutate)

    def add_columns(self, content_id: str, section_id: str, count: int = 1) -> EditResult:
        """Append columns to a section and resize its columns evenly."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            added = self.editor.add_columns(doc, section_id, count)
            return {
                "section_id": section_id,
                "column_ids": [column.id for column in added],
            }, f"Added {len(added)} column(s) to section {section_id}"

        return self._edit("add_columns", content_id, mutate)

    def add_widget(
        self,
        content_id: str,
        widget_type: str,
        container_id: str,
        position: Optional[int] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> EditResult:
        """Add a widget to a column or container.

        A section target resolves to its first column.
        """

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            target = self.editor.find(doc, container_id)
            if target.kind == ElementKind.SECTION.value:
                target = self.editor.first_column(doc, container_id)

            widget = new_widget(widget_type, settings, doc.element_ids())
            index = self.editor.insert(doc, target.id, position, widget)
            return {
                "element_id": widget.id,
                "container_id": target.id,
                "index": index,
            }, f"Added {widget_type} widget {widget.id} to {target.id} at {index}"

        return self._edit("add_widget", content_id, mutate)

    def insert_widget_relative(
        self,
        content_id: str,
        widget_type: str,
        target_id: str,
        placement: str = "after",
        settings: Optional[Dict[str, Any]] = None,
    ) -> EditResult:
        """Insert a new widget before, after or inside another element."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            widget = new_widget(widget_type, settings, doc.element_ids())
            parent, index = self.editor.insert_relative(doc, target_id, widget, placement)
            return {
                "element_id": widget.id,
                "parent_id": parent.id if parent else None,
                "index": index,
            }, f"Inserted {widget_type} widget {widget.id} {placement} {target_id}"

        return self._edit("insert_widget_relative", content_id, mutate)

    def insert_element(
        self,
        content_id: str,
        container_id: Optional[str],
        index: Optional[int],
        element_data: Dict[str, Any],
    ) -> EditResult:
        """Insert a caller-supplied element subtree.

        Elements of the subtree without an id, or with an id already used in
        the document, get a freshly generated one.
        """

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            element = self.codec.decode_element(element_data)

            used = doc.element_ids()
            for node in element.iter_subtree():
                if not node.id or node.id in used:
                    node.id = generate_element_id(used)
                used.add(node.id)

            position = self.editor.insert(doc, container_id, index, element)
            return {
                "element_id": element.id,
                "container_id": container_id,
                "index": position,
            }, f"Inserted {element.kind} {element.id} at {position}"

        return self._edit("insert_element", content_id, mutate)

    def duplicate_element(
        self, content_id: str, element_id: str, position: Optional[int] = None
    ) -> EditResult:
        """Copy an element's subtree with fresh ids next to the original."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            clone = self.editor.duplicate(doc, element_id, position)
            return {
                "source_id": element_id,
                "element_id": clone.id,
                "element_ids": [node.id for node in clone.iter_subtree()],
            }, f"Duplicated {element_id} as {clone.id}"

        return self._edit("duplicate_element", content_id, mutate)

    def move_element(
        self,
        content_id: str,
        element_id: str,
        target_container_id: Optional[str],
        index: Optional[int] = None,
    ) -> EditResult:
        """Move an element to another container (None for top level)."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            position = self.editor.move(doc, element_id, target_container_id, index)
            return {
                "element_id": element_id,
                "target_container_id": target_container_id,
                "index": position,
            }, f"Moved {element_id} to {target_container_id or 'top level'} at {position}"

        return self._edit("move_element", content_id, mutate)

    def delete_element(self, content_id: str, element_id: str) -> EditResult:
        """Remove an element and its whole subtree."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            removed = self.editor.remove(doc, element_id)
            removed_count = sum(1 for _ in removed.iter_subtree())
            return {
                "element_id": element_id,
                "removed_count": removed_count,
            }, f"Deleted {removed.kind} {element_id} ({removed_count} element(s))"

        return self._edit("delete_element", content_id, mutate)

    def reorder_children(
        self,
        content_id: str,
        container_id: Optional[str],
        ordered_ids: List[str],
    ) -> EditResult:
        """Reorder a container's children (None for the top level)."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            order = self.editor.reorder(doc, container_id, ordered_ids)
            return {
                "container_id": container_id,
                "order": order,
            }, f"Reordered {len(order)} children of {container_id or 'top level'}"

        return self._edit("reorder_children", content_id, mutate)

    def copy_settings(
        self,
        content_id: str,
        source_id: str,
        target_id: str,
        keys: Optional[List[str]] = None,
    ) -> EditResult:
        """Copy settings (all, or only the given keys) between elements."""

        def mutate(doc: Document) -> Tuple[Dict[str, Any], str]:
            copied = self.editor.copy_settings(doc, source_id, target_id, keys)
            return {
                "source_id": source_id,
                "target_id": target_id,
                "copied_keys": copied,
            }, f"Copied {len(copied)} setting(s) from {source_id} to {target_id}"

        return self._edit("copy_settings", content_id, mutate)

    # --- Helper Methods ---

    def _read(
        self,
        operation: str,
        content_id: str,
        read: Mutation,
    ) -> EditResult:
        """Run a read-only operation against a freshly loaded document."""
        try:
            document = self.get_document(content_id)
            data, message = read(document)
        except (ElementorError, ValueError) as e:
            return self._failure(operation, content_id, e)

        return EditResult(
            success=True,
            operation=operation,
            content_id=content_id,
            data=data,
            message=message,
        )

    def _edit(
        self,
        operation: str,
        content_id: str,
        mutate: Mutation,
    ) -> EditResult:
        """Run one fetch, decode, mutate, validate, encode, store cycle."""
        logger.info(f"{operation} on {content_id}")
        try:
            document = self.get_document(content_id)
            baseline = self.editor.validate(document)

            data, message = mutate(document)

            introduced = _new_violations(baseline, self.editor.validate(document))
            if introduced:
                raise ValidationFailure(introduced)

            self.store.store_document(content_id, self.codec.encode(document))
        except (ElementorError, ValueError) as e:
            return self._failure(operation, content_id, e)

        logger.info(f"  {message}")
        return EditResult(
            success=True,
            operation=operation,
            content_id=content_id,
            data=data,
            message=message,
        )

    def _stage(self, content_id: str, payload: Any, label: Optional[str] = None):
        """Evict expired staged files, then stage a payload."""
        self.staging.evict_expired()
        return self.staging.stage(content_id, payload, label=label)

    def _failure(self, operation: str, content_id: str, error: Exception) -> EditResult:
        """Convert an engine or store failure into a failed EditResult."""
        if isinstance(error, ValidationFailure):
            logger.warning(f"{operation} on {content_id} refused: {error}")
            data = {"violations": _violations_to_dicts(error.violations)}
        else:
            logger.error(f"{operation} on {content_id} failed: {error}")
            data = {}

        return EditResult(
            success=False,
            operation=operation,
            content_id=content_id,
            data=data,
            error=str(error),
            error_type=type(error).__name__,
        )


def _violation_key(violation: Violation) -> Tuple[str, Optional[str]]:
    # Paths shift when elements move, so ids identify violations across edits
    return violation.code, violation.element_id


def _new_violations(before: List[Violation], after: List[Violation]) -> List[Violation]:
    """Violations present after an edit that were not there before it."""
    remaining = Counter(_violation_key(v) for v in before)
    introduced = []
    for violation in after:
        key = _violation_key(violation)
        if remaining[key] > 0:
            remaining[key] -= 1
        else:
            introduced.append(violation)
    return introduced


def _violations_to_dicts(violations: List[Any]) -> List[Dict[str, Any]]:
    return [asdict(v) if isinstance(v, Violation) else {"message": str(v)} for v in violations]


def _to_widget_update(update: Union[WidgetUpdate, Dict[str, Any]]) -> WidgetUpdate:
    """Accept a WidgetUpdate or its dict form."""
    if isinstance(update, WidgetUpdate):
        return update
    if not isinstance(update, dict):
        raise ValueError(f"Widget update must be a mapping, got {type(update).__name__}")

    widget_id = update.get("widget_id") or update.get("id")
    if not widget_id:
        raise ValueError("Widget update is missing 'widget_id'")

    return WidgetUpdate(
        widget_id=str(widget_id),
        settings=dict(update.get("settings") or {}),
        content=update.get("content"),
    )
