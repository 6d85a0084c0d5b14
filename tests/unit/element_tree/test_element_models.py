"""Unit tests for element_tree.models module."""

import pytest

from src.element_tree.models import (
    ELEMENT_ID_ALPHABET,
    ELEMENT_ID_LENGTH,
    Document,
    Element,
    ElementKind,
    FlatElement,
    StructureNode,
    Violation,
    generate_element_id,
    is_container_kind,
    new_column,
    new_container,
    new_section,
    new_widget,
    requires_widget_type,
)


class TestKindPredicates:
    """Test cases for is_container_kind and requires_widget_type."""

    @pytest.mark.parametrize("kind", ["section", "column", "container"])
    def test_container_kinds(self, kind):
        """Sections, columns and containers hold children."""
        assert is_container_kind(kind) is True
        assert requires_widget_type(kind) is False

    def test_widget_kind(self):
        """Widgets hold no children and need a widget type."""
        assert is_container_kind("widget") is False
        assert requires_widget_type("widget") is True

    def test_unknown_kind(self):
        """Unknown and missing kinds are neither."""
        assert is_container_kind("banner") is False
        assert is_container_kind(None) is False
        assert requires_widget_type(None) is False


class TestGenerateElementId:
    """Test cases for generate_element_id."""

    def test_id_format(self):
        """Ids are 7 lowercase hex characters."""
        element_id = generate_element_id()
        assert len(element_id) == ELEMENT_ID_LENGTH
        assert all(char in ELEMENT_ID_ALPHABET for char in element_id)

    def test_avoids_existing_ids(self, monkeypatch):
        """A generated id never collides with an existing one."""
        candidates = iter("aaaaaaa" + "bbbbbbb")
        monkeypatch.setattr(
            "src.element_tree.models.secrets.choice", lambda alphabet: next(candidates)
        )
        assert generate_element_id({"aaaaaaa"}) == "bbbbbbb"


class TestElement:
    """Test cases for the Element dataclass."""

    def test_kind_properties(self):
        """element_kind, is_widget and is_container follow the raw kind."""
        widget = Element(id="abc1234", kind="widget", widget_type="heading")
        section = Element(id="abc1235", kind="section")
        odd = Element(id="abc1236", kind="banner")

        assert widget.element_kind == ElementKind.WIDGET
        assert widget.is_widget and not widget.is_container
        assert section.is_container and not section.is_widget
        assert odd.element_kind is None

    def test_iter_subtree_is_pre_order(self):
        """iter_subtree yields the element before its descendants."""
        leaf = Element(id="c", kind="widget", widget_type="html")
        column = Element(id="b", kind="column", children=[leaf])
        section = Element(id="a", kind="section", children=[column])

        assert [e.id for e in section.iter_subtree()] == ["a", "b", "c"]

    def test_to_dict_preserves_extra_keys(self):
        """Unknown keys are written back without overriding known ones."""
        element = Element(
            id="abc1234",
            kind="widget",
            widget_type="heading",
            settings={"title": "Hi"},
            extra={"_custom": 1, "id": "ignored"},
        )
        data = element.to_dict()

        assert data["id"] == "abc1234"
        assert data["elType"] == "widget"
        assert data["widgetType"] == "heading"
        assert data["elements"] == []
        assert data["_custom"] == 1


class TestDocument:
    """Test cases for the Document dataclass."""

    def test_element_ids_covers_nested_elements(self):
        """element_ids collects ids at every depth, skipping empty ones."""
        doc = Document(elements=[
            Element(id="a", kind="section", children=[Element(id="b", kind="column")]),
            Element(id="", kind="container"),
        ])

        assert doc.element_ids() == {"a", "b"}
        assert len(doc) == 2


class TestProjections:
    """Test cases for Violation, StructureNode and FlatElement."""

    def test_violation_str(self):
        violation = Violation("root[0]", "missing_id", "Missing id")
        assert str(violation) == "Missing id at root[0]"

    def test_structure_node_omits_empty_parts(self):
        """Settings and children keys appear only when present."""
        node = StructureNode(id="a", kind="section", widget_type=None, depth=0)
        assert node.to_dict() == {"id": "a", "type": "section", "widgetType": None, "level": 0}

    def test_flat_element_to_dict(self):
        row = FlatElement(
            id="w", kind="widget", widget_type="html", depth=2, content_preview="<p>"
        )
        assert row.to_dict() == {
            "id": "w", "type": "widget", "level": 2,
            "widgetType": "html", "contentPreview": "<p>",
        }


class TestFactories:
    """Test cases for the element factory functions."""

    def test_new_section_sizes_columns_evenly(self):
        """A three-column section gets columns of floor(100/3)%."""
        section = new_section(columns=3, settings={"gap": "wide"})

        assert section.kind == "section"
        assert section.settings == {"gap": "wide"}
        assert len(section.children) == 3
        assert all(c.settings["_column_size"] == 33 for c in section.children)
        ids = [section.id] + [c.id for c in section.children]
        assert len(set(ids)) == 4

    def test_new_section_avoids_existing_ids(self):
        existing = {"abc1234"}
        section = new_section(columns=2, existing_ids=existing)
        assert existing.isdisjoint(e.id for e in section.iter_subtree())

    def test_new_column_defaults(self):
        column = new_column()
        assert column.settings == {"_column_size": 50, "_inline_size": None}

    def test_new_container(self):
        container = new_container({"flex_direction": "column"})
        assert container.kind == "container"
        assert container.children == []

    def test_new_widget(self):
        widget = new_widget("heading", {"title": "Hello"})
        assert widget.kind == "widget"
        assert widget.widget_type == "heading"
        assert widget.settings == {"title": "Hello"}

    def test_new_widget_requires_type(self):
        with pytest.raises(ValueError, match="widget_type cannot be empty"):
            new_widget("")
