"""Unit tests for element_tree.pagination module."""

import json

import pytest

from src.element_tree.codec import DocumentCodec
from src.element_tree.errors import OutOfRangeError
from src.element_tree.models import Document
from src.element_tree.pagination import paginate
from tests.fixtures.elementor_fixtures import numbered_sections


@pytest.fixture
def twelve():
    """Document with 12 top-level sections."""
    codec = DocumentCodec()
    return codec.decode(json.dumps(numbered_sections(12)))


class TestPaginate:
    """Test cases for paginate."""

    def test_first_page(self, twelve):
        page = paginate(twelve, 5, 0)

        assert [e.id for e in page.page] == [f"s{i:06d}" for i in range(5)]
        assert page.total_pages == 3
        assert page.total_count == 12
        assert page.has_next is True
        assert page.has_prev is False
        assert (page.start_index, page.end_index) == (0, 4)

    def test_last_page_is_partial(self, twelve):
        """12 elements in pages of 5 leave 2 on the last page."""
        page = paginate(twelve, 5, 2)

        assert [e.id for e in page.page] == ["s000010", "s000011"]
        assert page.has_next is False
        assert page.has_prev is True
        assert (page.start_index, page.end_index) == (10, 11)

    def test_index_past_last_page(self, twelve):
        with pytest.raises(OutOfRangeError) as exc_info:
            paginate(twelve, 5, 3)
        assert exc_info.value.field == "page_index"
        assert exc_info.value.limit == 3

    def test_negative_index(self, twelve):
        with pytest.raises(OutOfRangeError):
            paginate(twelve, 5, -1)

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_page_size_below_one(self, twelve, page_size):
        with pytest.raises(OutOfRangeError) as exc_info:
            paginate(twelve, page_size, 0)
        assert exc_info.value.field == "page_size"

    def test_pages_cover_document_exactly(self, twelve):
        """Concatenating every page gives the top-level sequence back."""
        first = paginate(twelve, 5, 0)
        collected = []
        for index in range(first.total_pages):
            collected.extend(paginate(twelve, 5, index).page)
        assert collected == twelve.elements

    def test_empty_document_has_no_pages(self):
        with pytest.raises(OutOfRangeError):
            paginate(Document(), 5, 0)

    def test_to_dict(self, twelve):
        data = paginate(twelve, 5, 1).to_dict()
        assert data["page_index"] == 1
        assert data["total_pages"] == 3
        assert [e["id"] for e in data["page"]] == [f"s{i:06d}" for i in range(5, 10)]
