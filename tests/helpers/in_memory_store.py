"""In-memory document store for orchestrator tests.

Implements the fetch_document/store_document contract without any network
access. Every write is recorded so tests can assert on what was stored.
"""

from typing import Dict, List, Tuple

from src.wordpress_client.errors import ContentNotFoundError


class InMemoryStore:
    """Dict-backed stand-in for WordPressClient.

    Example:
        >>> store = InMemoryStore({"42": "[]"})
        >>> store.fetch_document("42")
        '[]'
    """

    def __init__(self, documents: Dict[str, str] = None):
        self.documents: Dict[str, str] = dict(documents or {})
        self.writes: List[Tuple[str, str]] = []
        self.fetch_count = 0

    def fetch_document(self, content_id: str) -> str:
        self.fetch_count += 1
        if content_id not in self.documents:
            raise ContentNotFoundError(content_id)
        return self.documents[content_id]

    def store_document(self, content_id: str, raw: str) -> None:
        if content_id not in self.documents:
            raise ContentNotFoundError(content_id)
        self.documents[content_id] = raw
        self.writes.append((content_id, raw))
