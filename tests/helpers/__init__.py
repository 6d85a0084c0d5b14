"""Test helper modules.

- in_memory_store: dict-backed document store for orchestrator tests
"""

from .in_memory_store import InMemoryStore

__all__ = ['InMemoryStore']
