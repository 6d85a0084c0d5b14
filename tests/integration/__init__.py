"""Integration tests for the editing engine.

These tests run complete orchestrated edits (fetch, decode, mutate,
encode, store) against an in-memory store and a temporary staging
directory. No network access is needed.

    pytest tests/integration -m integration
"""
