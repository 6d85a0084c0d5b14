"""Test fixtures for Elementor document tests.

This module provides sample Elementor documents in the shape WordPress
stores them, plus builders for larger generated documents.
"""

from .elementor_fixtures import (
    ALL_SAMPLE_IDS,
    SAMPLE_DOCUMENT,
    enveloped_raw,
    numbered_sections,
    sample_raw,
)

__all__ = [
    "ALL_SAMPLE_IDS",
    "SAMPLE_DOCUMENT",
    "enveloped_raw",
    "numbered_sections",
    "sample_raw",
]
