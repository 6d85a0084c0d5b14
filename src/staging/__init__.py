"""Staging of oversized Elementor documents.

Writes full documents to addressable files and hands back a small
descriptor instead of the content. Old staged files are evicted by age.
"""

from .errors import StagingError
from .models import StagedDocument
from .staging_store import StagingStore, DEFAULT_MAX_AGE, DEFAULT_STAGING_DIR

__all__ = [
    "StagingStore",
    "StagedDocument",
    "StagingError",
    "DEFAULT_MAX_AGE",
    "DEFAULT_STAGING_DIR",
]
