"""Staging of documents too large to return inline.

A staged document is written as pretty-printed JSON to a per-process
staging directory, next to a small descriptor file. Callers get the
descriptor (location, size, content id, creation time) instead of the
document itself. Staged files older than the configured maximum age can
be evicted with evict_expired.
"""

import json
import logging
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional

from .errors import StagingError
from .models import StagedDocument

logger = logging.getLogger(__name__)

DEFAULT_STAGING_DIR = "tmp/elementor-data"
DEFAULT_MAX_AGE = timedelta(hours=24)

DESCRIPTOR_SUFFIX = ".meta.json"

_CONTENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class StagingStore:
    """Writes documents to addressable files and evicts old ones.

    Example:
        >>> store = StagingStore("tmp/elementor-data")
        >>> staged = store.stage("42", [{"id": "abc1234", "elType": "section"}])
        >>> print(staged.location)
    """

    def __init__(
        self,
        staging_dir: str = DEFAULT_STAGING_DIR,
        max_age: timedelta = DEFAULT_MAX_AGE,
    ):
        """Initialize the staging store.

        Args:
            staging_dir: Directory staged files are written to (created on
                first use)
            max_age: Staged files older than this are evicted
        """
        self.staging_dir = Path(staging_dir).resolve()
        self.max_age = max_age

    def stage(
        self,
        content_id: str,
        payload: Any,
        label: Optional[str] = None,
    ) -> StagedDocument:
        """Write a JSON payload to a new staged file.

        Args:
            content_id: Post/page id the payload belongs to
            payload: JSON-serializable document (or structure projection)
            label: Optional name recorded in the descriptor

        Returns:
            StagedDocument describing the written file

        Raises:
            ValueError: If content_id contains characters unsafe in a filename
            StagingError: If the directory or files cannot be written
        """
        self._validate_content_id(content_id)
        self._ensure_dir()

        created_at = datetime.now(timezone.utc)
        data_path = self._unique_path(content_id, created_at)
        json_text = json.dumps(payload, indent=2, ensure_ascii=False)

        try:
            data_path.write_text(json_text, encoding="utf-8")
        except OSError as e:
            raise StagingError(str(data_path), "write", str(e)) from e

        staged = StagedDocument(
            location=str(data_path),
            size_bytes=len(json_text.encode("utf-8")),
            content_id=str(content_id),
            created_at=created_at,
            label=label,
        )

        descriptor_path = self._descriptor_path(data_path)
        try:
            descriptor_path.write_text(
                json.dumps(staged.to_dict(), indent=2), encoding="utf-8"
            )
        except OSError as e:
            # A data file without its descriptor is invisible to list_staged
            data_path.unlink(missing_ok=True)
            raise StagingError(str(descriptor_path), "write", str(e)) from e

        logger.info(f"Staged document for {content_id} at {data_path} ({staged.size_bytes} bytes)")
        return staged

    def list_staged(self, content_id: Optional[str] = None) -> List[StagedDocument]:
        """List staged documents, newest first.

        Args:
            content_id: Only list documents of this post/page, if given

        Returns:
            Descriptors of the staged files
        """
        if not self.staging_dir.is_dir():
            return []

        staged = []
        for descriptor_path in self.staging_dir.glob(f"page-*{DESCRIPTOR_SUFFIX}"):
            descriptor = self._read_descriptor(descriptor_path)
            if descriptor is None:
                continue
            if content_id is not None and descriptor.content_id != str(content_id):
                continue
            staged.append(descriptor)

        staged.sort(key=lambda d: d.created_at, reverse=True)
        return staged

    def evict_expired(self, now: Optional[datetime] = None) -> List[str]:
        """Delete staged files older than the maximum age.

        The age of a file comes from its descriptor, or from its
        modification time when the descriptor is missing or unreadable.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Locations of the evicted documents

        Raises:
            StagingError: If an expired file cannot be deleted
        """
        if not self.staging_dir.is_dir():
            return []

        now = now or datetime.now(timezone.utc)
        cutoff = now - self.max_age
        evicted = []

        for data_path in sorted(self.staging_dir.glob("page-*.json")):
            if data_path.name.endswith(DESCRIPTOR_SUFFIX):
                continue

            descriptor_path = self._descriptor_path(data_path)
            descriptor = self._read_descriptor(descriptor_path)
            if descriptor is not None:
                created_at = descriptor.created_at
            else:
                created_at = datetime.fromtimestamp(data_path.stat().st_mtime, timezone.utc)

            if created_at >= cutoff:
                continue

            for path in (data_path, descriptor_path):
                try:
                    path.unlink()
                except FileNotFoundError:
                    pass
                except OSError as e:
                    raise StagingError(str(path), "delete", str(e)) from e

            evicted.append(str(data_path))

        if evicted:
            logger.info(f"Evicted {len(evicted)} expired staged document(s)")
        return evicted

    # --- Helper Methods ---

    def _validate_content_id(self, content_id: str) -> None:
        """Ensure a content id is safe to embed in a filename."""
        if not content_id or not _CONTENT_ID_PATTERN.match(str(content_id)):
            raise ValueError(
                f"Invalid content_id '{content_id}'. "
                f"Only letters, digits, '-' and '_' are allowed."
            )

    def _ensure_dir(self) -> None:
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StagingError(str(self.staging_dir), "create_directory", str(e)) from e

    def _unique_path(self, content_id: str, created_at: datetime) -> Path:
        """Build a file path keyed by content id and timestamp."""
        timestamp = created_at.strftime("%Y%m%dT%H%M%S%fZ")
        path = self.staging_dir / f"page-{content_id}-{timestamp}.json"
        counter = 1
        while path.exists():
            path = self.staging_dir / f"page-{content_id}-{timestamp}-{counter}.json"
            counter += 1
        return path

    def _descriptor_path(self, data_path: Path) -> Path:
        return data_path.with_name(data_path.name[: -len(".json")] + DESCRIPTOR_SUFFIX)

    def _read_descriptor(self, descriptor_path: Path) -> Optional[StagedDocument]:
        """Load a descriptor, or None if it is missing or corrupted."""
        try:
            data = json.loads(descriptor_path.read_text(encoding="utf-8"))
            return StagedDocument.from_dict(data)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable staging descriptor {descriptor_path}: {e}")
            return None
