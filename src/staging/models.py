"""Data models for staged documents."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class StagedDocument:
    """Descriptor returned instead of an oversized document.

    Attributes:
        location: Absolute path of the staged JSON file
        size_bytes: Size of the staged JSON in bytes
        content_id: Post/page id the document belongs to
        created_at: When the file was written (UTC)
        label: Optional caller-supplied name (e.g. a backup name)
    """

    location: str
    size_bytes: int
    content_id: str
    created_at: datetime
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "location": self.location,
            "size_bytes": self.size_bytes,
            "content_id": self.content_id,
            "created_at": self.created_at.isoformat(),
        }
        if self.label:
            result["label"] = self.label
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StagedDocument":
        return cls(
            location=str(data["location"]),
            size_bytes=int(data["size_bytes"]),
            content_id=str(data["content_id"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            label=data.get("label"),
        )
