"""
Archive-level metadata.

Holds the frontmatter values together with the title, conversation date and
tags written in the document body.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Tuple

from .enums import Completeness


@dataclass(frozen=True)
class ArchiveMetadata:
    """
    Metadata for one archived conversation.
    
    The three counts are the author's declared values. They are never
    recomputed from the parsed lists.
    """
    version: str
    archive_type: str
    created_date: date
    original_platform: str
    attachment_count: int
    artifact_count: int
    completeness: Completeness
    workarounds_count: int
    title: str
    conversation_date: date
    total_file_size: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "archive_type": self.archive_type,
            "created_date": self.created_date.isoformat(),
            "original_platform": self.original_platform,
            "attachment_count": self.attachment_count,
            "artifact_count": self.artifact_count,
            "completeness": str(self.completeness),
            "workarounds_count": self.workarounds_count,
            "total_file_size": self.total_file_size,
            "title": self.title,
            "conversation_date": self.conversation_date.isoformat(),
            "tags": list(self.tags),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveMetadata":
        """Build metadata from a validated tree."""
        return cls(
            version=str(data["version"]),
            archive_type=str(data["archive_type"]),
            created_date=date.fromisoformat(data["created_date"]),
            original_platform=str(data["original_platform"]),
            attachment_count=int(data["attachment_count"]),
            artifact_count=int(data["artifact_count"]),
            completeness=Completeness(data["completeness"]),
            workarounds_count=int(data["workarounds_count"]),
            total_file_size=data.get("total_file_size"),
            title=data["title"],
            conversation_date=date.fromisoformat(data["conversation_date"]),
            tags=tuple(data.get("tags") or ()),
        )
