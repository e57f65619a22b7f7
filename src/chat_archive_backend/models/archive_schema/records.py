"""
Wrapped-block records: artifacts, attachments and workarounds.

Artifacts and attachments are also what the persistence collaborator stores
as separate records keyed by the owning document.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Artifact:
    """
    An output created during the conversation.
    
    ``content`` is byte-exact; leading revision comments are kept apart in
    ``evolution_notes``.
    """
    type: str
    title: str
    content: str
    language: Optional[str] = None
    version: Optional[str] = None
    iterations: Optional[str] = None
    evolution_notes: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "language": self.language,
            "version": self.version,
            "iterations": self.iterations,
            "evolution_notes": self.evolution_notes,
            "content": self.content,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Artifact":
        return cls(
            type=data["type"],
            title=data["title"],
            content=data.get("content", ""),
            language=data.get("language"),
            version=data.get("version"),
            iterations=data.get("iterations"),
            evolution_notes=data.get("evolution_notes"),
        )


@dataclass(frozen=True)
class Attachment:
    """An input file supplied to the conversation, possibly summarized."""
    filename: str
    content: str
    is_summarized: bool = False
    original_size: Optional[str] = None
    summarization_level: Optional[str] = None
    content_preserved: Optional[str] = None
    processing_limitation: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "content": self.content,
            "is_summarized": self.is_summarized,
            "original_size": self.original_size,
            "summarization_level": self.summarization_level,
            "content_preserved": self.content_preserved,
            "processing_limitation": self.processing_limitation,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attachment":
        return cls(
            filename=data["filename"],
            content=data.get("content", ""),
            is_summarized=bool(data.get("is_summarized", False)),
            original_size=data.get("original_size"),
            summarization_level=data.get("summarization_level"),
            content_preserved=data.get("content_preserved"),
            processing_limitation=data.get("processing_limitation"),
        )


@dataclass(frozen=True)
class Workaround:
    """A lossy transformation applied while archiving an attachment."""
    filename: str
    workaround: str
    reason: Optional[str] = None
    preserved: Optional[str] = None
    lost: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "workaround": self.workaround,
            "reason": self.reason,
            "preserved": self.preserved,
            "lost": self.lost,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workaround":
        return cls(
            filename=data["filename"],
            workaround=data.get("workaround", ""),
            reason=data.get("reason"),
            preserved=data.get("preserved"),
            lost=data.get("lost"),
        )
