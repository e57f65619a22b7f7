"""
The structured archive document.

An ArchiveDocument is created once per successful parse and never mutated;
an update is a new parse producing a new document.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .metadata import ArchiveMetadata
from .records import Artifact, Attachment, Workaround
from .summary import ConversationSummary


@dataclass(frozen=True)
class ArchiveDocument:
    """A validated conversation archive."""
    metadata: ArchiveMetadata
    summary: ConversationSummary
    artifacts: Tuple[Artifact, ...] = field(default_factory=tuple)
    attachments: Tuple[Attachment, ...] = field(default_factory=tuple)
    workarounds: Tuple[Workaround, ...] = field(default_factory=tuple)
    
    @property
    def title(self) -> str:
        return self.metadata.title
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the generic tree shape checked by the schema validator."""
        return {
            "metadata": self.metadata.to_dict(),
            "summary": self.summary.to_dict(),
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
            "attachments": [attachment.to_dict() for attachment in self.attachments],
            "workarounds": [workaround.to_dict() for workaround in self.workarounds],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveDocument":
        """Build a document from a tree that already passed schema validation."""
        return cls(
            metadata=ArchiveMetadata.from_dict(data["metadata"]),
            summary=ConversationSummary.from_dict(data["summary"]),
            artifacts=tuple(Artifact.from_dict(a) for a in data.get("artifacts") or ()),
            attachments=tuple(Attachment.from_dict(a) for a in data.get("attachments") or ()),
            workarounds=tuple(Workaround.from_dict(w) for w in data.get("workarounds") or ()),
        )
