"""
Narrative summary sections of an archive.

Initial Query, Key Insights and Follow-up Explorations share the same shape
(a description plus free-text artifact and attachment references); Key
Insights adds a list of key points. References are a flat list of links.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .enums import ReferenceType


def _strings(values: Any) -> Tuple[str, ...]:
    return tuple(values or ())


@dataclass(frozen=True)
class QuerySection:
    """The Initial Query section."""
    description: str = ""
    artifacts_created: Tuple[str, ...] = field(default_factory=tuple)
    attachments_referenced: Tuple[str, ...] = field(default_factory=tuple)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "artifacts_created": list(self.artifacts_created),
            "attachments_referenced": list(self.attachments_referenced),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuerySection":
        return cls(
            description=data.get("description", ""),
            artifacts_created=_strings(data.get("artifacts_created")),
            attachments_referenced=_strings(data.get("attachments_referenced")),
        )


@dataclass(frozen=True)
class FollowUpSection(QuerySection):
    """The Follow-up Explorations section."""


@dataclass(frozen=True)
class InsightsSection:
    """The Key Insights section."""
    description: str = ""
    key_points: Tuple[str, ...] = field(default_factory=tuple)
    artifacts_created: Tuple[str, ...] = field(default_factory=tuple)
    attachments_referenced: Tuple[str, ...] = field(default_factory=tuple)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "key_points": list(self.key_points),
            "artifacts_created": list(self.artifacts_created),
            "attachments_referenced": list(self.attachments_referenced),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InsightsSection":
        return cls(
            description=data.get("description", ""),
            key_points=_strings(data.get("key_points")),
            artifacts_created=_strings(data.get("artifacts_created")),
            attachments_referenced=_strings(data.get("attachments_referenced")),
        )


@dataclass(frozen=True)
class Reference:
    """A reference entry. The type is derived from the presence of a URL."""
    description: str
    url: Optional[str] = None
    
    @property
    def reference_type(self) -> ReferenceType:
        return ReferenceType.EXTERNAL_LINK if self.url else ReferenceType.DESCRIPTIVE
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "url": self.url,
            "type": str(self.reference_type),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reference":
        return cls(description=data.get("description", ""), url=data.get("url"))


@dataclass(frozen=True)
class ConversationSummary:
    """The four narrative sections of an archive."""
    initial_query: QuerySection
    key_insights: InsightsSection
    follow_up_explorations: FollowUpSection = field(default_factory=FollowUpSection)
    references: Tuple[Reference, ...] = field(default_factory=tuple)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_query": self.initial_query.to_dict(),
            "key_insights": self.key_insights.to_dict(),
            "follow_up_explorations": self.follow_up_explorations.to_dict(),
            "references": [ref.to_dict() for ref in self.references],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationSummary":
        return cls(
            initial_query=QuerySection.from_dict(data["initial_query"]),
            key_insights=InsightsSection.from_dict(data["key_insights"]),
            follow_up_explorations=FollowUpSection.from_dict(
                data.get("follow_up_explorations") or {}
            ),
            references=tuple(
                Reference.from_dict(ref) for ref in data.get("references") or ()
            ),
        )
