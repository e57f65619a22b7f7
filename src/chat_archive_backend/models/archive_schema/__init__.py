"""
Archive Schema Package.

Immutable value types describing one summarized AI conversation: metadata,
narrative sections, artifacts, attachments and workarounds.

Public API:
- Enums: Completeness, ReferenceType
- Data Classes: ArchiveMetadata, QuerySection, InsightsSection, FollowUpSection,
  Reference, ConversationSummary, Artifact, Attachment, Workaround, ArchiveDocument
"""

from .enums import Completeness, ReferenceType
from .metadata import ArchiveMetadata
from .summary import (
    QuerySection,
    InsightsSection,
    FollowUpSection,
    Reference,
    ConversationSummary,
)
from .records import Artifact, Attachment, Workaround
from .document import ArchiveDocument

__all__ = [
    # Enums
    'Completeness',
    'ReferenceType',
    
    # Data classes
    'ArchiveMetadata',
    'QuerySection',
    'InsightsSection',
    'FollowUpSection',
    'Reference',
    'ConversationSummary',
    'Artifact',
    'Attachment',
    'Workaround',
    'ArchiveDocument',
]
