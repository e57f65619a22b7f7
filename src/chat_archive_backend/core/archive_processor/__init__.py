"""
Archive Processor Package

Parses conversation archive markdown into validated documents and renders
documents back into canonical markdown.

Components:
- fence: whole-document code fence removal
- scanner: shared line index and named patterns
- policies: named lenient-parsing rules
- metadata/: frontmatter and body header (title, date, tags)
- sections: Initial Query, Key Insights, Follow-up Explorations, References
- blocks: artifact and attachment wrapped blocks
- workarounds: Workarounds Used bullet list
- assembler: combines extraction results into one tree
- pipeline: ArchiveParser, the parse/validate entry point
- generator: MarkdownGenerator, the inverse of the parser
"""

from .fence import FenceStripper
from .scanner import LineIndex, Pattern, Span
from .policies import (
    ConversationDatePolicy,
    CountPolicy,
    ParsePolicies,
    TagFormatPolicy,
    TitlePolicy,
)
from .metadata import (
    BodyHeader,
    BodyHeaderExtractor,
    FrontmatterParser,
    FrontmatterResult,
    parse_flexible_date,
)
from .sections import SectionExtractor, SectionsResult
from .blocks import BlockExtractor, BlocksResult, split_evolution_notes
from .workarounds import WorkaroundExtractor
from .assembler import DocumentAssembler
from .pipeline import ArchiveParser
from .generator import MarkdownGenerator

__all__ = [
    # Primitives
    'FenceStripper',
    'LineIndex',
    'Pattern',
    'Span',
    
    # Policies
    'ConversationDatePolicy',
    'CountPolicy',
    'ParsePolicies',
    'TagFormatPolicy',
    'TitlePolicy',
    
    # Extractors
    'BodyHeader',
    'BodyHeaderExtractor',
    'FrontmatterParser',
    'FrontmatterResult',
    'parse_flexible_date',
    'SectionExtractor',
    'SectionsResult',
    'BlockExtractor',
    'BlocksResult',
    'split_evolution_notes',
    'WorkaroundExtractor',
    'DocumentAssembler',
    
    # Entry points
    'ArchiveParser',
    'MarkdownGenerator',
]
