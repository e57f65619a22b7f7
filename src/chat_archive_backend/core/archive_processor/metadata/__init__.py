"""
Metadata Extraction Module

Frontmatter parsing and extraction of the title, date and tags written in
the archive body.

Components:
- frontmatter: YAML frontmatter parsing and key mapping
- header: Title, ``**Date:**`` and ``**Tags:**`` lines
"""

from .frontmatter import (
    FRONTMATTER_KEYS,
    FrontmatterParser,
    FrontmatterResult,
    parse_flexible_date,
)

from .header import (
    BodyHeader,
    BodyHeaderExtractor,
    split_list,
)

__all__ = [
    'FRONTMATTER_KEYS',
    'FrontmatterParser',
    'FrontmatterResult',
    'parse_flexible_date',
    'BodyHeader',
    'BodyHeaderExtractor',
    'split_list',
]
