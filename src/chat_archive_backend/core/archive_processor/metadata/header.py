"""
Body header extraction: title, conversation date and tags.

These three values live in the document body, not in the frontmatter:

    # Title
    **Date:** 2025-10-02
    **Tags:** [java, build]
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..policies import ConversationDatePolicy, TagFormatPolicy, TitlePolicy
from ..scanner import Pattern

logger = logging.getLogger(__name__)


@dataclass
class BodyHeader:
    """Title, date and tags found in the body after policies are applied."""
    title: str
    conversation_date: Optional[str]
    tags: List[str] = field(default_factory=list)


def split_list(items: str) -> List[str]:
    """Split a comma-separated list, dropping empty entries."""
    return [item.strip() for item in items.split(",") if item.strip()]


class BodyHeaderExtractor:
    """Reads the title, ``**Date:**`` and ``**Tags:**`` lines of the body."""
    
    def __init__(
        self,
        title_policy: Optional[TitlePolicy] = None,
        date_policy: Optional[ConversationDatePolicy] = None,
        tag_policy: Optional[TagFormatPolicy] = None,
    ) -> None:
        self.title_policy = title_policy or TitlePolicy()
        self.date_policy = date_policy or ConversationDatePolicy()
        self.tag_policy = tag_policy or TagFormatPolicy()
        
        self.title_pattern = Pattern("title", r"^# (.+?)[ \t]*$")
        self.date_pattern = Pattern("date", r"\*\*Date:\*\*[ \t]*(\d{4}-\d{2}-\d{2})")
        self.bracketed_tags_pattern = Pattern("tags", r"\*\*Tags:\*\*[ \t]*\[([^\]\n]*)\]")
        self.plain_tags_pattern = Pattern("plain_tags", r"\*\*Tags:\*\*[ \t]+([^\[\n].*?)[ \t]*$")
    
    def extract_title(self, body: str) -> Optional[str]:
        match = self.title_pattern.search(body)
        return match.group(1).strip() if match else None
    
    def extract_date(self, body: str) -> Optional[str]:
        match = self.date_pattern.search(body)
        return match.group(1) if match else None
    
    def extract_tags(self, body: str) -> List[str]:
        match = self.bracketed_tags_pattern.search(body)
        if match:
            return split_list(match.group(1))
        
        if self.tag_policy.accept_unbracketed:
            match = self.plain_tags_pattern.search(body)
            if match:
                return split_list(match.group(1))
        elif self.plain_tags_pattern.search(body):
            logger.debug("Ignoring unbracketed **Tags:** line; only '[a, b]' lists are read")
        
        return []
    
    def extract(self, body: str) -> BodyHeader:
        return BodyHeader(
            title=self.title_policy.resolve(self.extract_title(body)),
            conversation_date=self.date_policy.resolve(self.extract_date(body)),
            tags=self.extract_tags(body),
        )
