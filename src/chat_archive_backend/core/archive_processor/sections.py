"""
Narrative Section Extraction

Reads the four summary sections of an archive body:

    ## Initial Query            (required)
    ## Key Insights             (required)
    ## Follow-up Explorations   (optional)
    ## References/Links         (optional)

Each section runs from its heading to the next ``---`` divider, level-2
heading or wrapped block. The first three share one grammar: a description
paragraph, optionally followed by ``**Attachments referenced:**`` and
``**Artifacts created:**`` lines; Key Insights also accepts a
``**Key points:**`` bullet list right after the description.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..validation.result import ValidationIssue, missing_section
from .metadata.header import split_list
from .scanner import LineIndex, Pattern, Span

logger = logging.getLogger(__name__)

INITIAL_QUERY = "Initial Query"
KEY_INSIGHTS = "Key Insights"
FOLLOW_UP = "Follow-up Explorations"
REFERENCES = "References/Links"

REQUIRED_SECTIONS = {
    INITIAL_QUERY: "This section should describe what the user was trying to accomplish.",
    KEY_INSIGHTS: "This section should contain the main findings or solutions.",
}

ATTACHMENTS_MARKER = Pattern("attachments_referenced", r"^\*\*Attachments referenced:\*\*(.*)$")
ARTIFACTS_MARKER = Pattern("artifacts_created", r"^\*\*Artifacts (?:created|referenced):\*\*(.*)$")
KEY_POINTS_MARKER = Pattern("key_points", r"^\*\*Key points:\*\*\s*$")
BULLET = Pattern("bullet", r"^\s*[-*]\s+(.+?)\s*$")
MARKDOWN_LINK = Pattern("markdown_link", r"\[(.*?)\]\((.+?)\)")
PLAIN_LINK = Pattern("plain_link", r"^(?P<description>[^:]+?):\s+(?P<url>https?://[^\s()]+)")

_BRACKETED = re.compile(r"^\s*\[(.*)\]\s*$")


def parse_item_list(raw: str) -> List[str]:
    """Parse ``[a, b]`` or bare ``a, b`` into a list of strings."""
    bracketed = _BRACKETED.match(raw)
    return split_list(bracketed.group(1) if bracketed else raw)


@dataclass
class SectionsResult:
    """The summary tree plus any missing-section issues."""
    summary: Dict[str, Any]
    issues: List[ValidationIssue] = field(default_factory=list)


class SectionExtractor:
    """Extracts the narrative sections from an archive body."""
    
    def extract(self, index: LineIndex) -> SectionsResult:
        issues: List[ValidationIssue] = []
        
        initial_query = self.extract_query_section(index, INITIAL_QUERY)
        key_insights = self.extract_query_section(index, KEY_INSIGHTS, with_key_points=True)
        follow_up = self.extract_query_section(index, FOLLOW_UP)
        
        for name, section in ((INITIAL_QUERY, initial_query), (KEY_INSIGHTS, key_insights)):
            if section is None:
                logger.debug(f"Required section '{name}' not found")
                issues.append(missing_section(name, REQUIRED_SECTIONS[name]))
        
        summary = {
            "initial_query": initial_query,
            "key_insights": key_insights,
            "follow_up_explorations": follow_up or self._empty_section(),
            "references": self.extract_references(index),
        }
        # Missing required sections stay out of the tree; the issue already covers them
        summary = {key: value for key, value in summary.items() if value is not None}
        return SectionsResult(summary=summary, issues=issues)
    
    def extract_query_section(
        self,
        index: LineIndex,
        heading: str,
        with_key_points: bool = False
    ) -> Optional[Dict[str, Any]]:
        """Parse one description-style section, or return None when its heading is absent."""
        heading_line = index.find_heading(heading)
        if heading_line is None:
            return None
        
        span = index.section_span(heading_line)
        lines = index.span_lines(span)
        
        description_lines: List[str] = []
        key_points: List[str] = []
        attachments: List[str] = []
        artifacts: List[str] = []
        
        position = 0
        while position < len(lines):
            line = lines[position]
            if ATTACHMENTS_MARKER.fullmatch(line) or ARTIFACTS_MARKER.fullmatch(line):
                break
            if with_key_points and KEY_POINTS_MARKER.fullmatch(line):
                break
            description_lines.append(line)
            position += 1
        
        while position < len(lines):
            line = lines[position]
            attachments_match = ATTACHMENTS_MARKER.fullmatch(line)
            artifacts_match = ARTIFACTS_MARKER.fullmatch(line)
            if attachments_match:
                attachments.extend(parse_item_list(attachments_match.group(1)))
            elif artifacts_match:
                artifacts.extend(parse_item_list(artifacts_match.group(1)))
            elif with_key_points and KEY_POINTS_MARKER.fullmatch(line):
                position = self._read_bullets(lines, position + 1, key_points)
                continue
            position += 1
        
        section: Dict[str, Any] = {
            "description": "\n".join(description_lines).strip(),
            "artifacts_created": artifacts,
            "attachments_referenced": attachments,
        }
        if with_key_points:
            section["key_points"] = key_points
        return section
    
    def extract_references(self, index: LineIndex) -> List[Dict[str, Any]]:
        """Parse the ``## References/Links`` bullet list; non-link bullets are skipped."""
        heading_line = index.find_heading(REFERENCES)
        if heading_line is None:
            return []
        
        references: List[Dict[str, Any]] = []
        for line in index.span_lines(index.section_span(heading_line)):
            bullet = BULLET.fullmatch(line)
            if not bullet:
                continue
            item = bullet.group(1)
            
            link = MARKDOWN_LINK.search(item)
            if link:
                references.append({"description": link.group(1).strip(), "url": link.group(2).strip()})
                continue
            
            plain = PLAIN_LINK.search(item)
            if plain:
                references.append({
                    "description": plain.group("description").strip(),
                    "url": plain.group("url"),
                })
                continue
            
            logger.debug(f"Skipping reference without a link: {item[:60]}")
        return references
    
    def _read_bullets(self, lines: List[str], start: int, into: List[str]) -> int:
        """
        Collect consecutive bullets starting at ``start``; return the first unread line.
        
        An indented line right under a bullet continues that bullet's text.
        """
        position = start
        while position < len(lines):
            line = lines[position]
            bullet = BULLET.fullmatch(line)
            if bullet:
                into.append(bullet.group(1))
            elif into and line[:1].isspace() and line.strip():
                into[-1] = f"{into[-1]} {line.strip()}"
            elif line.strip():
                break
            elif into:
                return position + 1
            position += 1
        return position
    
    @staticmethod
    def _empty_section() -> Dict[str, Any]:
        return {"description": "", "artifacts_created": [], "attachments_referenced": []}


__all__ = [
    "SectionExtractor",
    "SectionsResult",
    "parse_item_list",
    "INITIAL_QUERY",
    "KEY_INSIGHTS",
    "FOLLOW_UP",
    "REFERENCES",
]
