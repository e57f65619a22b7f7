"""
Scanner Primitives - Shared Line Index and Named Patterns

Every extractor in the archive processor works over the same LineIndex: the
document split once into lines, with helpers to find headings, dividers and
bounded spans. Regular expressions are wrapped in named Pattern objects so a
failing rule is identifiable in logs.

Key Components:
- Pattern: Compiled regex with a name, match/findall helpers
- Span: Half-open range of line numbers
- LineIndex: Line-oriented cursor over the document body

Usage:
    >>> index = LineIndex("## Initial Query\\n\\nText\\n\\n---\\n")
    >>> heading = index.find_heading("Initial Query")
    >>> index.text(index.section_span(heading))
    'Text'
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

DIVIDER_RE = re.compile(r"^\s*---\s*$")
SECTION_BREAK_RE = re.compile(r"^#{1,2}\s")


class Pattern:
    """
    A named, compiled regular expression.
    
    Attributes:
        name: Descriptive identifier for the pattern
        regex_pattern: Raw regex string
        compiled_regex: Pre-compiled regex object
    """
    
    def __init__(self, name: str, regex_pattern: str, flags: int = re.MULTILINE) -> None:
        if not name or not name.strip():
            raise ValueError("Pattern name cannot be empty")
        if not regex_pattern:
            raise ValueError("Regex pattern cannot be empty")
        
        self.name = name.strip()
        self.regex_pattern = regex_pattern
        self.compiled_regex = re.compile(regex_pattern, flags)
        logger.debug(f"Compiled pattern '{self.name}': {regex_pattern}")
    
    def search(self, text: str, pos: int = 0) -> Optional[re.Match]:
        if not text:
            return None
        return self.compiled_regex.search(text, pos)
    
    def fullmatch(self, text: str) -> Optional[re.Match]:
        return self.compiled_regex.fullmatch(text)
    
    def finditer(self, text: str, pos: int = 0) -> Iterator[re.Match]:
        if not text:
            return iter(())
        return self.compiled_regex.finditer(text, pos)
    
    def __repr__(self) -> str:
        return f"Pattern(name='{self.name}', regex='{self.regex_pattern}')"


@dataclass(frozen=True)
class Span:
    """Half-open line range ``[start, end)``."""
    start: int
    end: int
    
    def __len__(self) -> int:
        return max(0, self.end - self.start)


class LineIndex:
    """
    Line-oriented view of a document.
    
    Lines are split on ``\\n`` only, so joining a span with ``\\n`` gives back
    the exact original text of those lines. Lines inside ``blocks`` (wrapped
    artifact and attachment content) are never taken as headings and end any
    section that runs into them.
    """
    
    def __init__(self, text: str, first_line: int = 0, blocks: Iterable[Span] = ()) -> None:
        self.lines: List[str] = text.split("\n")
        self.first_line = first_line
        self.blocks: Tuple[Span, ...] = tuple(blocks)
    
    def __len__(self) -> int:
        return len(self.lines)
    
    def in_block(self, number: int) -> bool:
        return any(block.start <= number < block.end for block in self.blocks)
    
    def find_line(self, pattern: Pattern, start: int = 0, end: Optional[int] = None) -> Optional[int]:
        """Return the first line number in ``[start, end)`` fully matching ``pattern``."""
        stop = len(self.lines) if end is None else min(end, len(self.lines))
        for number in range(max(start, 0), stop):
            if pattern.fullmatch(self.lines[number]):
                return number
        return None
    
    def find_heading(self, title: str, level: int = 2, start: int = 0) -> Optional[int]:
        """Find a heading line such as ``## Key Insights``, ignoring trailing spaces."""
        prefix = "#" * level + " "
        for number in range(start, len(self.lines)):
            if self.in_block(number):
                continue
            line = self.lines[number].rstrip()
            if line.startswith(prefix) and line[len(prefix):].strip() == title:
                return number
        return None
    
    def is_divider(self, number: int) -> bool:
        return bool(DIVIDER_RE.match(self.lines[number]))
    
    def section_span(self, heading_line: int) -> Span:
        """
        Lines belonging to the section opened by ``heading_line``.
        
        The section ends at the first ``---`` divider, at the next level-1
        or level-2 heading, or where a wrapped block starts.
        """
        end = heading_line + 1
        while end < len(self.lines):
            line = self.lines[end]
            if DIVIDER_RE.match(line) or SECTION_BREAK_RE.match(line) or self.in_block(end):
                break
            end += 1
        return Span(heading_line + 1, end)
    
    def span_lines(self, span: Span) -> List[str]:
        return self.lines[span.start:span.end]
    
    def text(self, span: Span) -> str:
        """Joined text of a span with surrounding blank lines removed."""
        return "\n".join(self.span_lines(span)).strip()
