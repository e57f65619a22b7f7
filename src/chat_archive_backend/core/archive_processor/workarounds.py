"""
Workarounds section extraction.

Each bullet under ``## Workarounds Used`` documents one lossy step:

    - **big.log**: Summarized to key errors (file exceeded limits). Preserved: stack traces. Omitted: debug lines.

The optional parts are peeled off from the end of the bullet, so free text in
the workaround description may contain periods and parentheses.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from .scanner import LineIndex, Pattern

logger = logging.getLogger(__name__)

WORKAROUNDS_HEADING = "Workarounds Used"

WORKAROUND_BULLET = Pattern("workaround", r"^\s*[-*]\s+\*\*(?P<filename>.+?)\*\*:\s*(?P<text>.*?)\s*$")

_LOST_TAIL = re.compile(r"^(?P<rest>.*?)\s*\b(?:Omitted|Lost):\s*(?P<value>.*?)\s*$")
_PRESERVED_TAIL = re.compile(r"^(?P<rest>.*?)\s*\bPreserved:\s*(?P<value>.*?)\s*$")
_REASON_TAIL = re.compile(r"^(?P<rest>.*?)\s*(?<!\\)\((?P<value>[^()]*)\)$")
_ESCAPED_TAIL = re.compile(r"\\(\([^()]*\))$")
_PLAIN_TAIL = re.compile(r"(\([^()]*\))$")


def escape_trailing_parenthetical(workaround: str) -> str:
    """
    Mark a closing ``(...)`` as part of the workaround text.
    
    Without a reason, ``Converted table (CSV)`` would read back with ``CSV``
    as the reason; it is written as ``Converted table \\(CSV)`` instead.
    """
    return _PLAIN_TAIL.sub(r"\\\1", workaround)


def _drop_period(text: str) -> str:
    """Remove the single period the generator appends after each part."""
    return text[:-1].rstrip() if text.endswith(".") else text


def _peel(pattern: re.Pattern, text: str) -> Tuple[str, Optional[str]]:
    match = pattern.match(text)
    if not match:
        return text, None
    value = _drop_period(match.group("value")) or None
    return match.group("rest"), value


def parse_workaround(filename: str, text: str) -> Dict[str, Any]:
    """Split one bullet's text into workaround, reason, preserved and lost."""
    rest, lost = _peel(_LOST_TAIL, text)
    rest, preserved = _peel(_PRESERVED_TAIL, rest)
    rest = _drop_period(rest.strip())
    rest, reason = _peel(_REASON_TAIL, rest)
    if reason is None:
        rest = _ESCAPED_TAIL.sub(r"\1", rest)
    return {
        "filename": filename.strip(),
        "workaround": rest.strip(),
        "reason": reason,
        "preserved": preserved,
        "lost": lost,
    }


class WorkaroundExtractor:
    """Reads the ``## Workarounds Used`` bullet list."""
    
    def extract(self, index: LineIndex) -> List[Dict[str, Any]]:
        """
        Return one workaround tree per bullet.
        
        A missing heading, or a section holding only a "None ..." sentence,
        yields an empty list.
        """
        heading_line = index.find_heading(WORKAROUNDS_HEADING)
        if heading_line is None:
            return []
        
        workarounds: List[Dict[str, Any]] = []
        for line in index.span_lines(index.section_span(heading_line)):
            bullet = WORKAROUND_BULLET.fullmatch(line)
            if bullet:
                workarounds.append(parse_workaround(bullet.group("filename"), bullet.group("text")))
        
        logger.debug(f"Found {len(workarounds)} workarounds")
        return workarounds
