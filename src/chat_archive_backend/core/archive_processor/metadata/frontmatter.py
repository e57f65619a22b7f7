"""
Frontmatter Parsing Module

Extracts the ``---`` delimited YAML header of an archive and maps its fixed
keys onto metadata fields.

The block is loaded with PyYAML's string-only loader so every value arrives
as written (``1.10`` stays ``"1.10"``); typing is done here and checked
afterwards by the schema validator.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import yaml

from ...validation.result import MalformedFrontmatter, MissingFrontmatter, ValidationIssue

logger = logging.getLogger(__name__)

# Frontmatter key -> metadata field
FRONTMATTER_KEYS = {
    "ARCHIVE_FORMAT_VERSION": "version",
    "ARCHIVE_TYPE": "archive_type",
    "CREATED_DATE": "created_date",
    "ORIGINAL_PLATFORM": "original_platform",
    "ATTACHMENT_COUNT": "attachment_count",
    "ARTIFACT_COUNT": "artifact_count",
    "ARCHIVE_COMPLETENESS": "completeness",
    "WORKAROUNDS_COUNT": "workarounds_count",
    "TOTAL_FILE_SIZE": "total_file_size",
}

INTEGER_FIELDS = {"attachment_count", "artifact_count", "workarounds_count"}
DATE_FIELDS = {"created_date"}

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%m-%d-%Y",
    "%a %b %d %H:%M:%S %Z %Y",
)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
# Zone abbreviations strptime does not know (``CST``, ``PDT``) are dropped
_ZONED_DATE_RE = re.compile(r"^(\w{3} \w{3} \d{1,2} \d{2}:\d{2}:\d{2}) \w+ (\d{4})$")


def parse_flexible_date(value: str) -> Optional[str]:
    """
    Parse a date written in one of the accepted formats.
    
    Returns:
        ISO ``YYYY-MM-DD`` string, or None when no format matches
    """
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    
    zoned = _ZONED_DATE_RE.match(text)
    if zoned:
        try:
            stamp = f"{zoned.group(1)} {zoned.group(2)}"
            return datetime.strptime(stamp, "%a %b %d %H:%M:%S %Y").date().isoformat()
        except ValueError:
            pass
    
    logger.warning(f"Failed to parse date '{value}'")
    return None


@dataclass
class FrontmatterResult:
    """Result container for frontmatter parsing.
    
    Attributes:
        has_frontmatter: True if a complete ``---`` block was found
        metadata: Raw key/value mapping as written in the block
        body: Document text after the closing ``---``
        body_offset: Character offset of ``body`` within the parsed text
        issue: MissingFrontmatter or MalformedFrontmatter when parsing failed
    """
    has_frontmatter: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    body_offset: int = 0
    issue: Optional[ValidationIssue] = None
    
    @property
    def is_valid(self) -> bool:
        return self.has_frontmatter and self.issue is None


class FrontmatterParser:
    """Parser for the archive's YAML frontmatter."""
    
    def __init__(self) -> None:
        self.opening_pattern = re.compile(r"\A\s*---[ \t]*\n")
        self.closing_pattern = re.compile(r"^---[ \t]*$", re.MULTILINE)
    
    def parse(self, content: str) -> FrontmatterResult:
        """Locate and load the frontmatter block.
        
        Args:
            content: Archive text with any code fence already removed
            
        Returns:
            FrontmatterResult; failures are reported through ``issue``
        """
        opening = self.opening_pattern.match(content or "")
        if not opening:
            return FrontmatterResult(
                has_frontmatter=False,
                body=content or "",
                issue=MissingFrontmatter(),
            )
        
        closing = self.closing_pattern.search(content, opening.end())
        if not closing:
            return FrontmatterResult(
                has_frontmatter=False,
                body=content[opening.end():],
                body_offset=opening.end(),
                issue=MissingFrontmatter(
                    "Missing YAML frontmatter closing line. Expected format: '---' (opening), "
                    "metadata fields, '---' (closing). Make sure the YAML section is properly "
                    "closed with '---' on its own line."
                ),
            )
        
        block = content[opening.end():closing.start()]
        body_offset = closing.end() + 1 if closing.end() < len(content) else closing.end()
        body = content[body_offset:]
        
        try:
            loaded = yaml.load(block, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            line = getattr(getattr(e, "problem_mark", None), "line", None)
            where = f" at frontmatter line {line + 2}" if line is not None else ""
            logger.warning(f"Invalid YAML frontmatter{where}: {e}")
            return FrontmatterResult(
                has_frontmatter=True,
                body=body,
                body_offset=body_offset,
                issue=MalformedFrontmatter(
                    message=(
                        f"Malformed YAML frontmatter{where}. Each line must be a 'KEY: value' "
                        "pair; multi-line values such as INSTRUCTIONS_FOR_AI must use '|' and "
                        "be indented."
                    ),
                    detail=str(e),
                ),
            )
        
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            return FrontmatterResult(
                has_frontmatter=True,
                body=body,
                body_offset=body_offset,
                issue=MalformedFrontmatter(
                    message=(
                        "Malformed YAML frontmatter: expected 'KEY: value' pairs but found "
                        f"a {type(loaded).__name__}."
                    ),
                ),
            )
        
        return FrontmatterResult(
            has_frontmatter=True,
            metadata=loaded,
            body=body,
            body_offset=body_offset,
        )
    
    def to_metadata_fields(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Map recognized frontmatter keys onto metadata fields.
        
        Integers and dates are converted when they parse; anything else is
        passed through unchanged for the schema validator to report.
        Unknown keys (including ``INSTRUCTIONS_FOR_AI``) are ignored.
        """
        fields: Dict[str, Any] = {}
        for key, field_name in FRONTMATTER_KEYS.items():
            if key not in raw:
                continue
            value = raw[key]
            if isinstance(value, str):
                value = value.strip()
                if value == "":
                    continue
            
            if field_name in INTEGER_FIELDS and isinstance(value, str) and _INTEGER_RE.match(value):
                value = int(value)
            elif field_name in DATE_FIELDS and isinstance(value, str):
                value = parse_flexible_date(value) or value
            
            fields[field_name] = value
        return fields
