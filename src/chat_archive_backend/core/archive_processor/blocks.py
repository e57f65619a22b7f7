"""
Artifact and Attachment Block Extraction

Artifacts are wrapped in comment markers carrying ``key="value"`` attributes:

    <!-- ARTIFACT_START: type="code" language="python" title="Script" version="final" -->
    ...verbatim content...
    <!-- ARTIFACT_END -->

Attachments are wrapped in a start/end pair keyed by filename:

    <!-- MARKDOWN_START: filename="notes.md" -->
    ...content...
    <!-- MARKDOWN_END: filename="notes.md" -->

The fenced-div forms ``:::artifact type="..."`` / ``:::attachment filename="..."``
closed by a ``:::`` line are accepted as well.

Scanning works line by line over the archive body, so the text between the
marker lines is captured exactly.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..validation.result import SchemaViolation, ValidationIssue
from .scanner import LineIndex, Pattern, Span

logger = logging.getLogger(__name__)

ARTIFACT_START_MARKER = '<!-- ARTIFACT_START: type="..." title="..." -->'
ARTIFACT_END_MARKER = "<!-- ARTIFACT_END -->"
ATTACHMENT_START_MARKER = '<!-- MARKDOWN_START: filename="..." -->'
ATTACHMENT_END_MARKER = '<!-- MARKDOWN_END: filename="..." -->'

ARTIFACT_START = Pattern("artifact_start", r"\s*<!--\s*ARTIFACT_START:(?P<attrs>.*?)-->\s*")
ARTIFACT_END = Pattern("artifact_end", r"\s*<!--\s*ARTIFACT_END\s*-->\s*")
ATTACHMENT_START = Pattern(
    "attachment_start", r'\s*<!--\s*MARKDOWN_START:\s*filename="(?P<filename>[^"]*)"\s*-->\s*'
)
ATTACHMENT_END = Pattern(
    "attachment_end", r'\s*<!--\s*MARKDOWN_END:\s*filename="(?P<filename>[^"]*)"\s*-->\s*'
)
FENCED_ARTIFACT_START = Pattern("fenced_artifact_start", r":::artifact\s+(?P<attrs>.*?)\s*")
FENCED_ATTACHMENT_START = Pattern(
    "fenced_attachment_start", r':::attachment\s+filename="(?P<filename>[^"]*)"\s*'
)
FENCED_END = Pattern("fenced_end", r":::\s*")

ATTRIBUTE = Pattern("attribute", r'(\w+)="([^"]*)"')
SUMMARY_SENTINEL = Pattern("summary_sentinel", r"⚠️?\s*(?:NOTE|WARNING):")
SUMMARY_NOTICE = "**⚠️ NOTE: This attachment was summarized due to size limitations.**"

ARTIFACT_ATTRIBUTES = ("type", "title", "language", "version", "iterations")

SUMMARY_FIELDS = {
    "original_size": Pattern("original_size", r"^\s*-\s*Original size:\s*(.+?)\s*$"),
    "summarization_level": Pattern("summarization_level", r"^\s*-\s*Summarization level:\s*(.+?)\s*$"),
    "content_preserved": Pattern("content_preserved", r"^\s*-\s*Content preserved:\s*(.+?)\s*$"),
    "processing_limitation": Pattern(
        "processing_limitation", r"^\s*-\s*Processing limitation:\s*(.+?)\s*$"
    ),
}


def parse_attributes(attribute_string: str) -> Dict[str, str]:
    """Parse ``key="value"`` pairs; empty values are treated as absent."""
    return {
        match.group(1): match.group(2)
        for match in ATTRIBUTE.finditer(attribute_string)
        if match.group(2) != ""
    }


def split_evolution_notes(content: str) -> Tuple[Optional[str], str]:
    """
    Separate leading revision comments from artifact content.
    
    Leading ``#`` lines (other than a ``#!`` shebang) and blank lines between
    them are peeled off until the first real line, which starts the content.
    
    Returns:
        ``(evolution_notes, content)``; notes are None when there are none and
        ``content`` is then returned unchanged
    """
    lines = content.split("\n")
    notes: List[str] = []
    position = 0
    while position < len(lines):
        stripped = lines[position].strip()
        if not stripped:
            position += 1
            continue
        if stripped.startswith("#") and not stripped.startswith("#!"):
            notes.append(stripped)
            position += 1
            continue
        break
    
    if not notes:
        return None, content
    return "\n".join(notes), "\n".join(lines[position:])


def _trim_blank_lines(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def split_summary_notice(lines: List[str]) -> List[str]:
    """
    Drop the standard summarization notice and its detail lines from the top.
    
    Only the notice the generator writes is removed. A notice worded by the
    archive author stays in the content as written.
    """
    if not lines or lines[0].strip() != SUMMARY_NOTICE:
        return lines
    position = 1
    while position < len(lines) and any(
        pattern.fullmatch(lines[position]) for pattern in SUMMARY_FIELDS.values()
    ):
        position += 1
    return _trim_blank_lines(lines[position:])


def starts_with_summary_notice(content: str) -> bool:
    """True when the first line of ``content`` is a summarization notice of its own."""
    first_line = content.split("\n", 1)[0]
    return bool(SUMMARY_SENTINEL.search(first_line))


@dataclass
class BlocksResult:
    """
    Artifact and attachment trees in document order, plus unterminated-block issues.
    
    ``spans`` holds the line range of every closed block, markers included.
    """
    artifacts: List[Dict[str, Any]] = field(default_factory=list)
    attachments: List[Dict[str, Any]] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)
    spans: List[Span] = field(default_factory=list)


class BlockExtractor:
    """Extracts wrapped artifact and attachment blocks from an archive body."""
    
    def extract(self, index: LineIndex) -> BlocksResult:
        result = BlocksResult()
        position = 0
        while position < len(index):
            line = index.lines[position]
            
            for start_pattern, end_pattern in ((ARTIFACT_START, ARTIFACT_END), (FENCED_ARTIFACT_START, FENCED_END)):
                start = start_pattern.fullmatch(line)
                if start:
                    break
            if start:
                position = self._read_artifact(index, position, start.group("attrs"), end_pattern, result)
                continue
            
            start = ATTACHMENT_START.fullmatch(line)
            fenced = False
            if not start:
                start = FENCED_ATTACHMENT_START.fullmatch(line)
                fenced = start is not None
            if start:
                position = self._read_attachment(index, position, start.group("filename"), fenced, result)
                continue
            
            position += 1
        
        logger.debug(
            f"Found {len(result.artifacts)} artifact and {len(result.attachments)} attachment blocks"
        )
        return result
    
    def _read_artifact(
        self,
        index: LineIndex,
        start_line: int,
        attribute_string: str,
        end_pattern: Pattern,
        result: BlocksResult,
    ) -> int:
        attributes = parse_attributes(attribute_string)
        end_line = index.find_line(end_pattern, start_line + 1)
        if end_line is None:
            label = attributes.get("title", "untitled")
            result.issues.append(SchemaViolation(
                message=(
                    f"Artifact '{label}' starting at body line {start_line + 1} is never closed. "
                    f"Every artifact must end with a {ARTIFACT_END_MARKER} line."
                ),
                path="artifacts",
            ))
            return start_line + 1
        
        raw_content = "\n".join(index.lines[start_line + 1:end_line])
        evolution_notes, content = split_evolution_notes(raw_content)
        
        artifact: Dict[str, Any] = {
            name: attributes[name] for name in ARTIFACT_ATTRIBUTES if name in attributes
        }
        artifact["evolution_notes"] = evolution_notes
        artifact["content"] = content
        result.artifacts.append(artifact)
        result.spans.append(Span(start_line, end_line + 1))
        return end_line + 1
    
    def _read_attachment(
        self,
        index: LineIndex,
        start_line: int,
        filename: str,
        fenced: bool,
        result: BlocksResult,
    ) -> int:
        end_line = None
        for number in range(start_line + 1, len(index)):
            line = index.lines[number]
            if fenced and FENCED_END.fullmatch(line):
                end_line = number
                break
            end = None if fenced else ATTACHMENT_END.fullmatch(line)
            if end and end.group("filename") == filename:
                end_line = number
                break
        
        if end_line is None:
            result.issues.append(SchemaViolation(
                message=(
                    f"Attachment '{filename}' starting at body line {start_line + 1} is never "
                    f"closed. Expected a matching <!-- MARKDOWN_END: filename=\"{filename}\" --> line."
                ),
                path="attachments",
            ))
            return start_line + 1
        
        lines = _trim_blank_lines(index.lines[start_line + 1:end_line])
        raw_content = "\n".join(lines)
        is_summarized = bool(SUMMARY_SENTINEL.search(raw_content))
        
        attachment: Dict[str, Any] = {"filename": filename, "is_summarized": is_summarized}
        if is_summarized:
            for name, pattern in SUMMARY_FIELDS.items():
                match = pattern.search(raw_content)
                if match:
                    attachment[name] = match.group(1)
            lines = split_summary_notice(lines)
        attachment["content"] = "\n".join(lines)
        result.attachments.append(attachment)
        result.spans.append(Span(start_line, end_line + 1))
        return end_line + 1
