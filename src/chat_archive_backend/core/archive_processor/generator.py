"""
Markdown Generator - Canonical Archive Rendering

Renders an ArchiveDocument back into archive markdown. The generator is a
pure function of its inputs: no I/O, no clock, no parse-time state.
Artifacts and attachments are rendered in the order the caller supplies them.

Two modes:
- full: frontmatter with reading instructions, header, the four summary
  sections, artifacts, attachments, workarounds, metadata footer, end marker
- summary-only: header and the four summary sections, for display
"""

import json
import logging
import re
from typing import Iterable, List, Optional, Sequence

from ...models.archive_schema import (
    ArchiveDocument,
    ArchiveMetadata,
    Artifact,
    Attachment,
    InsightsSection,
    QuerySection,
    Reference,
    Workaround,
)
from .blocks import SUMMARY_NOTICE, starts_with_summary_notice
from .workarounds import escape_trailing_parenthetical

logger = logging.getLogger(__name__)

INSTRUCTIONS_FOR_AI = """\
## Purpose
This is an archived AI conversation, condensed to its meaningful phases and outcomes.

## File Structure
1. This metadata header
2. Summary sections: Initial Query, Key Insights, Follow-up Explorations, References/Links
3. Conversation Artifacts: outputs created during the conversation
4. Attachments: inputs provided to the conversation
5. Workarounds Used
6. Archive Metadata

## Artifact Format
<!-- ARTIFACT_START: type="code" language="python" title="Script Name" version="final" -->
[artifact content]
<!-- ARTIFACT_END -->
- type and title are required; language, version and iterations are optional
- Leading comment lines inside an artifact record how it evolved

## Attachment Format
<!-- MARKDOWN_START: filename="example.md" -->
[content]
<!-- MARKDOWN_END: filename="example.md" -->
- Every attachment has been converted to markdown
- Attachments marked with a ⚠️ NOTE were summarized; see Workarounds Used

## Archive Completeness
- COMPLETE: all attachments are fully preserved
- PARTIAL: some attachments were summarized or simplified
- SUMMARIZED: most or all attachments were summarized

## How to Process This Archive
1. Treat the summary sections as established context
2. Locate referenced artifacts by title and attachments by filename
3. Continue the conversation from where it left off"""

NO_WORKAROUNDS = "None - All attachments were successfully converted to full markdown format."
END_MARKER = "_End of archived conversation_"
DIVIDER = "---"

_PLAIN_SCALAR_RE = re.compile(r"^[\w.][\w .,/+-]*$")


def _yaml_scalar(value: object) -> str:
    """Render a frontmatter value, double-quoting anything that is not a plain scalar."""
    text = str(value)
    if _PLAIN_SCALAR_RE.match(text) and not text.endswith(" "):
        return text
    return json.dumps(text, ensure_ascii=False)


def _attribute(name: str, value: Optional[str]) -> str:
    if value is None or value == "":
        return ""
    if '"' in value:
        raise ValueError(f"Attribute {name} cannot contain a double quote: {value!r}")
    return f' {name}="{value}"'


def _bracketed(items: Iterable[str]) -> str:
    return "[" + ", ".join(items) + "]"


class MarkdownGenerator:
    """Renders archive documents as canonical archive markdown."""
    
    def generate(
        self,
        document: ArchiveDocument,
        artifacts: Optional[Sequence[Artifact]] = None,
        attachments: Optional[Sequence[Attachment]] = None,
        summary_only: bool = False,
    ) -> str:
        """
        Render ``document`` as archive markdown.
        
        Args:
            document: Validated archive document
            artifacts: Artifact records in output order (default: the document's)
            attachments: Attachment records in output order (default: the document's)
            summary_only: Render only the header and the summary sections
            
        Returns:
            Archive markdown text
            
        Raises:
            ValueError: If document is None or a marker attribute cannot be written
        """
        if document is None:
            raise ValueError("Document cannot be None")
        
        artifacts = list(document.artifacts if artifacts is None else artifacts)
        attachments = list(document.attachments if attachments is None else attachments)
        
        parts: List[str] = []
        if not summary_only:
            parts.append(self.render_frontmatter(document.metadata))
        parts.append(self.render_header(document.metadata))
        
        summary = document.summary
        parts.append(self.render_query_section("Initial Query", summary.initial_query))
        parts.append(self.render_insights_section(summary.key_insights))
        parts.append(self.render_query_section("Follow-up Explorations", summary.follow_up_explorations))
        parts.append(self.render_references(summary.references))
        
        if not summary_only:
            parts.append(self.render_artifacts(artifacts))
            parts.append(self.render_attachments(attachments))
            parts.append(self.render_workarounds(document.workarounds))
            parts.append(self.render_footer(document.metadata))
            parts.append(f"\n{DIVIDER}\n\n{END_MARKER}\n")
        
        logger.debug(
            f"Generated {'summary' if summary_only else 'full'} markdown for '{document.title}'"
        )
        return "".join(parts)
    
    def render_frontmatter(self, metadata: ArchiveMetadata) -> str:
        lines = [
            DIVIDER,
            f"ARCHIVE_FORMAT_VERSION: {_yaml_scalar(metadata.version)}",
            f"ARCHIVE_TYPE: {_yaml_scalar(metadata.archive_type)}",
            f"CREATED_DATE: {metadata.created_date.isoformat()}",
            f"ORIGINAL_PLATFORM: {_yaml_scalar(metadata.original_platform)}",
            "",
            "INSTRUCTIONS_FOR_AI: |",
        ]
        lines.extend(f"  {line}" if line else "" for line in INSTRUCTIONS_FOR_AI.split("\n"))
        lines.extend([
            "",
            f"ATTACHMENT_COUNT: {metadata.attachment_count}",
            f"ARTIFACT_COUNT: {metadata.artifact_count}",
            f"ARCHIVE_COMPLETENESS: {metadata.completeness}",
            f"WORKAROUNDS_COUNT: {metadata.workarounds_count}",
        ])
        if metadata.total_file_size:
            lines.append(f"TOTAL_FILE_SIZE: {_yaml_scalar(metadata.total_file_size)}")
        lines.append(DIVIDER)
        return "\n".join(lines) + "\n\n"
    
    def render_header(self, metadata: ArchiveMetadata) -> str:
        text = f"# {metadata.title}\n\n"
        text += f"**Date:** {metadata.conversation_date.isoformat()}  \n"
        if metadata.tags:
            text += f"**Tags:** {_bracketed(metadata.tags)}\n"
        return text + f"\n{DIVIDER}\n\n"
    
    def _render_references_lines(self, section: QuerySection) -> str:
        text = ""
        if section.attachments_referenced:
            text += f"**Attachments referenced:** {_bracketed(section.attachments_referenced)}\n"
        if section.artifacts_created:
            text += f"**Artifacts created:** {_bracketed(section.artifacts_created)}\n"
        return text
    
    def render_query_section(self, heading: str, section: QuerySection) -> str:
        text = f"## {heading}\n\n"
        if section.description:
            text += f"{section.description}\n\n"
        text += self._render_references_lines(section)
        return text + f"\n{DIVIDER}\n\n"
    
    def render_insights_section(self, section: InsightsSection) -> str:
        text = "## Key Insights\n\n"
        if section.description:
            text += f"{section.description}\n\n"
        if section.key_points:
            text += "**Key points:**\n"
            text += "".join(f"- {point}\n" for point in section.key_points)
            text += "\n"
        text += self._render_references_lines(section)
        return text + f"\n{DIVIDER}\n\n"
    
    def render_references(self, references: Sequence[Reference]) -> str:
        """Only references with a URL are written; descriptive entries have no link syntax."""
        text = "## References/Links\n\n"
        for reference in references:
            if reference.url:
                text += f"- [{reference.description}]({reference.url})\n"
        return text + f"\n{DIVIDER}\n\n"
    
    def render_artifacts(self, artifacts: Sequence[Artifact]) -> str:
        if not artifacts:
            return ""
        
        text = "## Conversation Artifacts\n\n"
        text += "_This section preserves the valuable outputs created during the conversation._\n\n"
        for artifact in artifacts:
            text += (
                "<!-- ARTIFACT_START:"
                + _attribute("type", artifact.type)
                + _attribute("language", artifact.language)
                + _attribute("title", artifact.title)
                + _attribute("version", artifact.version)
                + _attribute("iterations", artifact.iterations)
                + " -->\n"
            )
            if artifact.evolution_notes:
                text += f"{artifact.evolution_notes}\n"
            # The parser strips exactly this newline, keeping content byte-exact
            text += f"{artifact.content}\n"
            text += "<!-- ARTIFACT_END -->\n\n"
        return text + f"{DIVIDER}\n\n"
    
    def render_attachments(self, attachments: Sequence[Attachment]) -> str:
        if not attachments:
            return ""
        
        text = "## Attachments\n\n"
        for attachment in attachments:
            marker_filename = _attribute("filename", attachment.filename)
            text += f"<!-- MARKDOWN_START:{marker_filename} -->\n\n"
            # An author-worded notice is already the first line of the content
            if attachment.is_summarized and not starts_with_summary_notice(attachment.content):
                text += f"{SUMMARY_NOTICE}\n"
                for label, value in (
                    ("Original size", attachment.original_size),
                    ("Summarization level", attachment.summarization_level),
                    ("Content preserved", attachment.content_preserved),
                    ("Processing limitation", attachment.processing_limitation),
                ):
                    if value:
                        text += f"- {label}: {value}\n"
                text += "\n"
            if attachment.content:
                text += f"{attachment.content}\n\n"
            text += f"<!-- MARKDOWN_END:{marker_filename} -->\n\n"
        return text + f"{DIVIDER}\n\n"
    
    def render_workarounds(self, workarounds: Sequence[Workaround]) -> str:
        text = "## Workarounds Used\n\n"
        text += "_This section documents any limitations encountered during archiving._\n\n"
        if not workarounds:
            text += f"{NO_WORKAROUNDS}\n\n"
            return text + f"{DIVIDER}\n\n"
        
        for workaround in workarounds:
            if workaround.reason:
                line = f"- **{workaround.filename}**: {workaround.workaround} ({workaround.reason})"
            else:
                description = escape_trailing_parenthetical(workaround.workaround)
                line = f"- **{workaround.filename}**: {description}"
            line += "."
            if workaround.preserved:
                line += f" Preserved: {workaround.preserved}."
            if workaround.lost:
                line += f" Omitted: {workaround.lost}."
            text += line + "\n"
        return text + f"\n{DIVIDER}\n\n"
    
    def render_footer(self, metadata: ArchiveMetadata) -> str:
        rows = [
            ("Original conversation date", metadata.conversation_date.isoformat()),
            ("Archive created", metadata.created_date.isoformat()),
            ("Archive version", metadata.version),
            ("Archive completeness", str(metadata.completeness)),
            ("Total attachments", metadata.attachment_count),
            ("Total artifacts", metadata.artifact_count),
            ("Attachments with workarounds", metadata.workarounds_count),
        ]
        if metadata.total_file_size:
            rows.append(("Total file size", metadata.total_file_size))
        text = "## Archive Metadata\n\n"
        text += "".join(f"**{label}:** {value}  \n" for label, value in rows)
        return text
