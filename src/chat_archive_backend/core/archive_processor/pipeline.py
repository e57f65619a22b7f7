"""
Archive Parsing Pipeline

Single entry point that turns raw archive text into a ParseResult:

    raw text -> FenceStripper -> FrontmatterParser + BodyHeaderExtractor
             -> BlockExtractor -> SectionExtractor + WorkaroundExtractor
             -> DocumentAssembler -> SchemaValidator -> ParseResult

Section and workaround headings are searched outside the block spans. Every
extraction pass runs even when an earlier one reported a problem, so a failed
parse lists every defect at once.
A parser instance holds no per-call state and can be shared between threads.
"""

import logging
import time
from typing import Optional, Set

from ...exceptions.config_exceptions import ConfigurationError
from ..validation.result import (
    IssueCollector,
    IssueKind,
    ParseResult,
    SchemaViolation,
)
from ..validation.schema_validator import SchemaRegistry, SchemaValidator
from .assembler import DocumentAssembler
from .blocks import BlockExtractor
from .fence import FenceStripper
from .metadata.frontmatter import FRONTMATTER_KEYS, FrontmatterParser
from .metadata.header import BodyHeaderExtractor
from .policies import ParsePolicies
from .scanner import LineIndex
from .sections import INITIAL_QUERY, KEY_INSIGHTS, SectionExtractor
from .workarounds import WorkaroundExtractor

logger = logging.getLogger(__name__)

SECTION_PATHS = {
    INITIAL_QUERY: "summary.initial_query",
    KEY_INSIGHTS: "summary.key_insights",
}


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


class ArchiveParser:
    """
    Parses and validates conversation archive markdown.
    
    Example:
        >>> parser = ArchiveParser()
        >>> result = parser.parse(text)
        >>> if result.is_valid:
        ...     print(result.document.title)
        ... else:
        ...     print("\\n".join(result.errors))
    """
    
    def __init__(
        self,
        policies: Optional[ParsePolicies] = None,
        validator: Optional[SchemaValidator] = None,
        schema_registry: Optional[SchemaRegistry] = None,
    ) -> None:
        self.policies = policies or ParsePolicies()
        self.fence_stripper = FenceStripper()
        self.frontmatter_parser = FrontmatterParser()
        self.header_extractor = BodyHeaderExtractor(
            title_policy=self.policies.title,
            date_policy=self.policies.conversation_date,
            tag_policy=self.policies.tags,
        )
        self.section_extractor = SectionExtractor()
        self.block_extractor = BlockExtractor()
        self.workaround_extractor = WorkaroundExtractor()
        self.assembler = DocumentAssembler()
        self.validator = validator or SchemaValidator(
            registry=schema_registry,
            count_policy=self.policies.counts,
        )
    
    def parse(self, text: str) -> ParseResult:
        """
        Parse archive text into a validated document or a list of issues.
        
        Args:
            text: Raw archive markdown, optionally wrapped in a code fence
            
        Returns:
            ParseResult with the document, or with every issue found
            
        Raises:
            ConfigurationError: If the document schema cannot be loaded
        """
        start_time = time.time()
        try:
            result = self._parse(text or "")
        except ConfigurationError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error while parsing archive: {e}")
            result = ParseResult.failure([
                SchemaViolation(message=f"Unexpected error while parsing archive: {e}")
            ])
        
        elapsed_ms = (time.time() - start_time) * 1000
        if result.is_valid:
            logger.info(f"Parsed archive '{result.document.title}' in {elapsed_ms:.1f}ms")
        else:
            logger.warning(f"Archive rejected with {len(result.issues)} issues in {elapsed_ms:.1f}ms")
        return result
    
    def _parse(self, text: str) -> ParseResult:
        content = self.fence_stripper.strip(normalize_line_endings(text))
        collector = IssueCollector()
        covered: Set[str] = set()
        
        frontmatter = self.frontmatter_parser.parse(content)
        collector.add(frontmatter.issue)
        if frontmatter.issue is not None:
            covered.update(f"metadata.{name}" for name in FRONTMATTER_KEYS.values())
        fields = self.frontmatter_parser.to_metadata_fields(frontmatter.metadata)
        
        body = frontmatter.body
        header = self.header_extractor.extract(body)
        
        # Headings quoted inside artifact or attachment content are not sections
        blocks = self.block_extractor.extract(LineIndex(body))
        index = LineIndex(body, blocks=blocks.spans)
        
        sections = self.section_extractor.extract(index)
        collector.extend(sections.issues)
        for issue in sections.issues:
            if issue.kind is IssueKind.MISSING_REQUIRED_SECTION:
                covered.add(SECTION_PATHS[issue.section])
        
        collector.extend(blocks.issues)
        workarounds = self.workaround_extractor.extract(index)
        
        tree = self.assembler.assemble(
            frontmatter_fields=fields,
            header=header,
            summary=sections.summary,
            artifacts=blocks.artifacts,
            attachments=blocks.attachments,
            workarounds=workarounds,
        )
        collector.extend(self.validator.validate(tree, covered=covered))
        
        return collector.finalize(lambda: self.validator.to_document(tree))
