"""
Archive service: import and export of archive markdown.

Wires the parser, the store and the generator together. This is the layer an
HTTP handler or the CLI talks to.
"""

import logging
from typing import Optional, Tuple

from ..core.archive_processor import ArchiveParser, MarkdownGenerator
from ..core.validation import ParseResult
from ..storage import ArchiveStore, InMemoryArchiveStore

logger = logging.getLogger(__name__)


class ArchiveService:
    """
    Imports archives into a store and regenerates markdown from stored records.
    
    Example:
        >>> service = ArchiveService()
        >>> document_id, result = service.import_markdown(text)
        >>> if document_id:
        ...     markdown = service.export_markdown(document_id, newest_first=True)
    """
    
    def __init__(
        self,
        parser: Optional[ArchiveParser] = None,
        store: Optional[ArchiveStore] = None,
        generator: Optional[MarkdownGenerator] = None,
    ) -> None:
        self.parser = parser or ArchiveParser()
        self.store = store if store is not None else InMemoryArchiveStore()
        self.generator = generator or MarkdownGenerator()
    
    def import_markdown(self, text: str) -> Tuple[Optional[str], ParseResult]:
        """
        Parse ``text`` and store the document when it is valid.
        
        Returns:
            ``(document_id, result)``; the id is None when parsing failed and
            nothing was stored
        """
        result = self.parser.parse(text)
        if not result.is_valid:
            logger.warning(f"Archive import rejected: {len(result.issues)} issues")
            return None, result
        
        document_id = self.store.save(result.document)
        return document_id, result
    
    def export_markdown(
        self,
        document_id: str,
        summary_only: bool = False,
        newest_first: bool = False,
    ) -> str:
        """
        Regenerate archive markdown from the stored document and records.
        
        Raises:
            ArchiveNotFoundError: If the store has no document with this id
        """
        document = self.store.get(document_id)
        artifacts = self.store.list_artifacts(document_id, newest_first=newest_first)
        attachments = self.store.list_attachments(document_id, newest_first=newest_first)
        return self.generator.generate(
            document,
            artifacts=artifacts,
            attachments=attachments,
            summary_only=summary_only,
        )
