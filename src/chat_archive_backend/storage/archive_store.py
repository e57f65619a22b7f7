"""
Archive persistence collaborator.

A validated document is stored as one record, and its artifacts and
attachments as separate records keyed by the document id. Records keep their
insertion sequence so they can be returned oldest-first or newest-first for
regeneration.
"""

import itertools
import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, List, Protocol, Tuple
from uuid import uuid4

from ..exceptions.archive_exceptions import ArchiveNotFoundError
from ..models.archive_schema import ArchiveDocument, Artifact, Attachment

logger = logging.getLogger(__name__)


class ArchiveStore(Protocol):
    """Storage interface used by ArchiveService."""
    
    def save(self, document: ArchiveDocument) -> str: ...
    
    def get(self, document_id: str) -> ArchiveDocument: ...
    
    def list_artifacts(self, document_id: str, newest_first: bool = False) -> List[Artifact]: ...
    
    def list_attachments(self, document_id: str, newest_first: bool = False) -> List[Attachment]: ...
    
    def delete(self, document_id: str) -> None: ...


@dataclass(frozen=True)
class _Record:
    document_id: str
    sequence: int
    item: object


class InMemoryArchiveStore:
    """
    Thread-safe in-process store.
    
    The stored document keeps only its metadata, summary and workarounds;
    artifacts and attachments live in their own record lists.
    
    Example:
        >>> store = InMemoryArchiveStore()
        >>> document_id = store.save(result.document)
        >>> store.list_artifacts(document_id, newest_first=True)
    """
    
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._documents: Dict[str, ArchiveDocument] = {}
        self._artifacts: Dict[str, List[_Record]] = {}
        self._attachments: Dict[str, List[_Record]] = {}
    
    def save(self, document: ArchiveDocument) -> str:
        document_id = str(uuid4())
        with self._lock:
            self._documents[document_id] = replace(document, artifacts=(), attachments=())
            self._artifacts[document_id] = [
                _Record(document_id, next(self._sequence), artifact) for artifact in document.artifacts
            ]
            self._attachments[document_id] = [
                _Record(document_id, next(self._sequence), attachment)
                for attachment in document.attachments
            ]
        logger.info(
            f"Stored archive {document_id} with {len(document.artifacts)} artifacts "
            f"and {len(document.attachments)} attachments"
        )
        return document_id
    
    def get(self, document_id: str) -> ArchiveDocument:
        """
        Return the stored document with its artifacts and attachments in insertion order.
        
        Raises:
            ArchiveNotFoundError: If no document has this id
        """
        with self._lock:
            document = self._require(document_id)
            artifacts, attachments = self._items(document_id)
        return replace(document, artifacts=artifacts, attachments=attachments)
    
    def list_artifacts(self, document_id: str, newest_first: bool = False) -> List[Artifact]:
        with self._lock:
            self._require(document_id)
            return self._ordered(self._artifacts[document_id], newest_first)
    
    def list_attachments(self, document_id: str, newest_first: bool = False) -> List[Attachment]:
        with self._lock:
            self._require(document_id)
            return self._ordered(self._attachments[document_id], newest_first)
    
    def delete(self, document_id: str) -> None:
        with self._lock:
            self._require(document_id)
            del self._documents[document_id]
            del self._artifacts[document_id]
            del self._attachments[document_id]
        logger.info(f"Deleted archive {document_id}")
    
    def __len__(self) -> int:
        return len(self._documents)
    
    def _require(self, document_id: str) -> ArchiveDocument:
        try:
            return self._documents[document_id]
        except KeyError:
            raise ArchiveNotFoundError(document_id) from None
    
    def _items(self, document_id: str) -> Tuple[tuple, tuple]:
        return (
            tuple(record.item for record in self._artifacts[document_id]),
            tuple(record.item for record in self._attachments[document_id]),
        )
    
    @staticmethod
    def _ordered(records: List[_Record], newest_first: bool) -> list:
        ordered = sorted(records, key=lambda record: record.sequence, reverse=newest_first)
        return [record.item for record in ordered]
