"""
Archive-related exceptions.

Parse and validation problems are never raised; they are returned as issue
values inside a ParseResult. The exceptions here cover storage lookups for
an archive id that is not held.
"""

from typing import Optional


class ArchiveError(Exception):
    """Base exception for archive operations."""
    
    def __init__(self, message: str, document_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.document_id = document_id


class ArchiveNotFoundError(ArchiveError):
    """Raised when a stored archive cannot be found."""
    
    def __init__(self, document_id: str) -> None:
        super().__init__(f"Archive not found: {document_id}", document_id)
