"""
Storage package for archived documents and their artifact/attachment records.
"""

from .archive_store import ArchiveStore, InMemoryArchiveStore

__all__ = ["ArchiveStore", "InMemoryArchiveStore"]
