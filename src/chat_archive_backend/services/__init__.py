"""
Services package for archive import and export.
"""

from .archive_service import ArchiveService

__all__ = ["ArchiveService"]
