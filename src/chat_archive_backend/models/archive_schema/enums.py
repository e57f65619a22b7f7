"""
Enumeration types for the archive schema.

This module defines the enumeration types used throughout the archive model
for consistent classification and validation.
"""

from enum import Enum


class Completeness(Enum):
    """How faithfully the attachments of an archive were preserved."""
    COMPLETE = "COMPLETE"
    PARTIAL = "PARTIAL"
    SUMMARIZED = "SUMMARIZED"
    
    def __str__(self) -> str:
        return self.value


class ReferenceType(Enum):
    """Classification of a reference entry."""
    EXTERNAL_LINK = "EXTERNAL_LINK"
    DESCRIPTIVE = "DESCRIPTIVE"
    
    def __str__(self) -> str:
        return self.value
