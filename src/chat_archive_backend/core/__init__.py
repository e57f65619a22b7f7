"""
Core archive processing: parsing, validation and generation.
"""

# archive_processor must be imported before validation, which reads its policies
from . import archive_processor
from . import validation

__all__ = ["archive_processor", "validation"]
