"""
Exceptions package for the chat archive backend.

This package contains custom exception classes for configuration handling
and archive storage operations.
"""

from .config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
    ConfigurationSchemaError,
)

from .archive_exceptions import (
    ArchiveError,
    ArchiveNotFoundError,
)

__all__ = [
    # Configuration exceptions
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EnvironmentVariableError",
    "ConfigurationSchemaError",
    # Archive exceptions
    "ArchiveError",
    "ArchiveNotFoundError",
]
