"""
Configuration management package for the chat archive backend.

Components:
- paths: File names and the bundled schema directory
- file_operations: Path resolution, .env loading and JSON loading
- environment: CHAT_ARCHIVE_* environment overrides
- schema_validation: jsonschema validation of the merged configuration
- manager: ConfigManager, the entry point
"""

from .paths import ConfigPaths
from .file_operations import FileOperations
from .environment import EnvironmentHandler, ENV_MAPPING
from .schema_validation import ConfigSchemaValidator
from .manager import ConfigManager, DEFAULT_CONFIG, merge_configs

__all__ = [
    "ConfigPaths",
    "FileOperations",
    "EnvironmentHandler",
    "ENV_MAPPING",
    "ConfigSchemaValidator",
    "ConfigManager",
    "DEFAULT_CONFIG",
    "merge_configs",
]
