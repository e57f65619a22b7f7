"""
Configuration file paths and constants for the chat archive backend.
"""

from dataclasses import dataclass
from pathlib import Path

BUNDLED_SCHEMA_DIR = Path(__file__).resolve().parent.parent.parent / "schemas"


@dataclass
class ConfigPaths:
    """Configuration file paths and constants."""
    
    DEFAULT_CONFIG_FILE: str = "chatarchive.config.json"
    SCHEMA_DIR: str = str(BUNDLED_SCHEMA_DIR)
    ENV_FILE: str = ".env"
    DEFAULT_CONFIG_SCHEMA: str = "config.schema.json"
