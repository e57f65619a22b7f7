"""
Utilities package for the chat archive backend.

This package contains configuration management and logging setup.
"""

from .config import ConfigManager, ConfigPaths
from .logging_config import LogFormat, configure_logging

__all__ = [
    "ConfigManager",
    "ConfigPaths",
    "LogFormat",
    "configure_logging",
]
