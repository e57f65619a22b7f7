"""Data models for the chat archive backend."""

from .archive_schema import *  # noqa: F401,F403
from .archive_schema import __all__
