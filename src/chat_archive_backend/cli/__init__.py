"""
Command-line interface for the chat archive backend.
"""

from .cli import app, cli_main

__all__ = ["app", "cli_main"]
