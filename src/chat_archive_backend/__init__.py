"""
Chat archive backend.

Parses conversation archive markdown into validated documents and renders
documents back into the canonical archive text.
"""

__version__ = "0.1.0"
