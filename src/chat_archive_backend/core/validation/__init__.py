"""
Validation package: issue values, parse results and schema checks.
"""

from .result import (
    IssueKind,
    ValidationIssue,
    MissingFrontmatter,
    MalformedFrontmatter,
    MissingRequiredSection,
    CountMismatch,
    SchemaViolation,
    ParseResult,
    IssueCollector,
    missing_section,
)
from .schema_validator import SchemaRegistry, SchemaValidator, get_schema_registry

__all__ = [
    "IssueKind",
    "ValidationIssue",
    "MissingFrontmatter",
    "MalformedFrontmatter",
    "MissingRequiredSection",
    "CountMismatch",
    "SchemaViolation",
    "ParseResult",
    "IssueCollector",
    "missing_section",
    "SchemaRegistry",
    "SchemaValidator",
    "get_schema_registry",
]
