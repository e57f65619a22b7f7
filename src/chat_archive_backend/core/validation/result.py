"""
Validation issues and the aggregated parse result.

Issues are values, not exceptions. Every stage of the pipeline appends to an
IssueCollector; the collector is finalised once into either a successful
ParseResult carrying the document or a failed one carrying every issue.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional

from ...models.archive_schema import ArchiveDocument


class IssueKind(Enum):
    """Category of a validation issue."""
    MISSING_FRONTMATTER = "missing_frontmatter"
    MALFORMED_FRONTMATTER = "malformed_frontmatter"
    MISSING_REQUIRED_SECTION = "missing_required_section"
    COUNT_MISMATCH = "count_mismatch"
    SCHEMA_VIOLATION = "schema_violation"
    
    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """Base class for one defect found in an archive."""
    message: str
    
    kind = IssueKind.SCHEMA_VIOLATION
    
    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class MissingFrontmatter(ValidationIssue):
    message: str = (
        "Missing YAML frontmatter at the beginning of the archive. Archives must start "
        "with '---' followed by metadata fields and a closing '---' line."
    )
    
    kind = IssueKind.MISSING_FRONTMATTER


@dataclass(frozen=True)
class MalformedFrontmatter(ValidationIssue):
    detail: Optional[str] = None
    
    kind = IssueKind.MALFORMED_FRONTMATTER


@dataclass(frozen=True)
class MissingRequiredSection(ValidationIssue):
    section: str = ""
    
    kind = IssueKind.MISSING_REQUIRED_SECTION


@dataclass(frozen=True)
class CountMismatch(ValidationIssue):
    count_key: str = ""
    declared_count: int = 0
    found_count: int = 0
    
    kind = IssueKind.COUNT_MISMATCH


@dataclass(frozen=True)
class SchemaViolation(ValidationIssue):
    path: Optional[str] = None
    
    kind = IssueKind.SCHEMA_VIOLATION


def missing_section(section: str, purpose: str) -> MissingRequiredSection:
    return MissingRequiredSection(
        message=(
            f"Missing required section: '## {section}'. {purpose} "
            "The author may have skipped this section or used a different heading."
        ),
        section=section,
    )


@dataclass
class ParseResult:
    """Outcome of one parse call: a document or the full list of issues."""
    document: Optional[ArchiveDocument] = None
    issues: List[ValidationIssue] = field(default_factory=list)
    
    @property
    def is_valid(self) -> bool:
        return self.document is not None and not self.issues
    
    @property
    def errors(self) -> List[str]:
        """Issue messages in report order."""
        return [issue.message for issue in self.issues]
    
    def issues_of(self, kind: IssueKind) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.kind is kind]
    
    @classmethod
    def success(cls, document: ArchiveDocument) -> "ParseResult":
        return cls(document=document, issues=[])
    
    @classmethod
    def failure(cls, issues: Iterable[ValidationIssue]) -> "ParseResult":
        issues = list(issues)
        if not issues:
            raise ValueError("A failed ParseResult needs at least one issue")
        return cls(document=None, issues=issues)


class IssueCollector:
    """Accumulates issues across pipeline stages without short-circuiting."""
    
    def __init__(self) -> None:
        self._issues: List[ValidationIssue] = []
    
    def add(self, issue: Optional[ValidationIssue]) -> None:
        if issue is not None:
            self._issues.append(issue)
    
    def extend(self, issues: Iterable[ValidationIssue]) -> None:
        for issue in issues:
            self.add(issue)
    
    @property
    def issues(self) -> List[ValidationIssue]:
        return list(self._issues)
    
    def has_issues(self) -> bool:
        return bool(self._issues)
    
    def __len__(self) -> int:
        return len(self._issues)
    
    def finalize(self, build: Callable[[], ArchiveDocument]) -> ParseResult:
        """
        Turn the collected issues into a result.
        
        ``build`` is only called when nothing was collected, so a failed parse
        never yields a partially built document.
        """
        if self._issues:
            return ParseResult.failure(self._issues)
        return ParseResult.success(build())
