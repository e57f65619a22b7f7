"""Tests for issue values, the issue collector and ParseResult."""

import pytest

from chat_archive_backend.core.validation import (
    CountMismatch,
    IssueCollector,
    IssueKind,
    MissingFrontmatter,
    ParseResult,
    SchemaViolation,
    missing_section,
)


class TestIssues:
    """Tests for issue values."""
    
    def test_kinds(self):
        assert MissingFrontmatter().kind is IssueKind.MISSING_FRONTMATTER
        assert CountMismatch("m").kind is IssueKind.COUNT_MISMATCH
        assert SchemaViolation("m").kind is IssueKind.SCHEMA_VIOLATION
    
    def test_missing_section_names_heading(self):
        """Test that the message quotes the exact heading an author must add."""
        issue = missing_section("Key Insights", "Purpose.")
        
        assert issue.section == "Key Insights"
        assert issue.kind is IssueKind.MISSING_REQUIRED_SECTION
        assert "'## Key Insights'" in str(issue)
    
    def test_issues_are_values(self):
        assert SchemaViolation("m", path="a") == SchemaViolation("m", path="a")


class TestIssueCollector:
    """Tests for IssueCollector."""
    
    def test_collects_without_stopping(self):
        """Test that issues from several stages are kept in order."""
        collector = IssueCollector()
        collector.add(MissingFrontmatter())
        collector.add(None)
        collector.extend([SchemaViolation("a"), SchemaViolation("b")])
        
        assert len(collector) == 3
        assert collector.has_issues()
        assert [i.message for i in collector.issues[1:]] == ["a", "b"]
    
    def test_finalize_failure_does_not_build(self):
        """Test that a failed result never builds a document."""
        collector = IssueCollector()
        collector.add(SchemaViolation("bad"))
        
        def build():
            raise AssertionError("build must not be called")
        
        result = collector.finalize(build)
        assert result.document is None
        assert result.errors == ["bad"]
        assert not result.is_valid
    
    def test_finalize_success(self, parsed_sample):
        result = IssueCollector().finalize(lambda: parsed_sample)
        
        assert result.is_valid
        assert result.issues == []
        assert result.document is parsed_sample


class TestParseResult:
    """Tests for ParseResult."""
    
    def test_failure_needs_an_issue(self):
        with pytest.raises(ValueError):
            ParseResult.failure([])
    
    def test_issues_of(self):
        result = ParseResult.failure([SchemaViolation("a"), CountMismatch("b"), SchemaViolation("c")])
        assert [i.message for i in result.issues_of(IssueKind.SCHEMA_VIOLATION)] == ["a", "c"]
