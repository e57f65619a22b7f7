"""Tests for the narrative section extractor."""

from chat_archive_backend.core.archive_processor import LineIndex, SectionExtractor, Span
from chat_archive_backend.core.archive_processor.sections import parse_item_list
from chat_archive_backend.core.validation import IssueKind


BODY = """# Title

## Initial Query

How do I migrate?
Second line.

**Attachments referenced:** [pom.xml, build.log]

---

## Key Insights

Catalogs replace the BOM.

**Key points:**
- Point one
- Point two

**Artifacts created:** [build.gradle.kts]

---

## References/Links

- [Gradle docs](https://docs.gradle.org)
- Version catalogs: https://docs.gradle.org/catalogs
- Discussion in the team channel
"""


class TestSectionExtractor:
    """Tests for SectionExtractor."""
    
    def setup_method(self):
        self.extractor = SectionExtractor()
    
    def test_initial_query(self):
        """Test description and attachment list of the Initial Query section."""
        result = self.extractor.extract(LineIndex(BODY))
        query = result.summary["initial_query"]
        
        assert query["description"] == "How do I migrate?\nSecond line."
        assert query["attachments_referenced"] == ["pom.xml", "build.log"]
        assert query["artifacts_created"] == []
    
    def test_key_insights_with_key_points(self):
        """Test that key points are read from the bullet list after the marker."""
        insights = self.extractor.extract(LineIndex(BODY)).summary["key_insights"]
        
        assert insights["description"] == "Catalogs replace the BOM."
        assert insights["key_points"] == ["Point one", "Point two"]
        assert insights["artifacts_created"] == ["build.gradle.kts"]
    
    def test_missing_follow_up_defaults_to_empty(self):
        """Test that an absent optional section becomes an empty section."""
        follow_up = self.extractor.extract(LineIndex(BODY)).summary["follow_up_explorations"]
        assert follow_up == {"description": "", "artifacts_created": [], "attachments_referenced": []}
    
    def test_references(self):
        """Test markdown and plain links; descriptive bullets are skipped."""
        references = self.extractor.extract(LineIndex(BODY)).summary["references"]
        
        assert references == [
            {"description": "Gradle docs", "url": "https://docs.gradle.org"},
            {"description": "Version catalogs", "url": "https://docs.gradle.org/catalogs"},
        ]
    
    def test_missing_references_defaults_to_empty(self):
        """Test that a body without References/Links yields an empty list."""
        body = "## Initial Query\n\nQ\n\n---\n\n## Key Insights\n\nI\n"
        assert self.extractor.extract(LineIndex(body)).summary["references"] == []
    
    def test_missing_required_sections(self):
        """Test that each missing required section gives exactly one issue."""
        result = self.extractor.extract(LineIndex("# Title\n\n## Follow-up Explorations\n\nMore\n"))
        
        assert [issue.kind for issue in result.issues] == [IssueKind.MISSING_REQUIRED_SECTION] * 2
        assert [issue.section for issue in result.issues] == ["Initial Query", "Key Insights"]
        assert "'## Initial Query'" in result.issues[0].message
        assert "initial_query" not in result.summary
        assert "key_insights" not in result.summary
        assert result.summary["follow_up_explorations"]["description"] == "More"
    
    def test_section_stops_at_next_heading(self):
        """Test that a section without a divider ends at the next level-2 heading."""
        body = "## Initial Query\n\nQuestion\n## Key Insights\n\nAnswer\n"
        summary = self.extractor.extract(LineIndex(body)).summary
        
        assert summary["initial_query"]["description"] == "Question"
        assert summary["key_insights"]["description"] == "Answer"
        assert summary["key_insights"]["key_points"] == []
    
    def test_heading_with_trailing_spaces(self):
        """Test that trailing whitespace after a heading is ignored."""
        body = "## Initial Query   \n\nQ\n\n---\n\n## Key Insights\t\n\nI\n"
        assert not self.extractor.extract(LineIndex(body)).issues
    
    def test_key_point_continuation_lines(self):
        """Test that an indented line under a key point is joined to that point."""
        body = (
            "## Key Insights\n\nFound it.\n\n**Key points:**\n"
            "- first point\n  continues here\n- second\n\n---\n"
        )
        insights = self.extractor.extract(LineIndex(body)).summary["key_insights"]
        
        assert insights["key_points"] == ["first point continues here", "second"]
        assert insights["description"] == "Found it."
    
    def test_headings_inside_blocks_are_ignored(self):
        """Test that a heading quoted inside artifact content does not open a section."""
        body = (
            "## Initial Query\n\nQ\n\n---\n\n"
            '<!-- ARTIFACT_START: type="document" title="Template" -->\n'
            "## Key Insights\n\nTemplate text\n"
            "<!-- ARTIFACT_END -->\n\n"
            "## Key Insights\n\nReal insight\n\n---\n"
        )
        index = LineIndex(body, blocks=[Span(6, 11)])
        summary = self.extractor.extract(index).summary
        
        assert summary["key_insights"]["description"] == "Real insight"


class TestParseItemList:
    """Tests for the bracketed item list parser."""
    
    def test_bracketed(self):
        assert parse_item_list(" [a.md, b.md]") == ["a.md", "b.md"]
    
    def test_bare(self):
        assert parse_item_list(" a.md, b.md") == ["a.md", "b.md"]
    
    def test_empty(self):
        assert parse_item_list(" []") == []
