"""Tests for the canonical markdown generator."""

from datetime import date

import pytest

from chat_archive_backend.core.archive_processor.generator import (
    END_MARKER,
    NO_WORKAROUNDS,
    SUMMARY_NOTICE,
)
from chat_archive_backend.models import (
    ArchiveDocument,
    ArchiveMetadata,
    Artifact,
    Attachment,
    Completeness,
    ConversationSummary,
    InsightsSection,
    QuerySection,
    Reference,
    Workaround,
)


def make_document(**overrides) -> ArchiveDocument:
    metadata = ArchiveMetadata(
        version="1.0",
        archive_type="conversation_summary",
        created_date=date(2025, 10, 2),
        original_platform=overrides.pop("original_platform", "Claude"),
        attachment_count=0,
        artifact_count=0,
        completeness=Completeness.COMPLETE,
        workarounds_count=0,
        title=overrides.pop("title", "Generated Archive"),
        conversation_date=date(2025, 9, 30),
        total_file_size=overrides.pop("total_file_size", None),
        tags=overrides.pop("tags", ("a", "b")),
    )
    summary = ConversationSummary(
        initial_query=QuerySection(description="What?", attachments_referenced=("in.md",)),
        key_insights=InsightsSection(description="This.", key_points=("one", "two")),
        references=overrides.pop("references", ()),
    )
    return ArchiveDocument(metadata=metadata, summary=summary, **overrides)


class TestMarkdownGenerator:
    """Tests for MarkdownGenerator in full mode."""
    
    def test_none_document(self, generator):
        """Test that generating without a document is an error."""
        with pytest.raises(ValueError):
            generator.generate(None)
    
    def test_structure_order(self, generator):
        """Test that the parts of a full archive appear in order."""
        document = make_document(
            artifacts=(Artifact(type="code", title="a.py", content="x = 1"),),
            attachments=(Attachment(filename="in.md", content="# In"),),
        )
        markdown = generator.generate(document)
        
        positions = [markdown.index(marker) for marker in (
            "ARCHIVE_FORMAT_VERSION: 1.0",
            "INSTRUCTIONS_FOR_AI: |",
            "# Generated Archive",
            "## Initial Query",
            "## Key Insights",
            "## Follow-up Explorations",
            "## References/Links",
            "## Conversation Artifacts",
            "## Attachments",
            "## Workarounds Used",
            "## Archive Metadata",
            END_MARKER,
        )]
        assert positions == sorted(positions)
        assert markdown.startswith("---\n")
        assert markdown.endswith(f"{END_MARKER}\n")
    
    def test_header(self, generator):
        markdown = generator.generate(make_document())
        
        assert "**Date:** 2025-09-30  \n" in markdown
        assert "**Tags:** [a, b]\n" in markdown
    
    def test_tags_line_omitted_without_tags(self, generator):
        assert "**Tags:**" not in generator.generate(make_document(tags=()))
    
    def test_total_file_size_optional(self, generator):
        """Test that TOTAL_FILE_SIZE is only written when known."""
        assert "TOTAL_FILE_SIZE" not in generator.generate(make_document())
        assert "TOTAL_FILE_SIZE: 12KB\n" in generator.generate(make_document(total_file_size="12KB"))
    
    def test_frontmatter_values_are_quoted_when_needed(self, generator):
        """Test that a value YAML would misread is written as a quoted string."""
        markdown = generator.generate(make_document(original_platform="Claude: Opus"))
        assert 'ORIGINAL_PLATFORM: "Claude: Opus"\n' in markdown
    
    def test_artifact_attributes_omitted_when_absent(self, generator):
        """Test that absent attributes are left out instead of written empty."""
        document = make_document(artifacts=(Artifact(type="code", title="a.py", content="pass"),))
        markdown = generator.generate(document)
        
        assert '<!-- ARTIFACT_START: type="code" title="a.py" -->\npass\n<!-- ARTIFACT_END -->' in markdown
        assert 'language=' not in markdown.split("## Conversation Artifacts")[1]
    
    def test_artifact_all_attributes(self, generator):
        artifact = Artifact(
            type="code",
            title="a.py",
            content="pass",
            language="python",
            version="final",
            iterations="2",
            evolution_notes="# v2: renamed",
        )
        markdown = generator.generate(make_document(artifacts=(artifact,)))
        
        assert (
            '<!-- ARTIFACT_START: type="code" language="python" title="a.py" '
            'version="final" iterations="2" -->\n# v2: renamed\npass\n<!-- ARTIFACT_END -->'
        ) in markdown
    
    def test_quote_in_attribute_is_rejected(self, generator):
        """Test that a title containing a double quote cannot be written as a marker."""
        document = make_document(artifacts=(Artifact(type="code", title='say "hi"', content=""),))
        with pytest.raises(ValueError, match="double quote"):
            generator.generate(document)
    
    def test_empty_blocks_are_omitted(self, generator):
        """Test that empty artifact and attachment lists produce no section at all."""
        markdown = generator.generate(make_document())
        
        assert "## Conversation Artifacts" not in markdown
        assert "## Attachments" not in markdown
        assert "MARKDOWN_START" not in markdown.split("---\n\n# Generated Archive")[1]
    
    def test_empty_workarounds_sentence(self, generator):
        """Test that no workarounds is stated explicitly."""
        assert NO_WORKAROUNDS in generator.generate(make_document())
    
    def test_workaround_bullet(self, generator):
        workaround = Workaround(
            filename="big.log",
            workaround="Summarized",
            reason="too large",
            preserved="errors",
            lost="debug lines",
        )
        markdown = generator.generate(make_document(workarounds=(workaround,)))
        
        assert "- **big.log**: Summarized (too large). Preserved: errors. Omitted: debug lines.\n" in markdown
        assert NO_WORKAROUNDS not in markdown
    
    def test_trailing_parenthetical_without_reason_is_escaped(self, generator):
        """Test that a description ending in parentheses is not written as a reason."""
        workaround = Workaround(filename="t.csv", workaround="Converted table (CSV)")
        markdown = generator.generate(make_document(workarounds=(workaround,)))
        
        assert "- **t.csv**: Converted table \\(CSV).\n" in markdown
    
    def test_summarized_attachment_notice(self, generator):
        attachment = Attachment(
            filename="big.log",
            content="ERROR",
            is_summarized=True,
            original_size="2MB",
        )
        markdown = generator.generate(make_document(attachments=(attachment,)))
        
        assert (
            f'<!-- MARKDOWN_START: filename="big.log" -->\n\n{SUMMARY_NOTICE}\n'
            "- Original size: 2MB\n\nERROR\n\n"
            '<!-- MARKDOWN_END: filename="big.log" -->'
        ) in markdown
        assert "Summarization level" not in markdown.split("## Attachments")[1]
    
    def test_author_notice_is_not_doubled(self, generator):
        """Test that content opening with its own notice is written without the standard one."""
        attachment = Attachment(
            filename="app.log",
            content="**⚠️ WARNING: Only the first 500 of 12000 lines were kept**\n\nline1",
            is_summarized=True,
            original_size="12000 lines",
        )
        markdown = generator.generate(make_document(attachments=(attachment,)))
        
        assert SUMMARY_NOTICE not in markdown
        assert "- Original size" not in markdown
        assert (
            '<!-- MARKDOWN_START: filename="app.log" -->\n\n'
            "**⚠️ WARNING: Only the first 500 of 12000 lines were kept**\n\nline1\n\n"
        ) in markdown
    
    def test_descriptive_references_are_not_written(self, generator):
        """Test that only references with a URL are rendered as links."""
        document = make_document(references=(
            Reference(description="Docs", url="https://example.com"),
            Reference(description="A hallway conversation"),
        ))
        markdown = generator.generate(document)
        
        assert "- [Docs](https://example.com)\n" in markdown
        assert "hallway" not in markdown
    
    def test_caller_controls_order(self, generator):
        """Test that artifacts are written in the order given, without re-sorting."""
        first = Artifact(type="code", title="z.py", content="z")
        second = Artifact(type="code", title="a.py", content="a")
        markdown = generator.generate(make_document(), artifacts=[first, second])
        
        assert markdown.index('title="z.py"') < markdown.index('title="a.py"')
    
    def test_deterministic(self, generator):
        """Test that the same input always gives byte-identical output."""
        document = make_document(artifacts=(Artifact(type="code", title="a.py", content="x"),))
        assert generator.generate(document) == generator.generate(document)


class TestSummaryOnly:
    """Tests for summary-only generation."""
    
    def test_summary_only(self, generator):
        """Test that only the header and the four sections are rendered."""
        document = make_document(
            artifacts=(Artifact(type="code", title="a.py", content="x"),),
            workarounds=(Workaround(filename="f", workaround="w"),),
        )
        markdown = generator.generate(document, summary_only=True)
        
        assert markdown.startswith("# Generated Archive\n")
        assert "## Initial Query" in markdown
        assert "## References/Links" in markdown
        for absent in ("ARCHIVE_FORMAT_VERSION", "ARTIFACT_START", "## Workarounds Used",
                       "## Archive Metadata", END_MARKER):
            assert absent not in markdown
