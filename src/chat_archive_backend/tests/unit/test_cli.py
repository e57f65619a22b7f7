"""
Tests for the chat-archive CLI.

Commands are invoked through typer's CliRunner from a temporary working
directory, so no configuration file or .env is picked up.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from chat_archive_backend import __version__
from chat_archive_backend.cli.cli import app, cli_main
from chat_archive_backend.core.archive_processor import ArchiveParser, MarkdownGenerator


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("CHAT_ARCHIVE_LOG_LEVEL", "CHAT_ARCHIVE_SCHEMA_DIR", "CHAT_ARCHIVE_ACCEPT_UNBRACKETED_TAGS"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def archive_file(workdir, sample_archive):
    path = workdir / "archive.md"
    path.write_text(sample_archive, encoding="utf-8")
    return path


class TestValidateCommand:
    """Test the validate command."""
    
    def test_valid_archive(self, runner, archive_file):
        result = runner.invoke(app, ["validate", "archive.md"])
        
        assert result.exit_code == 0
        assert "valid archive 'Gradle Build Migration'" in result.output
        assert "2 artifacts" in result.output
    
    def test_invalid_archive_lists_issues(self, runner, workdir, make_archive):
        """Test that every issue is printed and the exit code is 1."""
        (workdir / "bad.md").write_text(make_archive(ARTIFACT_COUNT=2), encoding="utf-8")
        result = runner.invoke(app, ["validate", "bad.md"])
        
        assert result.exit_code == 1
        assert "1 issue found" in result.output
        assert "ARTIFACT_COUNT is 2" in result.output
    
    def test_missing_file(self, runner, workdir):
        result = runner.invoke(app, ["validate", "nope.md"])
        assert result.exit_code != 0
    
    def test_non_utf8_file(self, runner, workdir):
        (workdir / "binary.md").write_bytes(b"\xff\xfe\x00bad")
        result = runner.invoke(app, ["validate", "binary.md"])
        
        assert result.exit_code == 1
        assert "Encoding Error" in result.output


class TestParseCommand:
    """Test the parse command."""
    
    def test_json_output(self, runner, archive_file):
        result = runner.invoke(app, ["parse", "archive.md"])
        
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["metadata"]["title"] == "Gradle Build Migration"
        assert data["metadata"]["artifact_count"] == 2
        assert [a["title"] for a in data["artifacts"]] == ["build.gradle.kts", "migrate.sh"]
    
    def test_table_output(self, runner, archive_file):
        result = runner.invoke(app, ["parse", "archive.md", "--output", "table"])
        
        assert result.exit_code == 0
        assert "Artifacts" in result.output
        assert "pom.xml" in result.output
    
    def test_config_file_policies(self, runner, workdir, make_archive):
        """Test that policies from the configuration file reach the parser."""
        (workdir / "chatarchive.config.json").write_text(
            json.dumps({"policies": {"accept_unbracketed_tags": True}}), encoding="utf-8"
        )
        body = "# Tagged\n\n**Date:** 2025-09-30\n**Tags:** one, two\n\n## Initial Query\n\nQ\n\n---\n\n## Key Insights\n\nI\n"
        (workdir / "tags.md").write_text(make_archive(body=body), encoding="utf-8")
        
        result = runner.invoke(app, ["parse", "tags.md"])
        
        assert result.exit_code == 0
        assert json.loads(result.stdout)["metadata"]["tags"] == ["one", "two"]
    
    def test_missing_explicit_config(self, runner, archive_file):
        result = runner.invoke(app, ["--config", "missing.json", "parse", "archive.md"])
        
        assert result.exit_code == 1
        assert "Configuration Error" in result.output


class TestRenderCommand:
    """Test the render command."""
    
    def test_render_to_stdout(self, runner, archive_file, sample_archive):
        """Test that output is exactly the canonical rendering."""
        expected = MarkdownGenerator().generate(ArchiveParser().parse(sample_archive).document)
        result = runner.invoke(app, ["render", "archive.md"])
        
        assert result.exit_code == 0
        assert result.stdout == expected
    
    def test_render_summary_only(self, runner, archive_file):
        result = runner.invoke(app, ["render", "archive.md", "--summary-only"])
        
        assert result.exit_code == 0
        assert result.stdout.startswith("# Gradle Build Migration\n")
        assert "ARTIFACT_START" not in result.stdout
    
    def test_render_to_file(self, runner, archive_file, workdir):
        result = runner.invoke(app, ["render", "archive.md", "--out", "clean.md"])
        
        assert result.exit_code == 0
        assert "Wrote" in result.output
        assert (workdir / "clean.md").read_text(encoding="utf-8").startswith("---\nARCHIVE_FORMAT_VERSION: 1.0\n")


class TestMiscCommands:
    """Test version and the console entry point."""
    
    def test_version(self, runner, workdir):
        result = runner.invoke(app, ["version"])
        
        assert result.exit_code == 0
        assert __version__ in result.output
    
    def test_keyboard_interrupt(self):
        with patch("chat_archive_backend.cli.cli.app", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                cli_main()
        assert exc_info.value.code == 130
    
    def test_unexpected_error(self):
        with patch("chat_archive_backend.cli.cli.app", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                cli_main()
        assert exc_info.value.code == 1
