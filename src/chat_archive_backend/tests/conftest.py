"""Shared test fixtures for chat archive backend tests."""

from datetime import date
from typing import Any, Dict, Optional

import pytest

from chat_archive_backend.core.archive_processor import (
    ArchiveParser,
    ConversationDatePolicy,
    MarkdownGenerator,
    ParsePolicies,
)

SAMPLE_ARCHIVE = '''---
ARCHIVE_FORMAT_VERSION: 1.0
ARCHIVE_TYPE: conversation_summary
CREATED_DATE: 2025-10-02
ORIGINAL_PLATFORM: Claude

INSTRUCTIONS_FOR_AI: |
  ## Artifact Format
  <!-- ARTIFACT_START: type="code" title="Example" -->
  [artifact content]
  <!-- ARTIFACT_END -->

  <!-- MARKDOWN_START: filename="example.md" -->
  [content]
  <!-- MARKDOWN_END: filename="example.md" -->

ATTACHMENT_COUNT: 2
ARTIFACT_COUNT: 2
ARCHIVE_COMPLETENESS: PARTIAL
WORKAROUNDS_COUNT: 1
TOTAL_FILE_SIZE: 45KB
---

# Gradle Build Migration

**Date:** 2025-09-30  
**Tags:** [java, gradle, build]

---

## Initial Query

The user wanted to migrate a Maven build to Gradle
without losing the custom release profile.

**Attachments referenced:** [pom.xml, build.log]

---

## Key Insights

Version catalogs replace the Maven BOM.

**Key points:**
- Use a version catalog for dependency versions
- Keep the release profile as a separate task

**Artifacts created:** [build.gradle.kts, migrate.sh]

---

## Follow-up Explorations

Configuration cache compatibility was checked.

---

## References/Links

- [Gradle migration guide](https://docs.gradle.org/current/userguide/migrating_from_maven.html)
- Version catalogs: https://docs.gradle.org/current/userguide/platforms.html
- The team wiki page on builds

---

## Conversation Artifacts

<!-- ARTIFACT_START: type="code" language="kotlin" title="build.gradle.kts" version="final" -->
plugins {
    java
}
<!-- ARTIFACT_END -->

<!-- ARTIFACT_START: type="code" language="bash" title="migrate.sh" version="v2" iterations="3" -->
# v1: copied pom dependencies
# v2: added release task
#!/usr/bin/env bash
set -euo pipefail
./gradlew init
<!-- ARTIFACT_END -->

---

## Attachments

<!-- MARKDOWN_START: filename="pom.xml" -->

```xml
<project>
  <artifactId>demo</artifactId>
</project>
```

<!-- MARKDOWN_END: filename="pom.xml" -->

<!-- MARKDOWN_START: filename="build.log" -->

**⚠️ NOTE: This attachment was summarized due to size limitations.**
- Original size: 2MB
- Summarization level: heavy
- Content preserved: error lines

[ERROR] Failed to execute goal
[ERROR] BUILD FAILURE

<!-- MARKDOWN_END: filename="build.log" -->

---

## Workarounds Used

_This section documents any limitations encountered during archiving._

- **build.log**: Summarized to error lines (file exceeded 1MB). Preserved: error lines. Omitted: debug output.

---

## Archive Metadata

**Original conversation date:** 2025-09-30  

---

_End of archived conversation_
'''

DEFAULT_FRONTMATTER: Dict[str, Any] = {
    "ARCHIVE_FORMAT_VERSION": "1.0",
    "ARCHIVE_TYPE": "conversation_summary",
    "CREATED_DATE": "2025-10-02",
    "ORIGINAL_PLATFORM": "ChatGPT",
    "ATTACHMENT_COUNT": 0,
    "ARTIFACT_COUNT": 0,
    "ARCHIVE_COMPLETENESS": "COMPLETE",
    "WORKAROUNDS_COUNT": 0,
}

MINIMAL_BODY = '''# Minimal Archive

**Date:** 2025-09-30  
**Tags:** [demo]

---

## Initial Query

What is a minimal archive?

---

## Key Insights

One with only the required sections.

---
'''


def build_archive(body: str = MINIMAL_BODY, **frontmatter: Any) -> str:
    """Render an archive from frontmatter overrides and a body; a None value drops the key."""
    fields = dict(DEFAULT_FRONTMATTER)
    fields.update(frontmatter)
    lines = ["---"]
    lines.extend(f"{key}: {value}" for key, value in fields.items() if value is not None)
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture
def sample_archive() -> str:
    """A complete, valid archive exercising every block type."""
    return SAMPLE_ARCHIVE


@pytest.fixture
def minimal_archive() -> str:
    """A valid archive with only the required sections and zero counts."""
    return build_archive()


@pytest.fixture
def make_archive():
    """Factory building archives from frontmatter overrides and a body."""
    return build_archive


@pytest.fixture
def fixed_today() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def parser(fixed_today) -> ArchiveParser:
    """Parser with default policies and a fixed 'today'."""
    policies = ParsePolicies(
        conversation_date=ConversationDatePolicy(today=lambda: fixed_today)
    )
    return ArchiveParser(policies=policies)


@pytest.fixture
def generator() -> MarkdownGenerator:
    return MarkdownGenerator()


@pytest.fixture
def parsed_sample(parser, sample_archive):
    result = parser.parse(sample_archive)
    assert result.is_valid, result.errors
    return result.document


@pytest.fixture
def minimal_body() -> str:
    """Body of the minimal archive, for tests that edit it before building."""
    return MINIMAL_BODY
