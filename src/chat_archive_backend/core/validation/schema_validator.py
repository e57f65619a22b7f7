"""
Schema validation for assembled archive trees.

The document schema is external, versioned configuration: JSON Schema files
shipped in ``chat_archive_backend/schemas`` or a replacement directory. They
are loaded once per directory and shared read-only afterwards.

Validation never stops early. Every ``jsonschema`` error and every count
cross-check failure is returned so that an author fixing the archive sees all
defects in one pass.
"""

import copy
import json
import logging
import re
import threading
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

import jsonschema

from ...exceptions.config_exceptions import ConfigurationSchemaError
from ...models.archive_schema import ArchiveDocument
from ..archive_processor.policies import CountPolicy
from .result import CountMismatch, SchemaViolation, ValidationIssue

logger = logging.getLogger(__name__)

BUNDLED_SCHEMA_DIR = Path(__file__).resolve().parent.parent.parent / "schemas"
DOCUMENT_SCHEMA = "archive-document.schema.json"

_REQUIRED_PROPERTY_RE = re.compile(r"^'(?P<name>.+?)' is a required property$")

# Count key, metadata field, tree list, noun, expected syntax
COUNT_RULES = (
    (
        "ARTIFACT_COUNT", "artifact_count", "artifacts", "artifacts",
        "blocks delimited by <!-- ARTIFACT_START: ... --> and <!-- ARTIFACT_END -->",
    ),
    (
        "ATTACHMENT_COUNT", "attachment_count", "attachments", "attachments",
        'blocks delimited by <!-- MARKDOWN_START: filename="..." --> and '
        '<!-- MARKDOWN_END: filename="..." -->',
    ),
    (
        "WORKAROUNDS_COUNT", "workarounds_count", "workarounds", "workarounds",
        "'- **filename**: description' bullets under '## Workarounds Used'",
    ),
)


class SchemaRegistry:
    """
    Loads the archive document schema and its referenced files.
    
    Cross-file ``$ref`` values naming a sibling file are inlined at load time,
    so the compiled validator works without a network or file resolver.
    Local ``#/definitions/...`` references are left for jsonschema.
    """
    
    def __init__(self, schema_dir: Optional[Path] = None) -> None:
        self.schema_dir = Path(schema_dir) if schema_dir else BUNDLED_SCHEMA_DIR
        self._raw: Dict[str, Dict[str, Any]] = {}
        self._document_schema: Optional[Dict[str, Any]] = None
        self._validator: Optional[jsonschema.Draft7Validator] = None
        self._lock = threading.RLock()
    
    def load(self, name: str) -> Dict[str, Any]:
        """
        Load one schema file by name.
        
        Raises:
            ConfigurationSchemaError: If the file is missing or not valid JSON
        """
        if name in self._raw:
            return self._raw[name]
        
        path = self.schema_dir / name
        if not path.exists():
            raise ConfigurationSchemaError(f"Archive schema file not found: {path}", str(path))
        try:
            with open(path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationSchemaError(
                f"Invalid JSON in archive schema {name}: {e}",
                str(path),
                [str(e)],
            ) from e
        
        logger.debug(f"Loaded archive schema {path}")
        self._raw[name] = schema
        return schema
    
    def _inline(self, node: Any, seen: Set[str]) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str) and not ref.startswith("#"):
                if ref in seen:
                    raise ConfigurationSchemaError(
                        f"Circular schema reference to {ref}", str(self.schema_dir / ref)
                    )
                target = copy.deepcopy(self.load(ref))
                target.pop("$schema", None)
                target.pop("$id", None)
                return self._inline(target, seen | {ref})
            return {key: self._inline(value, seen) for key, value in node.items()}
        if isinstance(node, list):
            return [self._inline(item, seen) for item in node]
        return node
    
    @property
    def document_schema(self) -> Dict[str, Any]:
        """The top-level document schema with file references inlined."""
        with self._lock:
            if self._document_schema is None:
                self._document_schema = self._inline(self.load(DOCUMENT_SCHEMA), {DOCUMENT_SCHEMA})
            return self._document_schema
    
    @property
    def validator(self) -> jsonschema.Draft7Validator:
        """
        Compiled validator for the document schema, built on first access.
        
        Raises:
            ConfigurationSchemaError: If the schema itself is invalid
        """
        if self._validator is None:
            with self._lock:
                if self._validator is None:
                    self._validator = self._compile()
        return self._validator
    
    def _compile(self) -> jsonschema.Draft7Validator:
        schema = self.document_schema
        try:
            jsonschema.Draft7Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ConfigurationSchemaError(
                f"Invalid archive schema: {e.message}",
                str(self.schema_dir / DOCUMENT_SCHEMA),
                [e.message],
            ) from e
        logger.debug(f"Compiled archive document schema from {self.schema_dir}")
        return jsonschema.Draft7Validator(schema, format_checker=jsonschema.FormatChecker())


@lru_cache(maxsize=None)
def get_schema_registry(schema_dir: Optional[str] = None) -> SchemaRegistry:
    """
    Return the process-wide registry for ``schema_dir`` (bundled schemas by default).
    
    The schemas are loaded and compiled before the registry is returned, so
    parses sharing it only ever read the compiled validator.
    
    Raises:
        ConfigurationSchemaError: If the schemas cannot be loaded or are invalid
    """
    registry = SchemaRegistry(Path(schema_dir) if schema_dir else None)
    registry.validator
    return registry


def format_path(parts: Iterable[Any]) -> str:
    return ".".join(str(part) for part in parts)


class SchemaValidator:
    """Checks an assembled tree against the document schema and the declared counts."""
    
    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        count_policy: Optional[CountPolicy] = None,
    ) -> None:
        self.registry = registry or get_schema_registry()
        self.count_policy = count_policy or CountPolicy()
    
    def validate(self, tree: Dict[str, Any], covered: Iterable[str] = ()) -> List[ValidationIssue]:
        """
        Report every schema violation and count mismatch in ``tree``.
        
        Args:
            tree: Assembled document tree
            covered: Paths such as ``summary.initial_query`` whose absence was
                already reported by an earlier stage; missing-property errors
                for them are not repeated
            
        Returns:
            Schema violations sorted by path, followed by count mismatches
        """
        covered = set(covered)
        violations: List[SchemaViolation] = []
        
        for error in self.registry.validator.iter_errors(tree):
            path = format_path(error.absolute_path)
            if error.validator == "required":
                missing = _REQUIRED_PROPERTY_RE.match(error.message)
                if missing:
                    field_path = format_path([*error.absolute_path, missing.group("name")])
                    if field_path in covered:
                        continue
                    path = field_path
            violations.append(SchemaViolation(
                message=f"Invalid archive field '{path or '<document>'}': {error.message}",
                path=path,
            ))
        
        violations.sort(key=lambda violation: violation.path or "")
        issues: List[ValidationIssue] = list(violations)
        issues.extend(self.check_counts(tree))
        
        if issues:
            logger.warning(f"Archive tree failed validation with {len(issues)} issues")
        return issues
    
    def check_counts(self, tree: Dict[str, Any]) -> List[CountMismatch]:
        """
        Compare declared counts with the parsed lists.
        
        A positive declared count with nothing found is always reported. Other
        differences are reported when the count policy requires exact counts.
        Counts that are not integers are left to the schema check.
        """
        metadata = tree.get("metadata") or {}
        mismatches: List[CountMismatch] = []
        
        for count_key, field_name, list_name, noun, syntax in COUNT_RULES:
            declared = metadata.get(field_name)
            if not isinstance(declared, int) or isinstance(declared, bool):
                continue
            found = len(tree.get(list_name) or [])
            
            if declared > 0 and found == 0:
                message = (
                    f"{count_key} is {declared} but no {noun} were found - expected {syntax}"
                )
            elif self.count_policy.require_exact and declared != found:
                message = (
                    f"{count_key} is {declared} but {found} {noun} were found. Set {count_key} "
                    f"to the number of {noun} actually present, each written as {syntax}"
                )
            else:
                continue
            
            mismatches.append(CountMismatch(
                message=message,
                count_key=count_key,
                declared_count=declared,
                found_count=found,
            ))
        return mismatches
    
    def to_document(self, tree: Dict[str, Any]) -> ArchiveDocument:
        """Convert a tree that passed :meth:`validate` into the immutable document."""
        return ArchiveDocument.from_dict(tree)
