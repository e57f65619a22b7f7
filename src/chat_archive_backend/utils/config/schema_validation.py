"""
Schema validation for configuration management.

The configuration schema is bundled with the package next to the archive
document schemas.
"""

import logging
from typing import Any, Dict, Optional

import jsonschema

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationSchemaError,
    ConfigurationValidationError,
)
from .file_operations import FileOperations
from .paths import ConfigPaths

logger = logging.getLogger(__name__)


class ConfigSchemaValidator:
    """Validates a configuration dictionary against ``config.schema.json``."""
    
    def __init__(self, file_ops: FileOperations, paths: ConfigPaths) -> None:
        self.file_ops = file_ops
        self.paths = paths
        self._schema: Optional[Dict[str, Any]] = None
    
    def load_schema(self) -> Dict[str, Any]:
        """
        Load the configuration schema.
        
        Raises:
            ConfigurationSchemaError: If the schema file is missing or invalid JSON
        """
        if self._schema is not None:
            return self._schema
        
        schema_file = self.file_ops.resolve_path(
            f"{self.paths.SCHEMA_DIR}/{self.paths.DEFAULT_CONFIG_SCHEMA}"
        )
        try:
            self._schema = self.file_ops.load_json_file(schema_file)
        except ConfigurationError as e:
            raise ConfigurationSchemaError(
                f"Configuration schema could not be loaded: {e}",
                str(schema_file),
            ) from e
        return self._schema
    
    def validate_config(self, config: Dict[str, Any], config_file: str = "unknown") -> None:
        """
        Validate ``config`` and report every violation at once.
        
        Raises:
            ConfigurationValidationError: If the configuration does not match the schema
            ConfigurationSchemaError: If the schema itself is invalid
        """
        schema = self.load_schema()
        try:
            jsonschema.Draft7Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ConfigurationSchemaError(
                f"Invalid configuration schema: {e.message}",
                schema_errors=[e.message],
            ) from e
        
        validator = jsonschema.Draft7Validator(schema)
        errors = sorted(
            validator.iter_errors(config),
            key=lambda e: ".".join(str(p) for p in e.absolute_path),
        )
        if not errors:
            return
        
        validation_errors = []
        invalid_fields = []
        for error in errors:
            field_path = ".".join(str(p) for p in error.absolute_path) or "<root>"
            validation_errors.append(f"{field_path}: {error.message}")
            invalid_fields.append(field_path)
        
        logger.error(f"Configuration validation failed with {len(errors)} errors")
        raise ConfigurationValidationError(
            f"Configuration validation failed: {validation_errors[0]}",
            config_file,
            validation_errors,
            invalid_fields,
        )
