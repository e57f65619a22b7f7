"""
Configuration and schema resource exceptions for the chat archive backend.

Each error carries the file it concerns and a list of hints naming the
setting that controls it: the ``--config`` option and
``chatarchive.config.json``, the ``CHAT_ARCHIVE_*`` environment variables,
or ``schema_dir`` for the archive document schemas.
"""

from typing import List, Optional, Sequence

CONFIG_FILE_NAME = "chatarchive.config.json"
SCHEMA_DIR_VARIABLE = "CHAT_ARCHIVE_SCHEMA_DIR"


class ConfigurationError(Exception):
    """Base exception for configuration and schema loading errors."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        hints: Optional[Sequence[str]] = None
    ) -> None:
        """
        Args:
            message: What went wrong
            config_file: Configuration or schema file involved, if any
            hints: Settings or commands the user can change to fix it
        """
        super().__init__(message)
        self.config_file = config_file
        self.hints: List[str] = list(hints or ())

    def details(self) -> List[str]:
        """Extra lines printed between the message and the hints."""
        return []

    def __str__(self) -> str:
        lines = [super().__str__()]
        if self.config_file:
            lines.append(f"File: {self.config_file}")
        lines.extend(self.details())
        lines.extend(f"Hint: {hint}" for hint in self.hints)
        return "\n".join(lines)


class ConfigurationFileNotFoundError(ConfigurationError):
    """A configuration file given with ``--config`` does not exist."""

    def __init__(self, message: str, config_file: Optional[str] = None) -> None:
        super().__init__(message, config_file, [
            "Pass --config a path to an existing JSON file",
            f"Drop --config to read {CONFIG_FILE_NAME} from the working directory "
            "or run with built-in defaults",
        ])


class ConfigurationValidationError(ConfigurationError):
    """The configuration file does not match ``schemas/config.schema.json``."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        invalid_fields: Optional[List[str]] = None
    ) -> None:
        hints = ["Allowed keys are schema_dir, logging.level, logging.format and policies.*"]
        if invalid_fields:
            hints.append(f"Fix or remove: {', '.join(invalid_fields)}")
        super().__init__(message, config_file, hints)
        self.validation_errors = validation_errors or []
        self.invalid_fields = invalid_fields or []

    def details(self) -> List[str]:
        if not self.validation_errors:
            return []
        return ["Validation errors:"] + [f"  - {error}" for error in self.validation_errors]


class EnvironmentVariableError(ConfigurationError):
    """A ``CHAT_ARCHIVE_*`` override holds a value of the wrong type."""

    def __init__(self, message: str, variable_name: Optional[str] = None) -> None:
        hints = []
        if variable_name:
            hints.append(f"Correct or unset {variable_name} in the environment or .env")
        super().__init__(message, None, hints)
        self.variable_name = variable_name


class ConfigurationSchemaError(ConfigurationError):
    """An archive or configuration schema file is missing or invalid."""

    def __init__(
        self,
        message: str,
        schema_file: Optional[str] = None,
        schema_errors: Optional[List[str]] = None
    ) -> None:
        super().__init__(message, schema_file, [
            f"Point schema_dir (or {SCHEMA_DIR_VARIABLE}) at a directory holding "
            "archive-document.schema.json and every file it references",
            f"Unset schema_dir and {SCHEMA_DIR_VARIABLE} to use the schemas bundled with the package",
        ])
        self.schema_errors = schema_errors or []

    def details(self) -> List[str]:
        return [f"  - {error}" for error in self.schema_errors]
