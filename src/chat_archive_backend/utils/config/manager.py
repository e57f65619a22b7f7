"""
Main configuration manager for the chat archive backend.

Configuration is assembled from three layers, later layers winning:
built-in defaults, the optional ``chatarchive.config.json`` file, and
``CHAT_ARCHIVE_*`` environment variables (``.env`` is loaded first through
python-dotenv). The merged result is validated against the bundled schema.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...core.archive_processor.policies import ParsePolicies
from ...exceptions.config_exceptions import ConfigurationError
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .paths import ConfigPaths
from .schema_validation import ConfigSchemaValidator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "schema_dir": None,
    "policies": {
        "default_title": "Untitled Archive",
        "conversation_date_default_today": True,
        "accept_unbracketed_tags": False,
        "require_exact_counts": True,
    },
    "logging": {
        "level": "WARNING",
        "format": "standard",
    },
}


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = deepcopy(value)
    return result


class ConfigManager:
    """
    Configuration manager for the chat archive backend.
    
    Example:
        >>> manager = ConfigManager()
        >>> parser = ArchiveParser(policies=manager.parse_policies())
    """
    
    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        project_root: Optional[Union[str, Path]] = None,
        load_env: bool = True,
        environ: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Initialize the ConfigManager.
        
        Args:
            config_file: Configuration file; when given it must exist
                (default: optional chatarchive.config.json in the project root)
            project_root: Project root directory (default: current working directory)
            load_env: Whether to load environment variables from .env file
            environ: Environment mapping to read overrides from (default: os.environ)
        """
        self.project_root = Path(project_root or os.getcwd()).resolve()
        self.paths = ConfigPaths()
        self.explicit_file = config_file is not None
        self.config_file = str(config_file) if config_file else self.paths.DEFAULT_CONFIG_FILE
        
        self._config: Dict[str, Any] = {}
        self._loaded = False
        
        self.file_ops = FileOperations(self.project_root, self.paths.ENV_FILE)
        self.schema_validator = ConfigSchemaValidator(self.file_ops, self.paths)
        self.env_handler = EnvironmentHandler(environ)
        
        if load_env:
            self.file_ops.load_environment_variables()
    
    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration. Loads if not already loaded."""
        if not self._loaded:
            self.load_config()
        return deepcopy(self._config)
    
    @property
    def is_loaded(self) -> bool:
        return self._loaded
    
    def load_config(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Load configuration from all sources.
        
        Returns:
            Loaded configuration dictionary
            
        Raises:
            ConfigurationFileNotFoundError: If an explicitly given file is missing
            ConfigurationValidationError: If the merged configuration is invalid
            ConfigurationError: If the file cannot be read
        """
        if self._loaded and not force_reload:
            return deepcopy(self._config)
        
        config = deepcopy(DEFAULT_CONFIG)
        config_path = self.file_ops.resolve_path(self.config_file)
        if self.explicit_file or config_path.exists():
            config = merge_configs(config, self.file_ops.load_json_file(config_path))
        else:
            logger.debug(f"No configuration file at {config_path}, using defaults")
        
        try:
            config = self.env_handler.apply_environment_overrides(config)
            self.schema_validator.validate_config(config, str(config_path))
        except ConfigurationError as e:
            logger.error(f"Configuration loading failed: {e}")
            self._loaded = False
            raise
        
        self._config = config
        self._loaded = True
        logger.debug("Configuration loaded successfully")
        return deepcopy(self._config)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key using dot notation.
        
        Args:
            key: Configuration key such as ``policies.default_title``
            default: Default value if key not found
        """
        config = self.config
        try:
            for k in key.split('.'):
                config = config[k]
            return config
        except (KeyError, TypeError):
            return default
    
    def reset(self) -> None:
        """Reset configuration state, forcing reload on next access."""
        self._config = {}
        self._loaded = False
    
    def parse_policies(self) -> ParsePolicies:
        """Lenient-parsing policies built from the ``policies`` section."""
        return ParsePolicies.from_config(self.get("policies", {}))
    
    def schema_dir(self) -> Optional[Path]:
        """Directory of replacement document schemas, or None for the bundled ones."""
        value = self.get("schema_dir")
        return self.file_ops.resolve_path(value) if value else None
