"""
Environment variable overrides for configuration.

Each supported variable maps to a dotted configuration key and a target type.
"""

import logging
import os
from copy import deepcopy
from typing import Any, Dict, Mapping, Optional, Tuple

from ...exceptions.config_exceptions import EnvironmentVariableError

logger = logging.getLogger(__name__)

ENV_MAPPING: Dict[str, Tuple[str, str]] = {
    'CHAT_ARCHIVE_SCHEMA_DIR': ('schema_dir', 'string'),
    'CHAT_ARCHIVE_LOG_LEVEL': ('logging.level', 'log_level'),
    'CHAT_ARCHIVE_LOG_FORMAT': ('logging.format', 'string'),
    'CHAT_ARCHIVE_DEFAULT_TITLE': ('policies.default_title', 'string'),
    'CHAT_ARCHIVE_ACCEPT_UNBRACKETED_TAGS': ('policies.accept_unbracketed_tags', 'boolean'),
    'CHAT_ARCHIVE_REQUIRE_EXACT_COUNTS': ('policies.require_exact_counts', 'boolean'),
}

TRUE_VALUES = ('true', '1', 'yes', 'on', 'enabled')
FALSE_VALUES = ('false', '0', 'no', 'off', 'disabled')


class EnvironmentHandler:
    """Applies ``CHAT_ARCHIVE_*`` environment variables on top of a configuration."""
    
    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self.environ = environ if environ is not None else os.environ
    
    def convert_env_value(self, name: str, value: str, target_type: str) -> Any:
        """
        Convert an environment variable string to its configuration type.
        
        Raises:
            EnvironmentVariableError: If the value cannot be converted
        """
        if target_type == 'boolean':
            lowered = value.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise EnvironmentVariableError(
                f"Environment variable {name}={value!r} is not a boolean "
                f"(use one of {', '.join(TRUE_VALUES + FALSE_VALUES)})",
                name,
            )
        if target_type == 'log_level':
            return value.strip().upper()
        return value
    
    def apply_environment_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return a copy of ``config`` with environment overrides applied.
        
        Empty variables are ignored.
        """
        result = deepcopy(config)
        for env_var, (config_key, target_type) in ENV_MAPPING.items():
            env_value = self.environ.get(env_var)
            if env_value is None or env_value == "":
                continue
            converted = self.convert_env_value(env_var, env_value, target_type)
            self._set_nested_value(result, config_key, converted)
            logger.debug(f"Applied environment override: {env_var} -> {config_key}")
        return result
    
    def _set_nested_value(self, config: Dict[str, Any], key_path: str, value: Any) -> None:
        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})
        current[keys[-1]] = value
