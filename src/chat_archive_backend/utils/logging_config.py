"""
Logging configuration for the chat archive backend.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are installed once by the application (the CLI, or an embedding service)
through :func:`configure_logging`.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

PACKAGE_LOGGER = "chat_archive_backend"


class LogFormat(Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log collectors."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False, default=str)


STANDARD_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_formatter(fmt: Union[str, LogFormat]) -> logging.Formatter:
    if LogFormat(fmt) is LogFormat.JSON:
        return JSONFormatter()
    return logging.Formatter(STANDARD_FORMAT)


def configure_logging(
    level: Union[str, int] = "WARNING",
    fmt: Union[str, LogFormat] = LogFormat.STANDARD,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Install a single handler on the package logger.
    
    Calling this again replaces the previous handler, so repeated CLI
    invocations in one process do not duplicate output.
    
    Args:
        level: Level name or number
        fmt: ``standard`` or ``json``; ignored when ``handler`` brings its own formatting
        handler: Handler to install (default: a stderr StreamHandler)
        
    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(create_formatter(fmt))
    
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
