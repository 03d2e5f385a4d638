"""
Logging configuration for leakproof.

Provides environment-aware logging that:
- Writes to stderr so hook output on stdout stays clean
- Outputs JSON when LEAKPROOF_LOG_FORMAT=json
- Supports an optional rotating log file
- Includes custom TRACE level for per-evaluation debugging
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Any

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

DEFAULT_LOG_LEVEL = 'WARNING'
HUMAN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Add a trace method to the logger
def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


add_trace_to_logger()


class JsonFormatter(logging.Formatter):
    """JSON formatter for log collectors"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        # Fields passed through log_with_context
        if hasattr(record, 'extra'):
            log_data.update(record.extra)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def resolve_level(level_str: Optional[str]) -> int:
    """Convert a level name (including TRACE) to its numeric value"""
    if not level_str:
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    if level_str.upper() == 'TRACE':
        return TRACE_LEVEL
    return getattr(logging, level_str.upper(), logging.WARNING)


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
    enable_rotation: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure logging based on environment.

    Args:
        log_level: Override log level (defaults to LEAKPROOF_LOG_LEVEL, then LOG_LEVEL, then WARNING)
        log_file: Optional path to a log file in addition to stderr
        json_format: Emit JSON records (defaults to LEAKPROOF_LOG_FORMAT=json)
        enable_rotation: Enable log rotation for file handler
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    add_trace_to_logger()
    # LEAKPROOF_LOG_LEVEL takes precedence over LOG_LEVEL
    level_str = (
        log_level
        or os.environ.get('LEAKPROOF_LOG_LEVEL')
        or os.environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL)
    )
    level = resolve_level(level_str)

    if json_format is None:
        json_format = os.environ.get('LEAKPROOF_LOG_FORMAT', '').lower() == 'json'

    formatter = JsonFormatter() if json_format else logging.Formatter(HUMAN_FORMAT)

    # Only replace handlers on the package logger, hosts own the root logger
    package_logger = logging.getLogger('leakproof')
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    package_logger.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if enable_rotation:
            file_handler = RotatingFileHandler(
                str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count
            )
        else:
            file_handler = logging.FileHandler(str(log_path))
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(level)
    package_logger.propagate = False

    package_logger.debug(f"Logging configured - Level: {level_str.upper()}, JSON: {json_format}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'extra': context} if context else {}
    logger.log(level, message, extra=extra)
