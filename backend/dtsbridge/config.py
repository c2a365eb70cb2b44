"""
Configuration and logging setup for dtsbridge.

Environment variables (``DTSBRIDGE_LOG_LEVEL``, ``DTSBRIDGE_LOG_FILE``,
``DTSBRIDGE_OUTPUT_DIR``) provide defaults that command line options override.
"""

import os
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, List, Optional

ENV_PREFIX = 'DTSBRIDGE_'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Marks handlers installed here so a second call replaces only those
_HANDLER_TAG = '_dtsbridge_handler'


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(ENV_PREFIX + name) or default


def _build_handlers(level: int, log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8',
        ))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
    return handlers


def setup_logging(log_level: str = None, log_file: str = None) -> logging.Logger:
    """Configure console and optional rotating file logging for a conversion run.

    Args:
        log_level: Logging level name, case-insensitive; falls back to
            ``DTSBRIDGE_LOG_LEVEL`` and then INFO
        log_file: Path of a log file to write next to the console output

    Returns:
        The ``dtsbridge`` package logger
    """
    level_name = (log_level or _env('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        if getattr(handler, _HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    for handler in _build_handlers(level, log_file):
        root_logger.addHandler(handler)

    package_logger = logging.getLogger('dtsbridge')
    destination = f" and {log_file}" if log_file else ""
    package_logger.info(f"Logging {level_name} to console{destination}")
    return package_logger


def get_config() -> Dict[str, Optional[str]]:
    """Get converter settings from environment variables."""
    return {
        'LOG_LEVEL': _env('LOG_LEVEL', 'INFO'),
        'LOG_FILE': _env('LOG_FILE'),
        'OUTPUT_DIR': _env('OUTPUT_DIR'),
    }
