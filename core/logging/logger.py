"""
Centralized logging configuration for the event dispatcher.

Uses rotating file handler with logs stored in logs/ directory.
Includes colored console output for debug mode.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

from versioning import APP_NAME, APP_VERSION


_VERBOSE: bool = False
# Default base directory for logs: the project root.
_BASE_DIR: Path = Path(__file__).parent.parent.parent
_LOG_DIR: Optional[Path] = None
# Handlers installed by setup_logging(), so a second call replaces them.
_INSTALLED_HANDLERS: List[logging.Handler] = []

LOG_FILE_NAME = "eventdispatcher.log"
LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'

_env_verbose = os.getenv("EVENTDISPATCH_VERBOSE")
if _env_verbose is not None:
    _VERBOSE = str(_env_verbose).strip().lower() in ("1", "true", "on", "yes")


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original_levelname = record.levelname
        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = original_levelname
        return f"{color}{message}{self.RESET}"


def get_log_dir() -> Path:
    """Return the directory used for log files."""
    if _LOG_DIR is not None:
        return _LOG_DIR
    return _BASE_DIR / "logs"


def setup_logging(
    debug: bool = False,
    verbose: bool = False,
    log_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Configure application logging with file rotation.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: When True, enables per-dispatch debug lines that are
            otherwise skipped. Verbose mode also implies debug-level logging.
        log_dir: Directory for the log file, defaults to <project>/logs

    Returns:
        Path: The log file in use
    """
    global _VERBOSE, _LOG_DIR

    debug_enabled = debug or verbose
    if log_dir is not None:
        _LOG_DIR = Path(log_dir)

    directory = get_log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / LOG_FILE_NAME

    level = logging.DEBUG if debug_enabled else logging.INFO
    root_logger = logging.getLogger()

    for handler in _INSTALLED_HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _INSTALLED_HANDLERS.clear()

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)
    _INSTALLED_HANDLERS.append(file_handler)

    if debug_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)
        _INSTALLED_HANDLERS.append(console_handler)

    root_logger.setLevel(level)
    _VERBOSE = bool(verbose)

    root_logger.info("=" * 60)
    root_logger.info(
        "%s %s logging initialized (debug=%s, verbose=%s)",
        APP_NAME,
        APP_VERSION,
        debug_enabled,
        _VERBOSE,
    )
    root_logger.info("=" * 60)
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""
    return _VERBOSE
