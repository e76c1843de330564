"""
png2ico logging - rotating file log plus optional rich console output.

File logs are stored under config.LOG_DIR (~/.png2ico/logs by default).
"""

import logging
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from png2ico import config

LOG_NAME = "png2ico"

_logger = None
_console_handler = None


def get_logger() -> logging.Logger:
    """Get or create the png2ico logger."""
    global _logger

    if _logger is not None:
        return _logger

    _logger = logging.getLogger(LOG_NAME)
    _logger.setLevel(logging.DEBUG)
    # Keep records out of the root logger's handlers
    _logger.propagate = False

    # Avoid duplicate handlers
    if _logger.handlers:
        return _logger

    try:
        config.LOG_DIR.mkdir(parents=True, exist_ok=True)
        # File handler with rotation (5MB max, keep 3 backups)
        file_handler = RotatingFileHandler(
            config.LOG_DIR / "png2ico.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        # Read-only home or similar; run without a log file, and keep
        # logging.lastResort from echoing records to stderr
        _logger.addHandler(logging.NullHandler())
        return _logger

    file_handler.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    _logger.addHandler(file_handler)

    return _logger


def enable_console(level: int = logging.DEBUG) -> None:
    """Mirror log records to stderr through rich (used by --verbose)."""
    global _console_handler

    logger = get_logger()
    if _console_handler is None:
        _console_handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        logger.addHandler(_console_handler)
    _console_handler.setLevel(level)


def disable_console() -> None:
    """Detach the console handler added by enable_console()."""
    global _console_handler

    if _console_handler is not None:
        get_logger().removeHandler(_console_handler)
        _console_handler = None


# Convenience functions
def log_info(msg: str) -> None:
    """Log info message."""
    get_logger().info(msg)


def log_error(msg: str) -> None:
    """Log error message."""
    get_logger().error(msg)


def log_warning(msg: str) -> None:
    """Log warning message."""
    get_logger().warning(msg)


def log_debug(msg: str) -> None:
    """Log debug message."""
    get_logger().debug(msg)
