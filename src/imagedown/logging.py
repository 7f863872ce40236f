"""Logging utilities for imagedown.

Everything the extension reports goes through a single ``imagedown`` logger:
- debug messages explain why an image was left unenhanced (only with --verbose)
- info (CLI progress such as "Wrote out.html") goes to stdout
- warnings (unknown config keys) and errors (invalid config) go to stderr
"""

import logging
import sys

_logger: logging.Logger | None = None


class CleanFormatter(logging.Formatter):
    """Formatter that outputs the bare message."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


class PrefixFormatter(logging.Formatter):
    """Formatter that prefixes warnings and errors with their level name."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.capitalize()}: {record.getMessage()}"
        return record.getMessage()


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the imagedown logger.

    Args:
        verbose: Show debug messages (skipped attribute tokens, failed resizes).

    Returns:
        The configured logger instance.
    """
    global _logger

    logger = logging.getLogger("imagedown")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(lambda r: r.levelno < logging.WARNING)
    stdout_handler.setFormatter(CleanFormatter())

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(PrefixFormatter())

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the imagedown logger, initializing with defaults if needed."""
    global _logger
    if _logger is None:
        _logger = setup_logging(verbose=False)
    return _logger


def debug(msg: str) -> None:
    """Log a diagnostic message (only shown with --verbose)."""
    get_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message."""
    get_logger().info(msg)


def warning(msg: str) -> None:
    """Log a warning message to stderr."""
    get_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message to stderr."""
    get_logger().error(msg)
