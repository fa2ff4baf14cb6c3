"""Logging configuration for the kwindo CLI.

Provides:
- WARNING level by default, DEBUG with --debug
- Colored level names on terminals
- Subprocess call logging
- Timing of the load/run/read phases
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any


DEFAULT_FORMAT = "%(levelname)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``kwindo`` logger.

    Args:
        debug: Enable debug logging (DEBUG level)

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logging(debug=True)
        >>> logger.debug("===== Generate KWin script =====")
        2026-10-16 10:30:45 [DEBUG] kwindo: ===== Generate KWin script =====
    """
    logger = logging.getLogger('kwindo')
    logger.handlers.clear()

    if debug:
        logger.setLevel(logging.DEBUG)
        log_format = DEBUG_FORMAT
    else:
        logger.setLevel(logging.WARNING)
        log_format = DEFAULT_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    if sys.stderr.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def log_subprocess_call(cmd: list, result: Any, logger: logging.Logger) -> None:
    """Log subprocess call with result.

    Args:
        cmd: Command list
        result: subprocess.CompletedProcess result
        logger: Logger instance
    """
    logger.debug(f"Subprocess call: {' '.join(cmd)}")
    logger.debug(f"  Return code: {result.returncode}")

    stderr = getattr(result, 'stderr', None)
    if stderr:
        stderr = stderr if isinstance(stderr, str) else stderr.decode()
        logger.debug(f"  stderr: {stderr[:200]}")


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Examples:
        >>> with log_timing("Run script", logger):
        ...     script.run()
        DEBUG: Run script completed in 15.32ms
    """
    start = time.perf_counter()
    logger.debug(f"===== {operation} =====")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{operation} completed in {elapsed_ms:.2f}ms")
