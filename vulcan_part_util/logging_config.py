"""
Logging configuration for the Vulcan partition table utility.

Provides configurable logging with support for verbose and quiet modes.
Advisory table findings are logged at WARNING, so they remain visible in
quiet mode.
"""

import logging
import os
import sys
from typing import TextIO

# Log levels for the application
QUIET = logging.WARNING
NORMAL = logging.INFO
VERBOSE = logging.DEBUG

# Create a custom logger for the application
logger = logging.getLogger('vulcan_part_util')


class ColorFormatter(logging.Formatter):
    """
    Custom formatter that adds colors for terminal output.

    Falls back to plain text if colors are not supported.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, fmt: str | None = None, use_colors: bool = True, stream: TextIO | None = None):
        super().__init__(fmt)
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    def _supports_color(self, stream: TextIO) -> bool:
        """Check if the output stream supports color."""
        if sys.platform == 'win32':
            try:
                return os.isatty(stream.fileno()) and 'TERM' in os.environ
            except (AttributeError, OSError, ValueError):
                return False
        return hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional colors."""
        message = super().format(record)

        if self.use_colors and record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            reset = self.COLORS['RESET']
            return f"{color}{message}{reset}"

        return message


def setup_logging(
    level: int = NORMAL,
    stream: TextIO | None = None,
    use_colors: bool = True,
    format_string: str | None = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (QUIET, NORMAL, or VERBOSE)
        stream: Output stream (defaults to stderr)
        use_colors: Whether to use colored output
        format_string: Custom format string (optional)
    """
    if stream is None:
        stream = sys.stderr

    if format_string is None:
        if level <= logging.DEBUG:
            format_string = '%(levelname)s: %(name)s: %(message)s'
        else:
            format_string = '%(levelname)s: %(message)s'

    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(format_string, use_colors, stream))

    logger.addHandler(handler)
    logger.setLevel(level)

    # Don't propagate to root logger
    logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (optional, uses package logger if not specified)

    Returns:
        Logger instance
    """
    if name is None:
        return logger
    return logger.getChild(name)


def log_violation(log: logging.Logger, violation) -> None:
    """
    Log a partition table finding.

    Advisory findings go out at WARNING, tagged with their code and the
    partition they concern. Fatal findings are reported to the user by the
    command layer, so they are only traced at DEBUG.

    Args:
        log: Module logger
        violation: Violation from the builder or analyzer
    """
    where = f"partition {violation.entry + 1}: " if violation.entry is not None else ""
    level = logging.DEBUG if violation.fatal else logging.WARNING
    log.log(level, "%s%s [%s]", where, violation.message, violation.code)


# Initialize with default settings
setup_logging()
