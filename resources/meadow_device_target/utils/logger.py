"""
Logging utilities for Meadow Device Target.

This module provides colored console output, file logging, and a shared
application logger used by services, the CLI and the GUI.
"""

import logging
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class LogLevel(Enum):
    """Log levels understood by the application logger."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    HIGHLIGHT = 25  # Between INFO and WARNING

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Get a log level from its name, defaulting to INFO."""
        try:
            return cls[name.upper()]
        except KeyError:
            return cls.INFO


logging.addLevelName(LogLevel.HIGHLIGHT.value, "HIGHLIGHT")


class ColorCodes:
    """ANSI color codes for console output."""
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    BLUE = "\033[0;34m"
    PURPLE = "\033[0;35m"
    GRAY = "\033[0;37m"
    NC = "\033[0m"

    _ANSI_PATTERN = re.compile(r'\x1b\[[0-9;]*m')

    @classmethod
    def for_level(cls, level: int) -> str:
        """Get the color used for a logging level."""
        if level >= logging.ERROR:
            return cls.RED
        if level >= logging.WARNING:
            return cls.YELLOW
        if level == LogLevel.HIGHLIGHT.value:
            return cls.PURPLE
        if level >= logging.INFO:
            return cls.BLUE
        return cls.GRAY

    @classmethod
    def strip_colors(cls, message: str) -> str:
        """Remove ANSI color sequences from a message."""
        return cls._ANSI_PATTERN.sub('', message)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    def __init__(self, colored: bool = True):
        super().__init__('[%(asctime)s] %(levelname)s %(message)s', datefmt='%H:%M:%S')
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.colored:
            return ColorCodes.strip_colors(message)
        color = ColorCodes.for_level(record.levelno)
        return f"{color}{message}{ColorCodes.NC}"


class MeadowLogger(logging.LoggerAdapter):
    """Application logger with a highlight level for important messages."""

    def __init__(self, logger: logging.Logger, log_file: Optional[Path] = None):
        super().__init__(logger, {})
        self.log_file = log_file

    def highlight(self, message: str, *args, **kwargs) -> None:
        """Log a message at HIGHLIGHT level."""
        self.log(LogLevel.HIGHLIGHT.value, message, *args, **kwargs)


APP_LOGGER_NAME = "meadow_device_target"

_global_logger: Optional[MeadowLogger] = None


def setup_logging(colored: bool = True,
                  log_file: Optional[Union[str, Path]] = None,
                  level: LogLevel = LogLevel.INFO) -> MeadowLogger:
    """
    Configure the application logger.

    Args:
        colored: Use ANSI colors on the console
        log_file: Optional file receiving all messages at DEBUG level
        level: Console log level

    Returns:
        Configured application logger
    """
    global _global_logger

    base_logger = logging.getLogger(APP_LOGGER_NAME)
    base_logger.setLevel(logging.DEBUG)

    # Calling setup twice must not duplicate output
    for handler in list(base_logger.handlers):
        base_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level.value)
    console.setFormatter(ColoredFormatter(colored=colored))
    base_logger.addHandler(console)

    file_path = None
    if log_file:
        file_path = Path(log_file)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(file_path, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s %(levelname)s %(name)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            base_logger.addHandler(file_handler)
        except OSError as e:
            base_logger.warning(f"Could not open log file {file_path}: {e}")
            file_path = None

    base_logger.propagate = False

    _global_logger = MeadowLogger(base_logger, file_path)
    return _global_logger


def get_logger() -> MeadowLogger:
    """
    Get the application logger.

    Raises:
        RuntimeError: If setup_logging() hasn't been called
    """
    if _global_logger is None:
        raise RuntimeError("Logging not initialized. Call setup_logging() first.")
    return _global_logger
