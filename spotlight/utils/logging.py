"""
Logging utilities for Spotlight
Provides console setup and structured logging for edit sessions
"""

import json
import logging
import sys
from typing import Optional, Dict, Any

import colorlog

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StructuredLogger:
    """Provides structured logging with metadata"""

    def __init__(self, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Initialize structured logger

        Args:
            name: Logger name
            metadata: Default metadata to include in all logs
        """
        self.logger = logging.getLogger(name)
        self.metadata = metadata or {}

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with metadata"""
        data = {**self.metadata, **kwargs}
        if data:
            return f"{message} | {json.dumps(data, default=str)}"
        return message

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message, **kwargs))


def setup_console_logging(level: str = "INFO", color: bool = True,
                          fmt: str = DEFAULT_FORMAT):
    """
    Setup console logging with optional color support

    Args:
        level: Logging level name
        color: Whether to use colored output when stdout is a terminal
        fmt: Log record format
    """
    console_handler = logging.StreamHandler(sys.stdout)

    if color and sys.stdout.isatty():
        formatter = colorlog.ColoredFormatter(
            '%(log_color)s' + fmt + '%(reset)s',
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )
    else:
        formatter = logging.Formatter(fmt)

    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Replace handlers from a previous call instead of stacking them
    for handler in list(root_logger.handlers):
        if getattr(handler, '_spotlight_console', False):
            root_logger.removeHandler(handler)
    console_handler._spotlight_console = True
    root_logger.addHandler(console_handler)
    return console_handler
