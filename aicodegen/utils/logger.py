"""
Logger Utility
==============

Console logging for the assistant. Chat output and log output share the
same terminal, so the logger:

1. Filters by level (DEBUG, INFO, WARNING, ERROR) from LOG_LEVEL
2. Prefixes every line with a timestamp, level and component context
3. Colours the level tag so logs stand apart from the conversation
4. Can attach structured data (tool arguments, whole conversations)

The default level is WARNING: an interactive session only shows problems
unless LOG_LEVEL=info or LOG_LEVEL=debug is set.

Usage:
    from aicodegen.utils.logger import Logger

    logger = Logger("Agent")
    logger.info("Calling model")
    logger.error("Model call failed", error)
    logger.dump("Conversation at failure", conversation.to_openai_messages())
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Numeric log levels; a message is shown when level >= the minimum."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for coloured terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def _get_log_level_from_env() -> LogLevel:
    """Parse LOG_LEVEL, defaulting to WARNING for unknown or missing values."""
    level_str = os.getenv("LOG_LEVEL", "WARNING").upper()
    return _LEVEL_NAMES.get(level_str, LogLevel.WARNING)


class Logger:
    """
    A context-aware logger with coloured output.

    Example:
        logger = Logger("ToolExecutor")
        logger.info("Executing tool: read_file", {"path": "README.md"})

        child = logger.child("Summarizer")   # logs as [ToolExecutor:Summarizer]
    """

    def __init__(self, context: str = ""):
        """
        Args:
            context: Prefix shown on every line (e.g. "Agent", "Tools")
        """
        self.context = context
        self._min_level = _get_log_level_from_env()

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is nested under this one."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(self, level: str, message: str, color: str) -> str:
        """Format as: [TIMESTAMP] [LEVEL] [context] message"""
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: Any = None
    ) -> None:
        if level < self._min_level:
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(self._format_message(level_name, message, color), file=stream)

        if data is not None:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error. Always shown regardless of LOG_LEVEL.

        Args:
            message: What went wrong
            error: Optional exception; its type and text are attached
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)

    def dump(self, message: str, data: Any) -> None:
        """
        Print a diagnostic payload at ERROR level.

        Used after a failed turn to show the full conversation that was
        being sent, so the failure can be reproduced.
        """
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)
