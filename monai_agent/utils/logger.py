"""
Logger Utility
==============

Leveled, context-aware logging for the SDK.

Every component gets its own named logger so output can be traced back to
where it came from:

    [2025-03-01T10:30:00] [INFO] [Agent] Sending message for wallet 0xABC...

Features:
1. Log levels (DEBUG, INFO, WARN, ERROR) filtered by LOG_LEVEL
2. Color-coded terminal output, errors routed to stderr
3. Optional structured metadata, printed as JSON under the message
4. Optional file sinks (error.log / combined.log) when LOG_DIR is set

Usage:
    from monai_agent.utils.logger import Logger, log

    log.info("SDK loaded")

    tool_logger = Logger("Tools")
    tool_logger.debug("Dispatching call", {"tool": "get_balance"})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any


class LogLevel(IntEnum):
    """
    Log levels with numeric values for comparison.
    Higher values = more severe = always shown.
    """
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[34m"    # Blue
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
    """
    Resolve the minimum level to print.

    LOG_LEVEL wins when set. Otherwise production deployments
    (MONAI_ENV=production) log at INFO and everything else at DEBUG.
    """
    explicit = os.getenv("LOG_LEVEL")
    if explicit:
        return _LEVEL_NAMES.get(explicit.upper(), LogLevel.INFO)

    if os.getenv("MONAI_ENV", "").lower() == "production":
        return LogLevel.INFO
    return LogLevel.DEBUG


def _get_log_dir_from_env() -> Path | None:
    value = os.getenv("LOG_DIR")
    return Path(value) if value else None


class Logger:
    """
    A context-aware logger with colored output.

    Example:
        logger = Logger("RunDriver")
        logger.info("Run created", {"run_id": "run_123"})

        child = logger.child("Poll")
        child.debug("Still queued")  # [RunDriver:Poll] Still queued
    """

    def __init__(self, context: str = ""):
        """
        Initialize a logger with an optional context.

        Args:
            context: A prefix for all log messages (e.g., "Agent", "Tools")
        """
        self.context = context
        self._min_level = _get_log_level_from_env()
        self._log_dir = _get_log_dir_from_env()

    def child(self, child_context: str) -> "Logger":
        """
        Create a child logger with additional context.

        Args:
            child_context: Additional context to append

        Returns:
            A new Logger whose context is "<parent>:<child>"
        """
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(self, level: str, message: str, color: str = "") -> str:
        """
        Format a log line.

        Output format: [TIMESTAMP] [LEVEL] [context] message
        """
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        if not color:
            return f"[{timestamp}] [{level}] {context_str}{message}"

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _write_files(self, level: LogLevel, line: str) -> None:
        """Append a plain line to the file sinks, if configured."""
        if self._log_dir is None:
            return

        self._log_dir.mkdir(parents=True, exist_ok=True)
        targets = ["combined.log"]
        if level >= LogLevel.ERROR:
            targets.append("error.log")

        for name in targets:
            with open(self._log_dir / name, "a", encoding="utf-8") as fh:
                fh.write(line + "\n")

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        """
        Internal logging method.

        Args:
            level: The log level for filtering
            level_name: Display name of the level
            color: ANSI color code for the level
            message: The log message
            data: Optional structured metadata
        """
        if level < self._min_level:
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(self._format_message(level_name, message, color), file=stream)

        data_str = json.dumps(data, indent=2, default=str) if data else None
        if data_str:
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

        plain = self._format_message(level_name, message)
        if data_str:
            plain = f"{plain} {json.dumps(data, default=str)}"
        self._write_files(level, plain)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message. Hidden unless the minimum level is DEBUG."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a warning: something looks wrong but work continues."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    warn = warning

    def error(
        self,
        message: str,
        error: BaseException | None = None,
        data: dict[str, Any] | None = None
    ) -> None:
        """
        Log an error message.

        Errors are always shown regardless of log level.

        Args:
            message: The error message
            error: Optional exception to include details from
            data: Optional extra structured metadata
        """
        payload = dict(data) if data else {}
        if error is not None:
            payload["error_type"] = type(error).__name__
            payload["error_message"] = str(error)
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, payload or None)


# Default logger instance for general use
log = Logger("MonAI")
