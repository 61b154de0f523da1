# utils/logger.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Logging utility for choreography editing with an advisory log history

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional


class LogLevel(Enum):
    """Log levels for choreography tooling."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One advisory line as shown to the user (wall-clock time + message)."""

    time: str
    message: str

    def __str__(self) -> str:
        return f"[{self.time}] {self.message}"


class ChoreoLogger:
    """Centralized logger for choreography editing with an advisory history.

    Besides forwarding to the standard ``logging`` machinery, the logger keeps
    every advisory message (additions, deletions, rejected edits) in an
    in-memory history so a front end can show it as a log panel.

    The history belongs to the process-wide instance returned by
    ``get_logger``, so every editor in the process appends to the same panel.
    """

    def __init__(self, name: str = "regrada", level: LogLevel = LogLevel.INFO):
        """Initialize the choreography logger.

        Args:
            name: Logger name (typically module name)
            level: Default logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(ChoreoFormatter())

        self.logger.addHandler(console_handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

        self._history: List[LogEntry] = []

    def set_level(self, level: LogLevel):
        """Change the logging level."""
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    # Core logging methods
    def debug(self, message: str, **kwargs):
        """Log debug message (engine internals)."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message (general progress)."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message (unexpected but recoverable)."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message (serious problems)."""
        self.logger.error(message, **kwargs)

    # Advisory history
    def advise(self, message: str):
        """Record an advisory message and log it at INFO level."""
        self._history.append(LogEntry(datetime.now().strftime("%H:%M:%S"), message))
        self.info(message)

    def rejected(self, reason: str, message: str):
        """Record a refused edit. The model is left untouched by the caller."""
        self._history.append(LogEntry(datetime.now().strftime("%H:%M:%S"), message))
        self.warning(f"Rejected ({reason}): {message}")

    def logs(self) -> List[LogEntry]:
        """Return a copy of the advisory history, oldest first."""
        return list(self._history)

    def clear_logs(self):
        self._history.clear()

    # Specialized methods for simulation runs
    def simulation_toggled(self, running: bool):
        self.advise("Simulation started" if running else "Simulation stopped")

    def event_fired(self, event_id: str, effects: str):
        self.debug(f"    🔥 {event_id} fired → {effects or 'no effects'}")


class ChoreoFormatter(logging.Formatter):
    """Custom formatter with clean output for INFO and above."""

    def format(self, record):
        if record.levelno >= logging.WARNING:
            return f"[{record.levelname}] {record.getMessage()}"

        if record.levelno == logging.INFO:
            return record.getMessage()

        return f"[DEBUG] {record.getMessage()}"


# Global logger instance
_global_logger: Optional[ChoreoLogger] = None


def get_logger(name: str = "regrada") -> ChoreoLogger:
    """Get or create the global choreography logger instance.

    Args:
        name: Logger name (default: "regrada")

    Returns:
        ChoreoLogger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = ChoreoLogger(name)
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global log level.

    Args:
        level: New log level
    """
    get_logger().set_level(level)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif verbose:
        set_log_level(LogLevel.INFO)
    else:
        set_log_level(LogLevel.WARNING)
