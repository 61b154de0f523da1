# utils/__init__.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Utility module exports
#
# The document reader/writer lives in utils.model_io and is imported from
# there; it depends on core, which itself logs through this package.

from .logger import (
    ChoreoLogger,
    LogEntry,
    LogLevel,
    configure_logging,
    get_logger,
    set_log_level,
)

__all__ = [
    "ChoreoLogger",
    "LogEntry",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_log_level",
]
