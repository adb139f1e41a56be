"""Logging infrastructure for Forge.

Provides the Logger interface that is injected into every component, and a
no-op implementation used when nothing is supplied.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class LogLevel(enum.Enum):
    """Log verbosity levels for forge diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors
    ERROR = 1  # Fatal errors plus target execution failures
    WARN = 2   # Errors plus warnings
    INFO = 3   # Warnings plus normal progress and dry-run output (default)
    DEBUG = 4  # Info plus resolved chain and skip/execute decisions
    TRACE = 5  # Debug plus fine-grained execution tracing


class Logger(ABC):
    """Leveled logging sink.

    Implementations decide where messages go and which levels pass. Positional
    and keyword arguments are forwarded untouched, so a rich-backed logger can
    be handed tables and trees as well as strings.
    """

    @abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        ...

    @abstractmethod
    def push_level(self, level: LogLevel) -> None:
        ...

    @abstractmethod
    def pop_level(self) -> LogLevel:
        ...

    def fatal(self, *args, **kwargs) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args, **kwargs) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args, **kwargs) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)


class NoopLogger(Logger):
    """Logger that discards every message."""

    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        pass

    def push_level(self, level: LogLevel) -> None:
        pass

    def pop_level(self) -> LogLevel:
        return LogLevel.INFO


class LeveledLogger(Logger):
    """Logger that filters messages against a stack of levels.

    The bottom of the stack is the level the logger was created with and can
    not be popped. Subclasses only decide how a message that passes is written.
    """

    def __init__(self, level: LogLevel = LogLevel.INFO) -> None:
        self._levels = [level]

    @property
    def level(self) -> LogLevel:
        return self._levels[-1]

    def is_enabled(self, level: LogLevel) -> bool:
        return level.value <= self.level.value

    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        if self.is_enabled(level):
            self.emit(*args, **kwargs)

    @abstractmethod
    def emit(self, *args, **kwargs) -> None:
        ...

    def push_level(self, level: LogLevel) -> None:
        self._levels.append(level)

    def pop_level(self) -> LogLevel:
        if len(self._levels) <= 1:
            raise RuntimeError("Cannot pop the base log level")
        return self._levels.pop()
