"""Simulation log — a structured record of what the scheduler did.

Every state change in a run is worth keeping: which process, which
algorithm, and at what simulated time.  The logger collects those
records in memory so the REPL can print them and tests can query them.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, time).
- **Logger** — an append-only log with filtering and clearing.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **Simulated time, not wall-clock** — ``time`` is the run's elapsed
      time when the entry was written, so logs are reproducible.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: Who generated the event (an algorithm name, "repl", ...).
        time: Simulated elapsed time of the run when it happened.

    """

    level: LogLevel
    message: str
    source: str
    time: int = 0

    def __str__(self) -> str:
        """Format as ``[T=  300] [LEVEL] source: message``."""
        return f"[T={self.time:5d}] [{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self, *, min_level: LogLevel = LogLevel.DEBUG) -> None:
        """Create an empty logger.

        Args:
            min_level: Entries below this level are dropped on arrival.

        """
        self._min_level = min_level
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        time: int = 0,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            time: Simulated time of the event.

        """
        if level < self._min_level:
            return
        self._entries.append(LogEntry(level=level, message=message, source=source, time=time))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
