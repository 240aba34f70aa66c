"""Event sinks — where every state-changing garden event is reported.

The garden never talks to a global logger.  A single ``EventSink`` is
built by the caller and handed to the ``Garden``, which passes it on to
every entity and module it creates.  A sink only has to accept
``(level, category, message)`` triples.

Four sinks are provided:

- ``LoggingEventSink`` forwards to the standard ``logging`` tree under
  ``gardensim.events.<category>``.
- ``MemoryEventSink`` keeps a bounded, filterable history for viewers
  and tests.
- ``FanoutEventSink`` duplicates events to several sinks.
- ``NullEventSink`` drops everything; the default for standalone entities.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol


class Level(Enum):
    """Severity of a garden event."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class Category(Enum):
    """Subsystem an event originates from."""

    PLANT = "PLANT"
    INSECT = "INSECT"
    WATERING = "WATERING"
    HEATING = "HEATING"
    PEST_CONTROL = "PEST_CONTROL"
    LIGHTING = "LIGHTING"
    SENSOR = "SENSOR"
    GARDEN = "GARDEN"
    USER_ACTION = "USER_ACTION"
    APPLICATION = "APPLICATION"


_LOGGING_LEVELS: dict[Level, int] = {
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
}


class EventSink(Protocol):
    """Anything that can receive garden events."""

    def emit(self, level: Level, category: Category, message: str) -> None:
        """Record one event."""


@dataclass(frozen=True)
class Event:
    """A single recorded event.

    Attributes:
        level: Severity.
        category: Originating subsystem.
        message: Human-readable description.
        timestamp: Wall-clock time the event was recorded.
    """

    level: Level
    category: Category
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        return f"[{stamp}] [{self.level.value}] [{self.category.value}] {self.message}"


class LoggingEventSink:
    """Forward events to ``logging`` loggers named after their category."""

    def __init__(self, base_name: str = "gardensim.events") -> None:
        self._base_name = base_name
        self._loggers: dict[Category, logging.Logger] = {}

    def emit(self, level: Level, category: Category, message: str) -> None:
        logger = self._loggers.get(category)
        if logger is None:
            logger = logging.getLogger(f"{self._base_name}.{category.value.lower()}")
            self._loggers[category] = logger
        logger.log(_LOGGING_LEVELS[level], message)


class MemoryEventSink:
    """Keep recorded events in memory with bounded growth.

    Two windows are maintained: the full history (capped at
    ``capacity`` so a 24-hour run cannot exhaust memory) and a short
    ``recent`` window for live display.

    Attributes:
        capacity: Maximum number of events kept in the full history.
        recent_size: Number of events kept in the recent window.
    """

    def __init__(self, capacity: int = 50_000, recent_size: int = 500) -> None:
        self.capacity = capacity
        self.recent_size = recent_size
        self._all: deque[Event] = deque(maxlen=capacity)
        self._recent: deque[Event] = deque(maxlen=recent_size)

    def emit(self, level: Level, category: Category, message: str) -> None:
        event = Event(level=level, category=category, message=message)
        self._all.append(event)
        self._recent.append(event)

    def entries(self) -> list[Event]:
        """Return a copy of the full (bounded) history."""
        return list(self._all)

    def recent(self) -> list[Event]:
        """Return a copy of the recent window."""
        return list(self._recent)

    def by_category(self, category: Category) -> list[Event]:
        """Return all kept events from one category."""
        return [e for e in self._all if e.category is category]

    def by_level(self, level: Level) -> list[Event]:
        """Return all kept events of one severity."""
        return [e for e in self._all if e.level is level]

    def messages(self, category: Category | None = None) -> list[str]:
        """Return just the message text, optionally filtered by category."""
        return [
            e.message for e in self._all if category is None or e.category is category
        ]

    def clear(self) -> None:
        self._all.clear()
        self._recent.clear()

    def __len__(self) -> int:
        return len(self._all)


class FanoutEventSink:
    """Duplicate every event to each wrapped sink, in order."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks: list[EventSink] = list(sinks)

    def emit(self, level: Level, category: Category, message: str) -> None:
        for sink in self.sinks:
            sink.emit(level, category, message)


class NullEventSink:
    """Discard every event."""

    def emit(self, level: Level, category: Category, message: str) -> None:
        pass
