"""Tests for gardensim.events.sink — the event sinks."""

import logging
from datetime import datetime

import pytest

from gardensim.events.sink import (
    Category,
    Event,
    FanoutEventSink,
    Level,
    LoggingEventSink,
    MemoryEventSink,
    NullEventSink,
)


class TestMemoryEventSink:
    """Tests for the in-memory history."""

    def test_records_in_order(self, sink: MemoryEventSink) -> None:
        sink.emit(Level.INFO, Category.PLANT, "first")
        sink.emit(Level.WARN, Category.INSECT, "second")
        assert [e.message for e in sink.entries()] == ["first", "second"]
        assert len(sink) == 2

    def test_history_is_bounded(self) -> None:
        sink = MemoryEventSink(capacity=10, recent_size=3)
        for i in range(25):
            sink.emit(Level.INFO, Category.GARDEN, f"event {i}")
        assert len(sink) == 10
        assert sink.entries()[0].message == "event 15"
        assert [e.message for e in sink.recent()] == [
            "event 22",
            "event 23",
            "event 24",
        ]

    def test_filters(self, sink: MemoryEventSink) -> None:
        sink.emit(Level.INFO, Category.PLANT, "grew")
        sink.emit(Level.WARN, Category.PLANT, "wilting")
        sink.emit(Level.ERROR, Category.HEATING, "failed")
        assert len(sink.by_category(Category.PLANT)) == 2
        assert [e.message for e in sink.by_level(Level.ERROR)] == ["failed"]
        assert sink.messages(Category.HEATING) == ["failed"]
        assert sink.messages() == ["grew", "wilting", "failed"]

    def test_copies_are_detached(self, sink: MemoryEventSink) -> None:
        sink.emit(Level.INFO, Category.PLANT, "grew")
        sink.entries().clear()
        assert len(sink) == 1

    def test_clear(self, sink: MemoryEventSink) -> None:
        sink.emit(Level.INFO, Category.PLANT, "grew")
        sink.clear()
        assert len(sink) == 0
        assert sink.recent() == []


class TestLoggingEventSink:
    """Tests for forwarding to the logging tree."""

    def test_logger_named_after_category(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        sink = LoggingEventSink()
        with caplog.at_level(logging.INFO, logger="gardensim.events"):
            sink.emit(Level.INFO, Category.PEST_CONTROL, "sprayed")
        record = caplog.records[-1]
        assert record.name == "gardensim.events.pest_control"
        assert record.getMessage() == "sprayed"

    def test_warn_maps_to_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = LoggingEventSink()
        with caplog.at_level(logging.INFO, logger="gardensim.events"):
            sink.emit(Level.WARN, Category.PLANT, "thirsty")
            sink.emit(Level.ERROR, Category.GARDEN, "broken")
        assert [r.levelno for r in caplog.records[-2:]] == [
            logging.WARNING,
            logging.ERROR,
        ]


class TestFanoutAndNull:
    def test_fanout_reaches_every_sink(self) -> None:
        first, second = MemoryEventSink(), MemoryEventSink()
        fanout = FanoutEventSink(first, NullEventSink(), second)
        fanout.emit(Level.INFO, Category.GARDEN, "hello")
        assert first.messages() == ["hello"]
        assert second.messages() == ["hello"]

    def test_null_sink_accepts_anything(self) -> None:
        NullEventSink().emit(Level.ERROR, Category.APPLICATION, "ignored")


class TestEvent:
    def test_str_format(self) -> None:
        event = Event(
            level=Level.WARN,
            category=Category.SENSOR,
            message="Temperature out of range",
            timestamp=datetime(2024, 5, 1, 14, 30, 5, 123456),
        )
        assert str(event) == (
            "[2024-05-01 14:30:05.123] [WARN] [SENSOR] Temperature out of range"
        )
