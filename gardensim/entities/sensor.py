"""Sensor — noisy measurements with edge-triggered threshold alerts.

Temperature and light sensors read the garden-wide environmental value
they are given.  Moisture sensors behave like a physical soil probe:
they ignore that value and average the water level of the living
plants within ``MOISTURE_RADIUS`` of themselves instead.

An alert is raised while the reading lies outside
``[min_threshold, max_threshold]``, but an event is only emitted when
the alert state flips.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gardensim.entities.species import SensorKind
from gardensim.events.sink import Category, EventSink, Level, NullEventSink
from gardensim.world.geometry import Position

if TYPE_CHECKING:
    from numpy.random import Generator

    from gardensim.entities.plant import Plant

MOISTURE_RADIUS = 3.0
MOISTURE_FALLBACK = 50.0


@dataclass
class Sensor:
    """A single sensor in the garden.

    Attributes:
        id: Garden-scoped identifier, e.g. ``SENSOR-2``.
        kind: Sensor family (determines unit, noise and default range).
        position: Grid cell the sensor is installed at.
        sink: Where alert transitions are reported.
        min_threshold: Lowest reading considered normal.
        max_threshold: Highest reading considered normal.
        reading: Latest measured value.
        alert: True while the reading is outside the normal range.
    """

    id: str
    kind: SensorKind
    position: Position
    sink: EventSink = field(default_factory=NullEventSink, repr=False, compare=False)
    min_threshold: float | None = None
    max_threshold: float | None = None
    reading: float = 0.0
    alert: bool = False

    def __post_init__(self) -> None:
        if self.min_threshold is None:
            self.min_threshold = self.kind.min_threshold
        if self.max_threshold is None:
            self.max_threshold = self.kind.max_threshold
        self._emit(
            Level.INFO,
            f"{self.kind.label} [{self.id}] installed at {self.position} "
            f"(range: {self.min_threshold:.1f}-{self.max_threshold:.1f} "
            f"{self.kind.unit})",
        )

    def update(
        self,
        value: float,
        rng: Generator,
        plants: Iterable[Plant] = (),
    ) -> float:
        """Take a new reading and refresh the alert state.

        Args:
            value: Garden-wide environmental value (ignored by moisture
                sensors).
            rng: Seeded random generator for measurement noise.
            plants: Plants a moisture sensor may probe.

        Returns:
            The new reading.
        """
        if self.kind is SensorKind.MOISTURE:
            value = self.soil_moisture(plants)
        noise = self.kind.noise
        self.reading = value + float(rng.uniform(-noise, noise))
        self._refresh_alert()
        return self.reading

    def soil_moisture(self, plants: Iterable[Plant]) -> float:
        """Average water level of living plants within reach of the probe."""
        levels = [
            p.water_level
            for p in plants
            if p.alive and p.position.distance_to(self.position) <= MOISTURE_RADIUS
        ]
        if not levels:
            return MOISTURE_FALLBACK
        return sum(levels) / len(levels)

    def set_thresholds(self, minimum: float, maximum: float) -> None:
        """Change the normal range; takes effect on the next reading."""
        if minimum > maximum:
            msg = f"min threshold {minimum} exceeds max threshold {maximum}"
            raise ValueError(msg)
        self.min_threshold = minimum
        self.max_threshold = maximum

    def status_summary(self) -> str:
        state = "ALERT" if self.alert else "OK"
        return (
            f"{self.kind.label} [{self.id}] | {self.reading:.1f} {self.kind.unit} | "
            f"Range: {self.min_threshold:.0f}-{self.max_threshold:.0f} | {state}"
        )

    def _refresh_alert(self) -> None:
        was_alert = self.alert
        self.alert = not (self.min_threshold <= self.reading <= self.max_threshold)

        if self.alert and not was_alert:
            self._emit(
                Level.WARN,
                f"ALERT: {self.kind.label} [{self.id}] at {self.position} reading "
                f"{self.reading:.1f} {self.kind.unit} (threshold: "
                f"{self.min_threshold:.1f}-{self.max_threshold:.1f})",
            )
        elif was_alert and not self.alert:
            self._emit(
                Level.INFO,
                f"{self.kind.label} [{self.id}] returned to normal: "
                f"{self.reading:.1f} {self.kind.unit}",
            )

    def _emit(self, level: Level, message: str) -> None:
        self.sink.emit(level, Category.SENSOR, message)
