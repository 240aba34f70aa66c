"""Tests for gardensim.entities.sensor — noise, soil probing and alerts."""

import pytest
from numpy.random import Generator

from gardensim.entities.plant import Plant
from gardensim.entities.sensor import MOISTURE_FALLBACK, Sensor
from gardensim.entities.species import SensorKind, plant_species
from gardensim.events.sink import Level, MemoryEventSink
from gardensim.world.geometry import Position


def _sensor(kind: SensorKind, sink: MemoryEventSink | None = None) -> Sensor:
    return Sensor(
        id="SENSOR-1",
        kind=kind,
        position=Position(5, 5),
        sink=sink if sink is not None else MemoryEventSink(),
    )


def _plant(row: int, col: int, water: float) -> Plant:
    return Plant(
        id=f"PLANT-{row}-{col}",
        species=plant_species("Carrot"),
        position=Position(row, col),
        water_level=water,
    )


class TestReadings:
    """Tests for noisy environmental readings."""

    def test_defaults_from_kind(self) -> None:
        sensor = _sensor(SensorKind.LIGHT)
        assert sensor.min_threshold == 20.0
        assert sensor.max_threshold == 90.0
        assert sensor.reading == 0.0

    def test_noise_is_bounded(self, rng: Generator) -> None:
        sensor = _sensor(SensorKind.TEMPERATURE)
        for _ in range(500):
            reading = sensor.update(70.0, rng)
            assert 69.5 <= reading <= 70.5

    def test_noise_varies(self, rng: Generator) -> None:
        sensor = _sensor(SensorKind.LIGHT)
        readings = {sensor.update(50.0, rng) for _ in range(20)}
        assert len(readings) > 1


class TestMoistureSensor:
    """Tests for soil probing."""

    def test_fallback_without_plants(self, rng: Generator) -> None:
        """No plants in reach: fallback plus noise, whatever value is passed."""
        sensor = _sensor(SensorKind.MOISTURE)
        reading = sensor.update(999.0, rng)
        assert MOISTURE_FALLBACK - 2.0 <= reading <= MOISTURE_FALLBACK + 2.0

    def test_averages_plants_in_reach(self, rng: Generator) -> None:
        sensor = _sensor(SensorKind.MOISTURE)
        plants = [_plant(5, 6, 30.0), _plant(3, 5, 40.0), _plant(9, 9, 90.0)]
        assert sensor.soil_moisture(plants) == pytest.approx(35.0)
        reading = sensor.update(0.0, rng, plants)
        assert 33.0 <= reading <= 37.0

    def test_ignores_dead_plants(self) -> None:
        sensor = _sensor(SensorKind.MOISTURE)
        dead = _plant(5, 5, 10.0)
        dead.alive = False
        assert sensor.soil_moisture([dead]) == MOISTURE_FALLBACK


class TestAlerts:
    """Tests for edge-triggered threshold alerts."""

    def test_alert_raised_once(self, rng: Generator) -> None:
        sink = MemoryEventSink()
        sensor = _sensor(SensorKind.TEMPERATURE, sink)
        sensor.update(100.0, rng)
        sensor.update(101.0, rng)
        assert sensor.alert
        assert len(sink.by_level(Level.WARN)) == 1

    def test_return_to_normal_reported(self, rng: Generator) -> None:
        sink = MemoryEventSink()
        sensor = _sensor(SensorKind.TEMPERATURE, sink)
        sensor.update(100.0, rng)
        sensor.update(70.0, rng)
        assert not sensor.alert
        assert any("returned to normal" in m for m in sink.messages())

    def test_no_event_while_normal(self, rng: Generator) -> None:
        sink = MemoryEventSink()
        sensor = _sensor(SensorKind.TEMPERATURE, sink)
        sink.clear()
        for _ in range(10):
            sensor.update(70.0, rng)
        assert len(sink) == 0

    def test_set_thresholds(self, rng: Generator) -> None:
        sensor = _sensor(SensorKind.TEMPERATURE)
        sensor.set_thresholds(80.0, 90.0)
        sensor.update(70.0, rng)
        assert sensor.alert

    def test_set_thresholds_rejects_inverted_range(self) -> None:
        sensor = _sensor(SensorKind.TEMPERATURE)
        with pytest.raises(ValueError):
            sensor.set_thresholds(90.0, 80.0)
