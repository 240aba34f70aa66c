"""Shared fixtures for the gardensim test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from gardensim.entities.species import plant_species
from gardensim.events.sink import MemoryEventSink
from gardensim.simulation.config import SimulationConfig
from gardensim.world.garden import Garden


class FixedRng:
    """Stand-in generator returning fixed values, counting ``random()`` draws.

    Lets tests force probability gates open (``value`` below the
    chance) or shut (``value`` above it) without hunting for a seed.
    """

    def __init__(self, value: float = 0.0) -> None:
        self.value = value
        self.random_calls = 0

    def random(self) -> float:
        self.random_calls += 1
        return self.value

    def integers(self, high: int) -> int:
        return 0

    def normal(self, loc: float = 0.0, scale: float = 1.0) -> float:
        return loc

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        return (low + high) / 2


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def sink() -> MemoryEventSink:
    """An in-memory event sink to assert on emitted events."""
    return MemoryEventSink()


@pytest.fixture
def small_garden(rng: Generator, sink: MemoryEventSink) -> Garden:
    """An empty 10x10 garden with no modules."""
    return Garden(rows=10, cols=10, rng=rng, sink=sink, name="Test Garden")


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def tomato():
    """The Tomato species descriptor."""
    return plant_species("Tomato")


@pytest.fixture
def fixed_rng() -> type[FixedRng]:
    """Factory for generators with a fixed ``random()`` value."""
    return FixedRng
