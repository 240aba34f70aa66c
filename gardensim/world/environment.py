"""Environment — day/night cycle and slowly drifting weather.

Advanced first in each garden tick so that sensors, modules and plants
all react to the current conditions.  The model is a pure function of
the tick number, the random stream and two pieces of hidden weather
state (humidity bias and cloud cover) that perform a bounded random
walk every ``weather_interval`` ticks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

# -- Constants ---------------------------------------------------------------

_BASE_LIGHT = 50.0
_LIGHT_SWING = 45.0
_BASE_TEMPERATURE = 65.0
_TEMPERATURE_SWING = 7.0
_TEMPERATURE_NOISE_STD = 0.5
_BASE_HUMIDITY = 58.0
_HUMIDITY_SWING = 18.0
_HUMIDITY_NOISE_STD = 3.0
_HUMIDITY_MIN = 15.0
_HUMIDITY_MAX = 98.0

_BIAS_STEP_STD = 1.5
_BIAS_LIMIT = 15.0
_CLOUD_STEP_STD = 0.04
_CLOUD_MAX = 0.5


@dataclass(frozen=True)
class EnvironmentReading:
    """Environmental scalars produced for one tick.

    Attributes:
        temperature: Air temperature in °F.
        light: Natural light level, 0-100.
        humidity: Relative humidity, 15-98 %.
    """

    temperature: float
    light: float
    humidity: float


@dataclass
class EnvironmentModel:
    """Derives temperature, light and humidity for each tick.

    Attributes:
        day_length: Ticks in a full day/night cycle.
        weather_interval: Ticks between weather drift steps.
        humidity_bias: Multi-day wet/dry spell offset, within ±15.
        cloud_cover: Fraction of light blocked by clouds, 0.0-0.5.
    """

    day_length: int = 200
    weather_interval: int = 50
    humidity_bias: float = 0.0
    cloud_cover: float = 0.0

    def day_progress(self, tick: int) -> float:
        """Return normalised time of day (0.0 = midnight, 0.5 = noon)."""
        return (tick % self.day_length) / self.day_length

    def advance(self, tick: int, rng: Generator) -> EnvironmentReading:
        """Compute the environment for ``tick``.

        Drift draws (when due) come first, then the temperature noise,
        then the humidity noise, so a seeded stream always reproduces
        the same weather.

        Args:
            tick: The tick being simulated.
            rng: Seeded random generator.

        Returns:
            The environmental scalars for this tick.
        """
        if tick % self.weather_interval == 0:
            self._drift_weather(rng)

        phase = 2.0 * math.pi * self.day_progress(tick)

        natural = _BASE_LIGHT + _LIGHT_SWING * math.sin(phase - math.pi / 2)
        natural *= 1.0 - self.cloud_cover
        light = max(0.0, min(100.0, natural))

        temperature = (
            _BASE_TEMPERATURE
            + float(rng.normal(0.0, _TEMPERATURE_NOISE_STD))
            + _TEMPERATURE_SWING * math.sin(phase - math.pi / 2)
        )

        # Positive at night (dew), negative around noon
        swing = _HUMIDITY_SWING * math.sin(phase + math.pi / 2)
        humidity = _BASE_HUMIDITY + swing + self.humidity_bias
        humidity += float(rng.normal(0.0, _HUMIDITY_NOISE_STD))
        humidity = max(_HUMIDITY_MIN, min(_HUMIDITY_MAX, humidity))

        return EnvironmentReading(
            temperature=temperature,
            light=light,
            humidity=humidity,
        )

    def _drift_weather(self, rng: Generator) -> None:
        """Take one bounded random-walk step for bias and cloud cover."""
        self.humidity_bias += float(rng.normal(0.0, _BIAS_STEP_STD))
        self.humidity_bias = max(-_BIAS_LIMIT, min(_BIAS_LIMIT, self.humidity_bias))
        self.cloud_cover += float(rng.normal(0.0, _CLOUD_STEP_STD))
        self.cloud_cover = max(0.0, min(_CLOUD_MAX, self.cloud_cover))
