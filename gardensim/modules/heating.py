"""HeatingSystem — bang-bang climate control around a target temperature."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar

from gardensim.events.sink import Category, Level
from gardensim.modules.base import ControlModule

if TYPE_CHECKING:
    from gardensim.world.garden import Garden

DEADBAND = 2.0


class HeatingMode(Enum):
    """Operating mode of the climate controller."""

    OFF = auto()
    HEATING = auto()
    COOLING = auto()
    AUTO = auto()


@dataclass
class HeatingSystem(ControlModule):
    """Heats or cools the garden air every tick the mode calls for it.

    In AUTO mode nothing happens while the temperature is within
    ``DEADBAND`` degrees of the target; outside that band a fixed
    ``adjust_rate`` is added to (or subtracted from) the garden
    temperature.  HEATING and COOLING force the adjustment regardless of
    the current temperature.

    Attributes:
        mode: Current operating mode.
        target_temperature: Desired temperature in °F.
        adjust_rate: Degrees applied per active tick.
        current_adjustment: Adjustment applied on the last update.
        heating_activations: Ticks on which AUTO mode heated.
        cooling_activations: Ticks on which AUTO mode cooled.
    """

    name: ClassVar[str] = "Heating/Climate Control System"
    category: ClassVar[Category] = Category.HEATING

    mode: HeatingMode = HeatingMode.AUTO
    target_temperature: float = 65.0
    adjust_rate: float = 2.0
    current_adjustment: float = 0.0
    heating_activations: int = 0
    cooling_activations: int = 0

    def _control(self, garden: Garden) -> None:
        current = garden.temperature

        match self.mode:
            case HeatingMode.AUTO:
                self._auto(garden, current)
            case HeatingMode.HEATING:
                self.current_adjustment = self.adjust_rate
                garden.adjust_temperature(self.current_adjustment)
            case HeatingMode.COOLING:
                self.current_adjustment = -self.adjust_rate
                garden.adjust_temperature(self.current_adjustment)
            case HeatingMode.OFF:
                self.current_adjustment = 0.0

    def _auto(self, garden: Garden, current: float) -> None:
        if current < self.target_temperature - DEADBAND:
            self.current_adjustment = self.adjust_rate
            garden.adjust_temperature(self.current_adjustment)
            self.heating_activations += 1
            self._emit(
                Level.INFO,
                f"Heater ON: Current {current:.1f}°F → adjusting "
                f"+{self.current_adjustment:.1f}°F "
                f"(target: {self.target_temperature:.1f}°F)",
            )
        elif current > self.target_temperature + DEADBAND:
            self.current_adjustment = -self.adjust_rate
            garden.adjust_temperature(self.current_adjustment)
            self.cooling_activations += 1
            self._emit(
                Level.INFO,
                f"Cooler ON: Current {current:.1f}°F → adjusting "
                f"{self.current_adjustment:.1f}°F "
                f"(target: {self.target_temperature:.1f}°F)",
            )
        else:
            if self.current_adjustment != 0:
                self._emit(
                    Level.INFO,
                    f"Climate control OFF: {current:.1f}°F is within target range",
                )
            self.current_adjustment = 0.0

    def set_mode(self, mode: HeatingMode) -> None:
        self.mode = mode
        self._emit(Level.INFO, f"Mode changed to: {mode.name}")

    def set_target_temperature(self, target: float) -> None:
        self.target_temperature = target
        self._emit(Level.INFO, f"Target temperature set to {target:.1f}°F")

    def set_adjust_rate(self, rate: float) -> None:
        self.adjust_rate = rate
        self._emit(Level.INFO, f"Temperature adjust rate set to {rate:.1f}°F/tick")

    def status_summary(self) -> str:
        return (
            f"Climate Control [{self._on_off(self.enabled)}] | Mode: {self.mode.name} "
            f"| Target: {self.target_temperature:.1f}°F | "
            f"Adj: {self.current_adjustment:+.1f} | "
            f"Heat: {self.heating_activations} | Cool: {self.cooling_activations}"
        )
