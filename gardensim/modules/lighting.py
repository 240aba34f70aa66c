"""LightingSystem — supplemental grow lights when natural light is low."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from gardensim.events.sink import Category, Level
from gardensim.modules.base import ControlModule

if TYPE_CHECKING:
    from gardensim.world.garden import Garden

_SWITCH_ON_MARGIN = 10.0
_SUPPLEMENT_FACTOR = 0.5


@dataclass
class LightingSystem(ControlModule):
    """Switches grow lights on below ``target_light - 10``.

    While on, half of the shortfall to the target is added to the
    garden light level each tick.

    Attributes:
        target_light: Desired light level, 0-100.
        lights_on: Whether the grow lights are currently lit.
        current_light: Light level observed on the last update.
        on_ticks: Ticks spent with the lights on.
        activations: Number of off→on switches.
    """

    name: ClassVar[str] = "Lighting System"
    category: ClassVar[Category] = Category.LIGHTING

    target_light: float = 60.0
    lights_on: bool = False
    current_light: float = 50.0
    on_ticks: int = 0
    activations: int = 0

    def _control(self, garden: Garden) -> None:
        self.current_light = garden.light

        if self.current_light < self.target_light - _SWITCH_ON_MARGIN:
            if not self.lights_on:
                self.lights_on = True
                self.activations += 1
                self._emit(
                    Level.INFO,
                    f"Grow lights ON: Natural light {self.current_light:.0f} "
                    f"below target {self.target_light:.0f}",
                )
            self.on_ticks += 1
            shortfall = self.target_light - self.current_light
            garden.adjust_light(shortfall * _SUPPLEMENT_FACTOR)
        elif self.lights_on:
            self.lights_on = False
            self._emit(
                Level.INFO,
                f"Grow lights OFF: Natural light {self.current_light:.0f} sufficient",
            )

    def set_target_light(self, target: float) -> None:
        self.target_light = target
        self._emit(Level.INFO, f"Target light level set to: {target:.0f}")

    def status_summary(self) -> str:
        return (
            f"Lighting [{self._on_off(self.enabled)}] | Lights: "
            f"{self._on_off(self.lights_on)} | Level: {self.current_light:.0f}/"
            f"{self.target_light:.0f} | Activations: {self.activations} | "
            f"On-ticks: {self.on_ticks}"
        )
