"""WateringSystem — zoned irrigation with hysteresis.

Every sprinkler controls its own zone (the plants within its radius)
independently of the others.  A zone turns on when a nearby moisture
sensor reads below the *low* threshold and, once running, keeps going
until the readings climb above the *high* threshold.  When no sensor
triggers, the plants under the sprinkler are checked directly as a
safety net:

- an idle sprinkler starts if any covered plant is below the low
  threshold;
- a running sprinkler stays on while any covered plant is below 75 %.

Running sprinklers deliver their flow rate plus a small nutrient
trickle (fertigation) to every covered plant each tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from gardensim.entities.species import SensorKind
from gardensim.events.sink import Category, Level
from gardensim.modules.base import ControlModule
from gardensim.world.geometry import Position

if TYPE_CHECKING:
    from gardensim.entities.plant import Plant
    from gardensim.world.garden import Garden

# -- Constants ---------------------------------------------------------------

SENSOR_REACH_MARGIN = 2.0
STAY_ON_WATER_LEVEL = 75.0
NUTRIENT_TRICKLE = 2.0


@dataclass
class Sprinkler:
    """One irrigation head and the zone it covers.

    Attributes:
        id: Identifier, e.g. ``SPR-4``.
        position: Grid cell of the head.
        radius: Coverage radius in cells.
        flow_rate: Water delivered to each covered plant per tick.
        active: Whether the zone is currently running.
    """

    id: str
    position: Position
    radius: float
    flow_rate: float
    active: bool = False

    def covers(self, position: Position) -> bool:
        return self.position.distance_to(position) <= self.radius


@dataclass
class WateringSystem(ControlModule):
    """Irrigation controller owning a set of sprinklers.

    Attributes:
        sprinklers: All installed sprinklers.
        threshold_low: Moisture below which an idle zone starts.
        threshold_high: Moisture above which a running zone may stop.
        watering_events: Number of zone activations so far.
    """

    name: ClassVar[str] = "Watering System"
    category: ClassVar[Category] = Category.WATERING

    sprinklers: list[Sprinkler] = field(default_factory=list)
    threshold_low: float = 25.0
    threshold_high: float = 65.0
    watering_events: int = 0

    def add_sprinkler(
        self,
        position: Position,
        radius: float,
        flow_rate: float,
    ) -> Sprinkler:
        """Install a sprinkler and return it."""
        sprinkler = Sprinkler(
            id=f"SPR-{len(self.sprinklers) + 1}",
            position=position,
            radius=radius,
            flow_rate=flow_rate,
        )
        self.sprinklers.append(sprinkler)
        self._emit(
            Level.INFO,
            f"Sprinkler {sprinkler.id} added at {position} "
            f"(radius: {radius:.1f}, flow: {flow_rate:.1f})",
        )
        return sprinkler

    def set_thresholds(self, low: float, high: float) -> None:
        """Change the hysteresis band; takes effect on the next update."""
        if low > high:
            msg = f"low threshold {low} exceeds high threshold {high}"
            raise ValueError(msg)
        self.threshold_low = low
        self.threshold_high = high
        self._emit(
            Level.INFO,
            f"Moisture thresholds set to {low:.1f}-{high:.1f}",
        )

    def _control(self, garden: Garden) -> None:
        plants = garden.alive_plants()
        for sprinkler in self.sprinklers:
            if self._zone_needs_water(sprinkler, garden, plants):
                if not sprinkler.active:
                    sprinkler.active = True
                    self.watering_events += 1
                    self._emit(
                        Level.INFO,
                        f"Zone {sprinkler.id} activated at {sprinkler.position}",
                    )
                self._irrigate(sprinkler, plants)
            elif sprinkler.active:
                sprinkler.active = False
                self._emit(Level.INFO, f"Zone {sprinkler.id} deactivated.")

    def manual_water(self, garden: Garden) -> None:
        """Open every zone and irrigate immediately, ignoring thresholds."""
        self.sink.emit(
            Level.INFO,
            Category.USER_ACTION,
            "Manual override: Activating all zones.",
        )
        plants = garden.alive_plants()
        for sprinkler in self.sprinklers:
            sprinkler.active = True
            self.watering_events += 1
            self._irrigate(sprinkler, plants)
        self._emit(
            Level.INFO,
            f"Manual watering complete: {len(self.sprinklers)} sprinklers "
            f"activated, {len(plants)} plants watered.",
        )

    def active_count(self) -> int:
        return sum(1 for s in self.sprinklers if s.active)

    def status_summary(self) -> str:
        return (
            f"{self.name} [{self._on_off(self.enabled)}] | Sprinklers: "
            f"{self.active_count()}/{len(self.sprinklers)} active | "
            f"Events: {self.watering_events}"
        )

    # -- Private --

    def _zone_needs_water(
        self,
        sprinkler: Sprinkler,
        garden: Garden,
        plants: list[Plant],
    ) -> bool:
        threshold = self.threshold_high if sprinkler.active else self.threshold_low
        reach = sprinkler.radius + SENSOR_REACH_MARGIN
        for sensor in garden.sensors:
            if (
                sensor.kind is SensorKind.MOISTURE
                and sensor.position.distance_to(sprinkler.position) <= reach
                and sensor.reading < threshold
            ):
                return True

        covered = [p for p in plants if sprinkler.covers(p.position)]
        if sprinkler.active:
            return any(p.water_level < STAY_ON_WATER_LEVEL for p in covered)
        return any(p.water_level < self.threshold_low for p in covered)

    @staticmethod
    def _irrigate(sprinkler: Sprinkler, plants: list[Plant]) -> None:
        for plant in plants:
            if sprinkler.covers(plant.position):
                plant.water(sprinkler.flow_rate, silent=True)
                plant.add_nutrients(NUTRIENT_TRICKLE)
