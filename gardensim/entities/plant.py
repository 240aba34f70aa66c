"""Plant — a species-parameterised growth and health state machine.

Each tick a living plant consumes water and nutrients, then sums five
independent stress/bonus terms (water, temperature, nutrients, daily
light integral and humidity) into a single health change.  Health gates
both death and growth:

- health reaching 0 is irreversible death (stage frozen at DEAD);
- every ``ticks_to_next_stage`` ticks of age a plant with health > 30
  advances one stage along SEED → SPROUT → VEGETATIVE → FLOWERING →
  FRUITING → MATURE;
- health below 20 switches the plant to WILTING, which is never left
  for an earlier stage.

Light is evaluated once per simulated day: the accumulated light is
converted to equivalent full-light hours and compared with the
species' need.  The resulting satisfaction ratio is applied every tick
until the next evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from gardensim.entities.species import PlantSpecies
from gardensim.events.sink import Category, EventSink, Level, NullEventSink
from gardensim.world.geometry import Position

# -- Constants ---------------------------------------------------------------

DAY_CYCLE_TICKS = 200

_LEVEL_MAX = 100.0
_GROWTH_MIN_HEALTH = 30.0
_WILT_HEALTH = 20.0
_MAX_LIGHT_SATISFACTION = 2.0
_FUNGAL_WARN_HUMIDITY = 90.0
_FUNGAL_WARN_EVERY = 100


class GrowthStage(Enum):
    """Lifecycle stage of a plant."""

    SEED = auto()
    SPROUT = auto()
    VEGETATIVE = auto()
    FLOWERING = auto()
    FRUITING = auto()
    MATURE = auto()
    WILTING = auto()
    DEAD = auto()


MAIN_SEQUENCE: tuple[GrowthStage, ...] = (
    GrowthStage.SEED,
    GrowthStage.SPROUT,
    GrowthStage.VEGETATIVE,
    GrowthStage.FLOWERING,
    GrowthStage.FRUITING,
    GrowthStage.MATURE,
)


def _clamp(value: float) -> float:
    return max(0.0, min(_LEVEL_MAX, value))


@dataclass
class Plant:
    """A single plant in the garden.

    Attributes:
        id: Garden-scoped identifier, e.g. ``PLANT-3``.
        species: Immutable species parameters.
        position: Grid cell the plant occupies.
        sink: Where lifecycle events are reported.
        health: Vitality, 0-100 (dies at 0).
        water_level: Soil water available to the plant, 0-100.
        nutrient_level: Soil nutrients available to the plant, 0-100.
        stage: Current growth stage.
        age: Ticks since planting.
        alive: False once the plant has died.
        light_accumulator: Sum of light values since the last daily
            evaluation.
        light_ticks: Ticks since the last daily evaluation.
        light_satisfaction: Received/needed light ratio from the last
            evaluation (0.0-2.0).
        day_length: Ticks between daily light evaluations.
    """

    id: str
    species: PlantSpecies
    position: Position
    sink: EventSink = field(default_factory=NullEventSink, repr=False, compare=False)
    health: float = 100.0
    water_level: float = 50.0
    nutrient_level: float = 50.0
    stage: GrowthStage = GrowthStage.SEED
    age: int = 0
    alive: bool = True
    light_accumulator: float = 0.0
    light_ticks: int = 0
    light_satisfaction: float = 1.0
    day_length: int = DAY_CYCLE_TICKS

    def __post_init__(self) -> None:
        self.health = _clamp(self.health)
        self.water_level = _clamp(self.water_level)
        self.nutrient_level = _clamp(self.nutrient_level)
        self._emit(
            Level.INFO,
            f"{self.name} [{self.id}] ({self.species.latin_name}) "
            f"planted at {self.position}",
        )

    @property
    def name(self) -> str:
        return self.species.name

    def update(self, temperature: float, light: float, humidity: float) -> None:
        """Advance this plant by one tick under the given conditions.

        Does nothing for a dead plant.

        Args:
            temperature: Air temperature in °F.
            light: Light level, 0-100.
            humidity: Relative humidity, 0-100 %.
        """
        if not self.alive:
            return

        self.age += 1
        self.water_level = max(
            0.0,
            self.water_level - self.species.water_need_per_tick,
        )
        self.nutrient_level = max(
            0.0,
            self.nutrient_level - self.species.nutrient_need_per_tick,
        )

        delta = (
            self._water_effect()
            + self._temperature_effect(temperature)
            + self._nutrient_effect()
            + self._light_effect(light)
            + self._humidity_effect(humidity)
        )
        self.health = _clamp(self.health + delta)

        if self.health <= 0:
            self._die("Health reached zero")
            return

        if (
            self.age > 0
            and self.age % self.species.ticks_to_next_stage == 0
            and self.health > _GROWTH_MIN_HEALTH
        ):
            self._advance_stage()

        if self.health < _WILT_HEALTH and self.stage is not GrowthStage.WILTING:
            self.stage = GrowthStage.WILTING
            self._emit(
                Level.WARN,
                f"{self.name} [{self.id}] is wilting! Health: {self.health:.1f}%",
            )

    # -- Health terms --

    def _water_effect(self) -> float:
        if self.water_level < 10:
            if self.water_level <= 0:
                self._emit(
                    Level.WARN,
                    f"{self.name} [{self.id}] is critically dehydrated!",
                )
            return -2.5
        if self.water_level > 90:
            return -0.5  # overwatering
        if 40 < self.water_level < 70:
            return 1.2
        return 0.5

    def _temperature_effect(self, temperature: float) -> float:
        low = self.species.ideal_temp_min
        high = self.species.ideal_temp_max
        if temperature < low:
            return -(low - temperature) * 0.35
        if temperature > high:
            return -(temperature - high) * 0.35
        return 0.6

    def _nutrient_effect(self) -> float:
        if self.nutrient_level < 10:
            return -1.5
        if self.nutrient_level > 40:
            return 0.5
        return 0.0

    def _light_effect(self, light: float) -> float:
        """Accumulate light and apply the last daily satisfaction ratio."""
        self.light_accumulator += light
        self.light_ticks += 1

        if self.light_ticks >= self.day_length:
            average = self.light_accumulator / self.day_length
            # 100 all day is 24 equivalent hours, 50 all day is 12
            hours = average / 100.0 * 24.0
            self.light_satisfaction = min(
                _MAX_LIGHT_SATISFACTION,
                hours / self.species.light_need_hours,
            )
            if self.light_satisfaction < 0.5:
                self._emit(
                    Level.WARN,
                    f"{self.name} [{self.id}] severe light deficit: received "
                    f"{hours:.1f}h, needs {self.species.light_need_hours:.0f}h",
                )
            self.light_accumulator = 0.0
            self.light_ticks = 0

        if self.light_satisfaction < 0.7:
            return -(0.7 - self.light_satisfaction) * 1.5
        if self.light_satisfaction >= 0.9:
            return 0.2
        return 0.0

    def _humidity_effect(self, humidity: float) -> float:
        if humidity > 85:
            if humidity > _FUNGAL_WARN_HUMIDITY and self.age % _FUNGAL_WARN_EVERY == 0:
                self._emit(
                    Level.WARN,
                    f"{self.name} [{self.id}] at risk of fungal disease "
                    f"(humidity: {humidity:.0f}%)",
                )
            return -0.8 * ((humidity - 85) / 15.0)
        if humidity < 30:
            return -0.6 * ((30 - humidity) / 30.0)
        if 40 <= humidity <= 70:
            return 0.15
        return 0.0

    # -- Mutators --

    def water(self, amount: float, *, silent: bool = False) -> None:
        """Add water, capped at 100.

        Args:
            amount: Water to add.
            silent: Suppress the event (used by automated irrigation).
        """
        if not self.alive:
            return
        before = self.water_level
        self.water_level = min(_LEVEL_MAX, self.water_level + amount)
        if not silent:
            self._emit(
                Level.INFO,
                f"{self.name} [{self.id}] watered: "
                f"{before:.1f} -> {self.water_level:.1f}",
            )

    def fertilize(self, amount: float) -> None:
        """Add nutrients, capped at 100, and report it."""
        if not self.alive:
            return
        before = self.nutrient_level
        self.nutrient_level = min(_LEVEL_MAX, self.nutrient_level + amount)
        self._emit(
            Level.INFO,
            f"{self.name} [{self.id}] fertilized: "
            f"{before:.1f} -> {self.nutrient_level:.1f}",
        )

    def add_nutrients(self, amount: float) -> None:
        """Add nutrients silently (fertigation during watering)."""
        if not self.alive:
            return
        self.nutrient_level = min(_LEVEL_MAX, self.nutrient_level + amount)

    def apply_pest_damage(self, damage: float) -> float:
        """Apply pest damage reduced by the species' resistance.

        Args:
            damage: Raw damage dealt by the pest.

        Returns:
            The effective damage actually subtracted from health.
        """
        if not self.alive:
            return 0.0
        effective = damage * (1.0 - self.species.pest_resistance)
        self.health = max(0.0, self.health - effective)
        self._emit(
            Level.INFO,
            f"{self.name} [{self.id}] took {effective:.1f} pest damage "
            f"(resistance: {self.species.pest_resistance * 100:.0f}%). "
            f"Health: {self.health:.1f}%",
        )
        if self.health <= 0:
            self._die("Killed by pests")
        return effective

    def status_summary(self) -> str:
        return (
            f"{self.name} ({self.species.latin_name}) | Stage: {self.stage.name} | "
            f"HP: {self.health:.0f}% | Water: {self.water_level:.0f}% | "
            f"Nutrients: {self.nutrient_level:.0f}%"
        )

    # -- Private --

    def _advance_stage(self) -> None:
        if self.stage not in MAIN_SEQUENCE or self.stage is GrowthStage.MATURE:
            return
        previous = self.stage
        self.stage = MAIN_SEQUENCE[MAIN_SEQUENCE.index(previous) + 1]
        self._emit(
            Level.INFO,
            f"{self.name} [{self.id}] grew from {previous.name} to "
            f"{self.stage.name} (health: {self.health:.1f}%)",
        )

    def _die(self, reason: str) -> None:
        self.alive = False
        self.stage = GrowthStage.DEAD
        self._emit(Level.WARN, f"{self.name} [{self.id}] DIED. Reason: {reason}")

    def _emit(self, level: Level, message: str) -> None:
        self.sink.emit(level, Category.PLANT, message)
