"""Species — immutable per-species constants for plants, insects and sensors.

Every behavioural difference between a tomato and a cactus, or an aphid
and a ladybug, is data in these tables rather than a subclass.  The
lifecycle code in ``plant.py``, ``insect.py`` and ``sensor.py`` reads
only the descriptor it was built with.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InsectType(Enum):
    """Ecological role of an insect species."""

    PEST = "PEST"
    POLLINATOR = "POLLINATOR"
    NEUTRAL = "NEUTRAL"
    BENEFICIAL = "BENEFICIAL"


@dataclass(frozen=True)
class PlantSpecies:
    """Growth and tolerance parameters for one plant species.

    Attributes:
        name: Common name, used as the lookup key.
        latin_name: Botanical name.
        ideal_temp_min: Lower bound of the comfortable temperature (°F).
        ideal_temp_max: Upper bound of the comfortable temperature (°F).
        water_need_per_tick: Water consumed each tick.
        nutrient_need_per_tick: Nutrients consumed each tick.
        light_need_hours: Equivalent full-light hours needed per day.
        ticks_to_next_stage: Age interval between growth stage advances.
        pest_resistance: Fraction of pest damage ignored (0.0-1.0).
    """

    name: str
    latin_name: str
    ideal_temp_min: float
    ideal_temp_max: float
    water_need_per_tick: float
    nutrient_need_per_tick: float
    light_need_hours: float
    ticks_to_next_stage: int
    pest_resistance: float


@dataclass(frozen=True)
class InsectSpecies:
    """Behaviour parameters for one insect species.

    Attributes:
        name: Common name, used as the lookup key.
        kind: Ecological role.
        damage_per_tick: Damage dealt to each plant in reach (pests only).
        movement_range: Cells moved per axis per tick; fractional values
            become a probability of a one-cell step.
        lifespan: Age in ticks at which the insect dies.
    """

    name: str
    kind: InsectType
    damage_per_tick: float
    movement_range: float
    lifespan: int


class SensorKind(Enum):
    """Sensor families with their display name, unit, range and noise.

    Each member's value is ``(label, unit, min_threshold, max_threshold,
    noise_amplitude)``; readings get uniform noise in
    ``[-noise_amplitude, +noise_amplitude]``.
    """

    TEMPERATURE = ("Temperature Sensor", "°F", 40.0, 95.0, 0.5)
    LIGHT = ("Light Sensor", "lux", 20.0, 90.0, 1.5)
    MOISTURE = ("Moisture Sensor", "%", 20.0, 80.0, 2.0)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def unit(self) -> str:
        return self.value[1]

    @property
    def min_threshold(self) -> float:
        return self.value[2]

    @property
    def max_threshold(self) -> float:
        return self.value[3]

    @property
    def noise(self) -> float:
        return self.value[4]


PLANT_SPECIES: dict[str, PlantSpecies] = {
    s.name: s
    for s in (
        PlantSpecies("Tomato", "Solanum lycopersicum", 60, 85, 1.2, 0.5, 8, 50, 0.3),
        PlantSpecies("Rose", "Rosa", 55, 80, 1.0, 0.4, 6, 60, 0.2),
        PlantSpecies("Sunflower", "Helianthus annuus", 55, 91, 1.5, 0.5, 10, 40, 0.5),
        PlantSpecies("Carrot", "Daucus carota", 45, 75, 0.8, 0.3, 6, 55, 0.4),
        PlantSpecies("Lettuce", "Lactuca sativa", 40, 70, 1.1, 0.25, 5, 35, 0.15),
        PlantSpecies("Cactus", "Cactaceae", 50, 100, 0.15, 0.05, 10, 80, 0.8),
    )
}

INSECT_SPECIES: dict[str, InsectSpecies] = {
    s.name: s
    for s in (
        InsectSpecies("Aphid", InsectType.PEST, 0.8, 1.0, 200),
        InsectSpecies("Caterpillar", InsectType.PEST, 1.5, 0.5, 150),
        InsectSpecies("Bee", InsectType.POLLINATOR, 0.0, 2.0, 300),
        InsectSpecies("Ladybug", InsectType.BENEFICIAL, 0.0, 1.5, 400),
    )
}


def plant_species(name: str) -> PlantSpecies:
    """Look up a plant species by common name.

    Raises:
        KeyError: If no such species is catalogued.
    """
    try:
        return PLANT_SPECIES[name]
    except KeyError:
        msg = f"unknown plant species {name!r}"
        raise KeyError(msg) from None


def insect_species(name: str) -> InsectSpecies:
    """Look up an insect species by common name.

    Raises:
        KeyError: If no such species is catalogued.
    """
    try:
        return INSECT_SPECIES[name]
    except KeyError:
        msg = f"unknown insect species {name!r}"
        raise KeyError(msg) from None
