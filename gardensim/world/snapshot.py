"""Snapshot — immutable, tick-consistent views of the garden for renderers.

A snapshot is built under the garden lock, so a reader on another
thread always sees the state of one completed tick, never a tick in
progress.  All views are frozen and hold tuples, so nothing a renderer
does can reach back into the live simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gardensim.entities.insect import Insect
    from gardensim.entities.plant import Plant
    from gardensim.entities.sensor import Sensor
    from gardensim.modules.base import GardenModule
    from gardensim.modules.watering import Sprinkler
    from gardensim.world.geometry import Position


@dataclass(frozen=True)
class PlantView:
    id: str
    species: str
    position: Position
    stage: str
    health: float
    water_level: float
    nutrient_level: float
    alive: bool

    @classmethod
    def of(cls, plant: Plant) -> PlantView:
        return cls(
            id=plant.id,
            species=plant.name,
            position=plant.position,
            stage=plant.stage.name,
            health=plant.health,
            water_level=plant.water_level,
            nutrient_level=plant.nutrient_level,
            alive=plant.alive,
        )


@dataclass(frozen=True)
class InsectView:
    id: str
    species: str
    kind: str
    position: Position
    previous_position: Position
    age: int
    alive: bool

    @classmethod
    def of(cls, insect: Insect) -> InsectView:
        return cls(
            id=insect.id,
            species=insect.name,
            kind=insect.kind.name,
            position=insect.position,
            previous_position=insect.previous_position or insect.position,
            age=insect.age,
            alive=insect.alive,
        )


@dataclass(frozen=True)
class SensorView:
    id: str
    kind: str
    position: Position
    reading: float
    alert: bool

    @classmethod
    def of(cls, sensor: Sensor) -> SensorView:
        return cls(
            id=sensor.id,
            kind=sensor.kind.name,
            position=sensor.position,
            reading=sensor.reading,
            alert=sensor.alert,
        )


@dataclass(frozen=True)
class SprinklerView:
    id: str
    position: Position
    radius: float
    active: bool

    @classmethod
    def of(cls, sprinkler: Sprinkler) -> SprinklerView:
        return cls(
            id=sprinkler.id,
            position=sprinkler.position,
            radius=sprinkler.radius,
            active=sprinkler.active,
        )


@dataclass(frozen=True)
class ModuleView:
    name: str
    enabled: bool
    status: str

    @classmethod
    def of(cls, module: GardenModule) -> ModuleView:
        return cls(
            name=module.name,
            enabled=module.enabled,
            status=module.status_summary(),
        )


@dataclass(frozen=True)
class GardenSnapshot:
    """Everything a renderer needs to draw one tick.

    Attributes:
        tick: Tick the snapshot was taken after.
        rows: Grid height.
        cols: Grid width.
        temperature: Air temperature in °F.
        light: Light level, 0-100.
        humidity: Relative humidity, %.
        day_progress: Normalised time of day (0.0 = midnight).
        plants: Every plant, dead ones included.
        insects: Insects still held by the garden.
        sensors: Every sensor.
        sprinklers: Every sprinkler of the watering module.
        modules: Status of each registered module.
    """

    tick: int
    rows: int
    cols: int
    temperature: float
    light: float
    humidity: float
    day_progress: float
    plants: tuple[PlantView, ...]
    insects: tuple[InsectView, ...]
    sensors: tuple[SensorView, ...]
    sprinklers: tuple[SprinklerView, ...]
    modules: tuple[ModuleView, ...]

    @property
    def alive_plants(self) -> int:
        return sum(1 for p in self.plants if p.alive)

    @property
    def alive_insects(self) -> int:
        return sum(1 for i in self.insects if i.alive)

    @property
    def alive_pests(self) -> int:
        return sum(1 for i in self.insects if i.alive and i.kind == "PEST")
