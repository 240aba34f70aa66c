"""Garden — the world state container and the per-tick update order.

The Garden owns every plant, insect, sensor and control module, the
environmental scalars and the tick counter.  ``tick()`` advances all of
it by exactly one step in a fixed order, because later stages read
state mutated by earlier ones:

1. Environment (day/night cycle, weather drift)
2. Sensors (environment readings, soil probes)
3. Control modules (act on the fresh environment and readings)
4. Plants (grow or suffer under the adjusted conditions)
5. Insects (move and feed on the just-updated plants)
6. Predation (beneficial insects hunt pests)
7. Ecological spawning (new insects arrive)
8. Periodic cleanup of dead insects
9. Periodic status event

Every sensor, module, plant and insect update is isolated: a failure
is reported to the event sink and the rest of the tick carries on.  A
failure anywhere else is caught at the tick boundary.  Nothing ever
propagates out of ``tick()``.

Mutation and snapshots share one re-entrant lock, so a renderer thread
calling ``snapshot()`` always observes a completed tick.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import numpy as np

from gardensim.entities.insect import Insect
from gardensim.entities.plant import Plant
from gardensim.entities.sensor import Sensor
from gardensim.entities.species import (
    InsectType,
    SensorKind,
    insect_species,
    plant_species,
)
from gardensim.errors import (
    EntityUpdateFailure,
    GardenError,
    ModuleUpdateFailure,
    TickFailure,
)
from gardensim.events.sink import Category, EventSink, Level, NullEventSink
from gardensim.modules.heating import HeatingSystem
from gardensim.modules.lighting import LightingSystem
from gardensim.modules.pest_control import PestControl
from gardensim.modules.watering import WateringSystem
from gardensim.world.environment import EnvironmentModel
from gardensim.world.geometry import Position
from gardensim.world.snapshot import (
    GardenSnapshot,
    InsectView,
    ModuleView,
    PlantView,
    SensorView,
    SprinklerView,
)

if TYPE_CHECKING:
    from numpy.random import Generator

    from gardensim.modules.base import GardenModule
    from gardensim.simulation.config import SimulationConfig

logger = logging.getLogger(__name__)

M = TypeVar("M")

# (species, interval in ticks, probability) for unconditional arrivals
SPAWN_RULES: tuple[tuple[str, int, float], ...] = (
    ("Aphid", 60, 0.40),
    ("Caterpillar", 100, 0.15),
    ("Bee", 150, 0.25),
)
PREDATOR_SPECIES = "Ladybug"
PREDATOR_INTERVAL = 100
PREDATOR_BASE_CHANCE = 0.20
PREDATOR_CHANCE_PER_PEST = 0.04
PREDATOR_MAX_CHANCE = 0.60

DEFAULT_FERTILIZER = 20.0


@dataclass
class Garden:
    """The complete state of one simulated garden.

    Attributes:
        rows: Number of grid rows.
        cols: Number of grid columns.
        rng: Seeded random generator shared by every stochastic step.
        sink: Receives every state-changing event.
        name: Display name.
        environment: Day/night and weather model.
        temperature: Air temperature in °F.
        light: Light level, 0-100.
        humidity: Relative humidity, 0-100 %.
        current_tick: Number of ticks advanced so far.
        hunt_radius: Predator reach used in the predation pass.
        kill_chance: Predator success probability per attempt.
        cleanup_interval: Ticks between removals of dead insects.
        status_interval: Ticks between periodic status events.
    """

    rows: int
    cols: int
    rng: Generator = field(default_factory=np.random.default_rng, repr=False)
    sink: EventSink = field(default_factory=NullEventSink, repr=False)
    name: str = "Garden"
    environment: EnvironmentModel = field(default_factory=EnvironmentModel)
    temperature: float = 72.0
    light: float = 60.0
    humidity: float = 50.0
    current_tick: int = 0
    hunt_radius: float = 2.0
    kill_chance: float = 0.3
    cleanup_interval: int = 200
    status_interval: int = 50

    _plants: list[Plant] = field(init=False, default_factory=list, repr=False)
    _insects: list[Insect] = field(init=False, default_factory=list, repr=False)
    _sensors: list[Sensor] = field(init=False, default_factory=list, repr=False)
    _modules: list[GardenModule] = field(init=False, default_factory=list, repr=False)
    _lock: threading.RLock = field(
        init=False,
        default_factory=threading.RLock,
        repr=False,
        compare=False,
    )
    _ids: dict[str, Iterator[int]] = field(init=False, default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            msg = f"grid must be at least 1x1, got {self.rows}x{self.cols}"
            raise ValueError(msg)
        self._emit(
            Level.INFO,
            Category.GARDEN,
            f"Garden '{self.name}' created: {self.rows}x{self.cols} grid",
        )

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        rng: Generator,
        sink: EventSink,
    ) -> Garden:
        """Build an empty garden sized and tuned from ``config``."""
        return cls(
            rows=config.rows,
            cols=config.cols,
            rng=rng,
            sink=sink,
            name=config.name,
            environment=EnvironmentModel(
                day_length=config.day_length,
                weather_interval=config.weather_interval,
            ),
            hunt_radius=config.ecology.hunt_radius,
            kill_chance=config.ecology.kill_chance,
            cleanup_interval=config.cleanup_interval,
            status_interval=config.status_interval,
        )

    # -- Seeding ------------------------------------------------------------

    def add_plant(self, plant: Plant) -> Plant:
        """Place a plant in the garden.

        Raises:
            ValueError: If the plant lies outside the grid.
        """
        self._check_bounds(plant.position)
        with self._lock:
            self._plants.append(plant)
        return plant

    def add_insect(self, insect: Insect) -> Insect:
        """Release an insect into the garden.

        Raises:
            ValueError: If the insect lies outside the grid.
        """
        self._check_bounds(insect.position)
        with self._lock:
            self._insects.append(insect)
        return insect

    def add_sensor(self, sensor: Sensor) -> Sensor:
        """Install a sensor.

        Raises:
            ValueError: If the sensor lies outside the grid.
        """
        self._check_bounds(sensor.position)
        with self._lock:
            self._sensors.append(sensor)
        return sensor

    def register_module(self, module: GardenModule) -> GardenModule:
        """Register a control module; it is updated every tick from now on."""
        with self._lock:
            self._modules.append(module)
        return module

    def plant(self, species: str, position: Position, **levels: float) -> Plant:
        """Create and add a plant of a catalogued species.

        Args:
            species: Common species name, e.g. ``"Tomato"``.
            position: Grid cell to plant at.
            **levels: Optional starting ``health``, ``water_level`` or
                ``nutrient_level``.
        """
        self._check_bounds(position)
        return self.add_plant(
            Plant(
                id=self._next_id("PLANT"),
                species=plant_species(species),
                position=position,
                sink=self.sink,
                day_length=self.environment.day_length,
                **levels,
            ),
        )

    def insect(self, species: str, position: Position) -> Insect:
        """Create and add an insect of a catalogued species."""
        self._check_bounds(position)
        return self.add_insect(
            Insect(
                id=self._next_id("INSECT"),
                species=insect_species(species),
                position=position,
                sink=self.sink,
            ),
        )

    def sensor(self, kind: SensorKind, position: Position) -> Sensor:
        """Create and install a sensor of the given kind."""
        self._check_bounds(position)
        return self.add_sensor(
            Sensor(
                id=self._next_id("SENSOR"),
                kind=kind,
                position=position,
                sink=self.sink,
            ),
        )

    # -- Queries ------------------------------------------------------------

    @property
    def plants(self) -> tuple[Plant, ...]:
        with self._lock:
            return tuple(self._plants)

    @property
    def insects(self) -> tuple[Insect, ...]:
        with self._lock:
            return tuple(self._insects)

    @property
    def sensors(self) -> tuple[Sensor, ...]:
        with self._lock:
            return tuple(self._sensors)

    @property
    def modules(self) -> tuple[GardenModule, ...]:
        with self._lock:
            return tuple(self._modules)

    def alive_plants(self) -> list[Plant]:
        with self._lock:
            return [p for p in self._plants if p.alive]

    def alive_insects(self) -> list[Insect]:
        with self._lock:
            return [i for i in self._insects if i.alive]

    def alive_pests(self) -> list[Insect]:
        with self._lock:
            return [
                i for i in self._insects if i.alive and i.kind is InsectType.PEST
            ]

    def module(self, kind: type[M]) -> M | None:
        """Return the first registered module of type ``kind``, if any."""
        with self._lock:
            for module in self._modules:
                if isinstance(module, kind):
                    return module
        return None

    @property
    def watering(self) -> WateringSystem | None:
        return self.module(WateringSystem)

    @property
    def heating(self) -> HeatingSystem | None:
        return self.module(HeatingSystem)

    @property
    def lighting(self) -> LightingSystem | None:
        return self.module(LightingSystem)

    @property
    def pest_control(self) -> PestControl | None:
        return self.module(PestControl)

    # -- Environmental adjustments (used by modules) --------------------------

    def adjust_temperature(self, delta: float) -> None:
        with self._lock:
            self.temperature += delta

    def adjust_light(self, delta: float) -> None:
        """Shift the light level, clamped to [0, 100]."""
        with self._lock:
            self.light = max(0.0, min(100.0, self.light + delta))

    # -- Tick -----------------------------------------------------------------

    def tick(self) -> None:
        """Advance the garden by exactly one step.

        Never raises: any failure is reported to the event sink and the
        garden stays ready for the next tick.
        """
        with self._lock:
            try:
                self._step()
            except Exception as exc:
                self._report(Category.GARDEN, TickFailure(self.current_tick, exc))

    def _step(self) -> None:
        self.current_tick += 1
        tick = self.current_tick

        # 1. Environment
        reading = self.environment.advance(tick, self.rng)
        self.temperature = reading.temperature
        self.light = reading.light
        self.humidity = reading.humidity

        # 2. Sensors
        alive = [p for p in self._plants if p.alive]
        for sensor in self._sensors:
            self._isolated(
                Category.SENSOR,
                sensor.id,
                lambda s=sensor: s.update(self._sensor_input(s), self.rng, alive),
            )

        # 3. Modules
        for module in self._modules:
            try:
                module.update(self)
            except Exception as exc:
                self._report(
                    _module_category(module),
                    ModuleUpdateFailure(module.name, exc),
                )

        # 4. Plants
        for plant in self._plants:
            self._isolated(
                Category.PLANT,
                plant.id,
                lambda p=plant: p.update(self.temperature, self.light, self.humidity),
            )

        # 5. Insects act on plants already updated this tick
        alive = [p for p in self._plants if p.alive]
        for insect in self._insects:
            self._isolated(
                Category.INSECT,
                insect.id,
                lambda i=insect: i.update(alive, self.rows, self.cols, self.rng),
            )

        # 6. Predation
        hunters = [i for i in self._insects if i.alive]
        for insect in hunters:
            self._isolated(
                Category.INSECT,
                insect.id,
                lambda i=insect: i.predate(
                    hunters,
                    self.hunt_radius,
                    self.kill_chance,
                    self.rng,
                ),
            )

        # 7. Ecological spawning
        self._spawn_insects(tick)

        # 8. Cleanup; dead plants stay on the grid as records
        if tick % self.cleanup_interval == 0:
            self._insects = [i for i in self._insects if i.alive]

        # 9. Status
        if tick % self.status_interval == 0:
            self._emit(Level.INFO, Category.GARDEN, self._status_line())

    def _sensor_input(self, sensor: Sensor) -> float:
        match sensor.kind:
            case SensorKind.TEMPERATURE:
                return self.temperature
            case SensorKind.LIGHT:
                return self.light
            case _:
                return self.humidity

    def _spawn_insects(self, tick: int) -> None:
        """Probability-gated arrival of new insects at random cells.

        Ladybugs only arrive while pests are present, and are more
        likely the larger the infestation.
        """
        for species, interval, chance in SPAWN_RULES:
            if tick % interval == 0 and self.rng.random() < chance:
                self.insect(species, self._random_position())

        if tick % PREDATOR_INTERVAL != 0:
            return
        pests = sum(
            1 for i in self._insects if i.alive and i.kind is InsectType.PEST
        )
        if pests == 0:
            return
        chance = min(
            PREDATOR_MAX_CHANCE,
            PREDATOR_BASE_CHANCE + pests * PREDATOR_CHANCE_PER_PEST,
        )
        if self.rng.random() < chance:
            self.insect(PREDATOR_SPECIES, self._random_position())
            self._emit(
                Level.INFO,
                Category.INSECT,
                f"{PREDATOR_SPECIES} attracted to garden by {pests} pest(s) "
                f"(spawn chance: {chance * 100:.0f}%)",
            )

    def _random_position(self) -> Position:
        return Position(
            int(self.rng.integers(self.rows)),
            int(self.rng.integers(self.cols)),
        )

    # -- Manual overrides -------------------------------------------------------

    def manual_water(self) -> None:
        """Open every sprinkler zone now, bypassing the hysteresis."""
        with self._lock:
            watering = self.watering
            if watering is None:
                self._emit(
                    Level.WARN,
                    Category.USER_ACTION,
                    "Manual watering requested but no watering system is installed.",
                )
                return
            watering.manual_water(self)

    def manual_pest_control(self) -> list[Insect]:
        """Apply the pest-control method now if any pest is present."""
        with self._lock:
            pest_control = self.pest_control
            if pest_control is None:
                self._emit(
                    Level.WARN,
                    Category.USER_ACTION,
                    "Manual pest control requested but no pest control is installed.",
                )
                return []
            return pest_control.manual_pest_control(self)

    def fertilize_all(self, amount: float = DEFAULT_FERTILIZER) -> int:
        """Fertilize every living plant.

        Returns:
            Number of plants fertilized.
        """
        with self._lock:
            plants = [p for p in self._plants if p.alive]
            self._emit(
                Level.INFO,
                Category.USER_ACTION,
                f"Fertilizing all plants (+{amount:.1f} nutrients).",
            )
            for plant in plants:
                plant.fertilize(amount)
            return len(plants)

    # -- Observability --------------------------------------------------------

    def snapshot(self) -> GardenSnapshot:
        """Return an immutable view of the garden after the last tick."""
        with self._lock:
            watering = self.watering
            sprinklers = watering.sprinklers if watering is not None else []
            return GardenSnapshot(
                tick=self.current_tick,
                rows=self.rows,
                cols=self.cols,
                temperature=self.temperature,
                light=self.light,
                humidity=self.humidity,
                day_progress=self.environment.day_progress(self.current_tick),
                plants=tuple(PlantView.of(p) for p in self._plants),
                insects=tuple(InsectView.of(i) for i in self._insects),
                sensors=tuple(SensorView.of(s) for s in self._sensors),
                sprinklers=tuple(SprinklerView.of(s) for s in sprinklers),
                modules=tuple(ModuleView.of(m) for m in self._modules),
            )

    def status_summary(self) -> str:
        with self._lock:
            return self._status_line()

    def _status_line(self) -> str:
        alive_plants = sum(1 for p in self._plants if p.alive)
        alive_insects = [i for i in self._insects if i.alive]
        pests = sum(1 for i in alive_insects if i.kind is InsectType.PEST)
        return (
            f"--- TICK {self.current_tick} STATUS | Temp: {self.temperature:.1f}°F | "
            f"Light: {self.light:.0f} | Humidity: {self.humidity:.0f}% | "
            f"Plants: {alive_plants}/{len(self._plants)} alive | "
            f"Insects: {len(alive_insects)} ({pests} pests) ---"
        )

    # -- Private helpers ------------------------------------------------------

    def _isolated(
        self,
        category: Category,
        entity_id: str,
        update: Callable[[], object],
    ) -> None:
        """Run one entity update, reporting instead of raising on failure."""
        try:
            update()
        except Exception as exc:
            self._report(category, EntityUpdateFailure(entity_id, exc))

    def _report(self, category: Category, failure: GardenError) -> None:
        logger.debug(
            "Isolated failure: %s",
            failure,
            exc_info=getattr(failure, "cause", None),
        )
        try:
            self._emit(Level.ERROR, category, str(failure))
        except Exception:
            logger.exception("Event sink failed while reporting: %s", failure)

    def _emit(self, level: Level, category: Category, message: str) -> None:
        self.sink.emit(level, category, message)

    def _next_id(self, prefix: str) -> str:
        counter = self._ids.setdefault(prefix, itertools.count(1))
        return f"{prefix}-{next(counter)}"

    def _check_bounds(self, position: Position) -> None:
        if not position.in_bounds(self.rows, self.cols):
            msg = f"{position} out of bounds for {self.rows}x{self.cols}"
            raise ValueError(msg)


def _module_category(module: GardenModule) -> Category:
    return getattr(module, "category", Category.GARDEN)
