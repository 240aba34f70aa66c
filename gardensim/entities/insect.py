"""Insect — a species-parameterised movement, aging and feeding state machine.

Each tick a living insect ages, wanders one random step and then
interacts with the plants around it according to its ecological role:

- **PEST** insects damage every living plant within 2 cells;
- **POLLINATOR** insects visit FLOWERING plants within 1.5 cells (an
  observation only: pollination has no mechanical effect);
- **BENEFICIAL** insects hunt pests in a separate predation pass run
  by the garden after every insect has moved.

Movement draws a ternary delta (-1, 0, +1) per axis scaled by the
species' movement range.  Ranges below one cell become a probability
of taking a single full step, so slow species still drift.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gardensim.entities.species import InsectSpecies, InsectType
from gardensim.events.sink import Category, EventSink, Level, NullEventSink
from gardensim.world.geometry import Position

if TYPE_CHECKING:
    from numpy.random import Generator

    from gardensim.entities.plant import Plant

# -- Constants ---------------------------------------------------------------

PEST_REACH = 2.0
POLLINATOR_REACH = 1.5
_INTERACTION_LOG_EVERY = 50  # ticks of age between feeding/pollinating events


@dataclass
class Insect:
    """A single insect agent.

    Attributes:
        id: Garden-scoped identifier, e.g. ``INSECT-7``.
        species: Immutable species parameters.
        position: Current grid cell.
        sink: Where lifecycle events are reported.
        previous_position: Position at the start of the last update, for
            renderers that interpolate movement between ticks.
        alive: False once the insect has died.
        age: Ticks since the insect appeared.
    """

    id: str
    species: InsectSpecies
    position: Position
    sink: EventSink = field(default_factory=NullEventSink, repr=False, compare=False)
    previous_position: Position | None = None
    alive: bool = True
    age: int = 0

    def __post_init__(self) -> None:
        if self.previous_position is None:
            self.previous_position = self.position
        self._emit(
            Level.INFO,
            f"{self.name} [{self.id}] ({self.kind.name}) appeared at {self.position}",
        )

    @property
    def name(self) -> str:
        return self.species.name

    @property
    def kind(self) -> InsectType:
        return self.species.kind

    def update(
        self,
        plants: Iterable[Plant],
        rows: int,
        cols: int,
        rng: Generator,
    ) -> None:
        """Age, move and interact with nearby plants for one tick.

        An insect whose age reaches its lifespan dies on that tick
        without moving.

        Args:
            plants: Candidate plants (dead ones are skipped).
            rows: Grid height.
            cols: Grid width.
            rng: Seeded random generator.
        """
        if not self.alive:
            return

        self.age += 1
        self.previous_position = self.position

        if self.age >= self.species.lifespan:
            self._die("Reached end of lifespan")
            return

        self._move(rows, cols, rng)

        should_log = self.age % _INTERACTION_LOG_EVERY == 0
        if self.kind is InsectType.PEST:
            self._feed(plants, should_log=should_log)
        elif self.kind is InsectType.POLLINATOR:
            self._pollinate(plants, should_log=should_log)

    def predate(
        self,
        insects: Iterable[Insect],
        hunt_radius: float,
        kill_chance: float,
        rng: Generator,
    ) -> Insect | None:
        """Try to eat one pest within ``hunt_radius``.

        Only living BENEFICIAL insects hunt.  Pests in range are tried
        in order; each gets one ``kill_chance`` draw and the first
        success ends the hunt, so a predator eats at most one pest per
        tick.

        Args:
            insects: All insects in the garden.
            hunt_radius: Maximum distance to a prey.
            kill_chance: Probability of a successful kill per attempt.
            rng: Seeded random generator.

        Returns:
            The eaten pest, or None if nothing was caught.
        """
        if not self.alive or self.kind is not InsectType.BENEFICIAL:
            return None

        for target in insects:
            if target is self or not target.alive or target.kind is not InsectType.PEST:
                continue
            if target.position.distance_to(self.position) > hunt_radius:
                continue
            if rng.random() < kill_chance:
                target.kill(f"Eaten by {self.name} [{self.id}]")
                if self.age % _INTERACTION_LOG_EVERY == 0:
                    self._emit(
                        Level.INFO,
                        f"{self.name} [{self.id}] ate {target.name} [{target.id}] "
                        f"at {self.position} (biological control)",
                    )
                return target
        return None

    def kill(self, reason: str) -> None:
        """Kill this insect (pest control, predation)."""
        if self.alive:
            self._die(reason)

    def status_summary(self) -> str:
        state = "alive" if self.alive else "dead"
        return (
            f"{self.name} ({self.kind.name}) | {state} | Age: {self.age}/"
            f"{self.species.lifespan} | At: {self.position}"
        )

    # -- Private behaviour methods --

    def _move(self, rows: int, cols: int, rng: Generator) -> None:
        span = self.species.movement_range
        dr = (int(rng.integers(3)) - 1) * span
        dc = (int(rng.integers(3)) - 1) * span
        step_r = self._whole_step(dr, rng)
        step_c = self._whole_step(dc, rng)
        target = Position(self.position.row + step_r, self.position.col + step_c)
        self.position = target.clamped(rows, cols)

    @staticmethod
    def _whole_step(delta: float, rng: Generator) -> int:
        """Truncate ``delta``; a pure fraction becomes a chance of one step."""
        step = int(delta)
        if step == 0 and delta != 0 and rng.random() < abs(delta):
            step = 1 if delta > 0 else -1
        return step

    def _feed(self, plants: Iterable[Plant], *, should_log: bool) -> None:
        for plant in plants:
            if not plant.alive:
                continue
            if plant.position.distance_to(self.position) > PEST_REACH:
                continue
            plant.apply_pest_damage(self.species.damage_per_tick)
            if should_log:
                self._emit(
                    Level.INFO,
                    f"{self.name} [{self.id}] is feeding on {plant.name} "
                    f"at {plant.position}",
                )

    def _pollinate(self, plants: Iterable[Plant], *, should_log: bool) -> None:
        from gardensim.entities.plant import GrowthStage

        if not should_log:
            return
        for plant in plants:
            if (
                plant.alive
                and plant.stage is GrowthStage.FLOWERING
                and plant.position.distance_to(self.position) <= POLLINATOR_REACH
            ):
                self._emit(
                    Level.INFO,
                    f"{self.name} [{self.id}] is pollinating {plant.name} "
                    f"at {plant.position}",
                )

    def _die(self, reason: str) -> None:
        self.alive = False
        self._emit(Level.INFO, f"{self.name} [{self.id}] died. Reason: {reason}")

    def _emit(self, level: Level, message: str) -> None:
        self.sink.emit(level, Category.INSECT, message)
