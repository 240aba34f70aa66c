"""PestControl — periodic pest population checks and treatment.

Every ``check_interval`` updates the module counts living PEST insects
and treats the garden when the count reaches ``threshold`` (``>=``; the
default threshold of 1 means any pest triggers treatment).  The
treatment depends on the configured method:

- CHEMICAL kills every living insect, beneficials included;
- TARGETED kills only pests;
- ORGANIC kills each pest independently with 70 % probability.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar

from gardensim.entities.species import InsectType
from gardensim.events.sink import Category, Level
from gardensim.modules.base import ControlModule

if TYPE_CHECKING:
    from numpy.random import Generator

    from gardensim.entities.insect import Insect
    from gardensim.world.garden import Garden

ORGANIC_KILL_CHANCE = 0.7


class PestControlMethod(Enum):
    """How pests are treated."""

    ORGANIC = auto()
    CHEMICAL = auto()
    TARGETED = auto()


@dataclass
class PestControl(ControlModule):
    """Automatic pest management module.

    Attributes:
        method: Treatment applied on activation.
        threshold: Minimum number of living pests that triggers treatment.
        check_interval: Updates between population checks.
        activations: Number of treatments applied.
        pests_eliminated: Insects killed by treatments so far.
        last_activation_tick: Garden tick of the last treatment (-1 if
            never activated).
    """

    name: ClassVar[str] = "Pest Control System"
    category: ClassVar[Category] = Category.PEST_CONTROL

    method: PestControlMethod = PestControlMethod.TARGETED
    threshold: int = 1
    check_interval: int = 5
    activations: int = 0
    pests_eliminated: int = 0
    last_activation_tick: int = -1
    _tick_counter: int = field(default=0, init=False, repr=False)

    def _control(self, garden: Garden) -> None:
        self._tick_counter += 1
        if self._tick_counter < self.check_interval:
            return
        self._tick_counter = 0

        pests = garden.alive_pests()
        if len(pests) >= self.threshold:
            self._activate(garden, pests)

    def manual_pest_control(self, garden: Garden) -> list[Insect]:
        """Treat immediately, bypassing the threshold and interval.

        Returns:
            The insects killed (empty when no pests were present).
        """
        self.sink.emit(
            Level.INFO,
            Category.USER_ACTION,
            "Manual pest control triggered.",
        )
        pests = garden.alive_pests()
        if not pests:
            self._emit(Level.INFO, "No pests found to eliminate.")
            return []
        return self._activate(garden, pests)

    def treat(
        self,
        insects: Iterable[Insect],
        rng: Generator,
    ) -> list[Insect]:
        """Apply the configured method to ``insects``.

        Args:
            insects: Every insect in the garden (dead ones are skipped).
            rng: Seeded random generator (ORGANIC draws).

        Returns:
            The insects killed by this treatment.
        """
        killed: list[Insect] = []
        for insect in insects:
            if not insect.alive:
                continue
            is_pest = insect.kind is InsectType.PEST
            match self.method:
                case PestControlMethod.CHEMICAL:
                    hit = True
                case PestControlMethod.TARGETED:
                    hit = is_pest
                case PestControlMethod.ORGANIC:
                    hit = is_pest and rng.random() < ORGANIC_KILL_CHANCE
            if hit:
                insect.kill(f"{self.method.name.capitalize()} pest control")
                killed.append(insect)
        self.pests_eliminated += len(killed)
        return killed

    def set_method(self, method: PestControlMethod) -> None:
        self.method = method
        self._emit(Level.INFO, f"Method changed to: {method.name}")

    def set_threshold(self, threshold: int) -> None:
        self.threshold = threshold
        self._emit(Level.INFO, f"Pest threshold set to: {threshold}")

    def set_check_interval(self, interval: int) -> None:
        if interval < 1:
            msg = f"check interval must be at least 1, got {interval}"
            raise ValueError(msg)
        self.check_interval = interval

    def status_summary(self) -> str:
        return (
            f"Pest Control [{self._on_off(self.enabled)}] | Method: {self.method.name} "
            f"| Activations: {self.activations} | Eliminated: {self.pests_eliminated}"
        )

    # -- Private --

    def _activate(self, garden: Garden, pests: list[Insect]) -> list[Insect]:
        self.activations += 1
        self.last_activation_tick = garden.current_tick
        self._emit(
            Level.INFO,
            f"Activating {self.method.name} pest control! {len(pests)} pests detected.",
        )
        killed = self.treat(garden.insects, garden.rng)

        match self.method:
            case PestControlMethod.CHEMICAL:
                self._emit(
                    Level.WARN,
                    "Chemical method: ALL insects eliminated (including beneficials).",
                )
            case PestControlMethod.TARGETED:
                self._emit(
                    Level.INFO,
                    f"Targeted method: {len(killed)} pests eliminated. "
                    "Beneficials safe.",
                )
            case PestControlMethod.ORGANIC:
                self._emit(
                    Level.INFO,
                    f"Organic method: {len(killed)}/{len(pests)} pests eliminated.",
                )
        return killed
