"""SimulationEngine — drives the garden forward on a wall-clock cadence.

The engine owns the garden, the master random generator and the tick
cadence.  It never sleeps or spawns threads: a caller (the pygame
viewer, the headless runner, a test) polls ``advance(now)`` and the
engine ticks whenever a full interval has elapsed.

Pausing only withholds ticks and the speed multiplier only changes the
interval; neither touches garden state.  Observers registered with
``add_observer`` are called with the engine once after every tick,
including ticks whose update failed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from gardensim.events.sink import Category, EventSink, Level, LoggingEventSink
from gardensim.simulation.config import SimulationConfig
from gardensim.world.garden import Garden
from gardensim.world.layout import seed_default_garden

logger = logging.getLogger(__name__)

MIN_SPEED = 0.1
MAX_SPEED = 10.0

TickObserver = Callable[["SimulationEngine"], None]


@dataclass
class SimulationEngine:
    """Owns the garden and decides when it ticks.

    Attributes:
        config: Loaded simulation configuration.
        sink: Event sink shared by the garden and everything in it.
        garden: The simulated garden.
        rng: Master seeded random generator.
        speed: Tick rate multiplier, within [0.1, 10].
        running: True between ``start()`` and ``stop()``.
        paused: True while ticks are withheld.
    """

    config: SimulationConfig = field(default_factory=SimulationConfig)
    sink: EventSink = field(default_factory=LoggingEventSink, repr=False)
    garden: Garden = field(init=False)
    rng: Generator = field(init=False, repr=False)
    speed: float = 1.0
    running: bool = False
    paused: bool = False
    _last_tick_at: float = field(default=0.0, init=False, repr=False)
    _observers: list[TickObserver] = field(
        default_factory=list,
        init=False,
        repr=False,
    )

    def __post_init__(self) -> None:
        """Build the RNG and garden from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.garden = Garden.from_config(self.config, self.rng, self.sink)
        if self.config.default_layout:
            seed_default_garden(self.garden, self.config)
        self.speed = _clamp_speed(self.speed)

    # -- Lifecycle ------------------------------------------------------------

    def start(self, now: float | None = None) -> None:
        """Begin ticking; the first tick is due one interval from ``now``."""
        self.running = True
        self.paused = False
        self._last_tick_at = _now(now)
        self._emit(Level.INFO, "Simulation started.")

    def stop(self) -> None:
        self.running = False
        self.paused = False
        self._emit(
            Level.INFO,
            f"Simulation stopped at tick {self.current_tick}.",
        )

    def pause(self) -> None:
        if not self.running or self.paused:
            return
        self.paused = True
        self._emit(Level.INFO, f"Simulation paused at tick {self.current_tick}.")

    def resume(self, now: float | None = None) -> None:
        """Resume ticking; the next tick is a full interval away."""
        if not self.running or not self.paused:
            return
        self.paused = False
        self._last_tick_at = _now(now)
        self._emit(Level.INFO, "Simulation resumed.")

    def toggle_pause(self, now: float | None = None) -> None:
        if self.paused:
            self.resume(now)
        else:
            self.pause()

    def set_speed(self, speed: float) -> float:
        """Set the tick rate multiplier, clamped to [0.1, 10].

        Returns:
            The speed actually applied.
        """
        self.speed = _clamp_speed(speed)
        self._emit(Level.INFO, f"Simulation speed set to {self.speed:.1f}x")
        return self.speed

    # -- Ticking --------------------------------------------------------------

    @property
    def current_tick(self) -> int:
        return self.garden.current_tick

    @property
    def tick_interval(self) -> float:
        """Wall-clock seconds between ticks at the current speed."""
        return self.config.tick_seconds / self.speed

    def due(self, now: float | None = None) -> bool:
        """Return True if a tick should run at time ``now``."""
        if not self.running or self.paused:
            return False
        return _now(now) - self._last_tick_at >= self.tick_interval

    def advance(self, now: float | None = None) -> bool:
        """Tick once if a tick is due.

        Missed intervals are not replayed, so a stalled caller never
        causes a burst of catch-up ticks.

        Returns:
            True if a tick was performed.
        """
        now = _now(now)
        if not self.due(now):
            return False
        self._last_tick_at = now
        self.perform_tick()
        return True

    def tick_progress(self, now: float | None = None) -> float:
        """Fraction of the current interval elapsed, for interpolation.

        Always 0.0 while stopped or paused.
        """
        if not self.running or self.paused:
            return 0.0
        elapsed = _now(now) - self._last_tick_at
        return max(0.0, min(1.0, elapsed / self.tick_interval))

    def perform_tick(self) -> None:
        """Advance the garden one tick and notify observers.

        Never raises: a failure is reported as an APPLICATION error and
        observers still fire.
        """
        try:
            self.garden.tick()
        except Exception as exc:
            logger.debug("Tick failed", exc_info=True)
            self._emit(
                Level.ERROR,
                f"Error during tick {self.current_tick} | Exception: "
                f"{type(exc).__name__} - {exc}",
            )
        finally:
            self._notify()

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks, as fast as possible.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.perform_tick()

    # -- Observers ------------------------------------------------------------

    def add_observer(self, observer: TickObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: TickObserver) -> None:
        """Unregister ``observer``; unknown observers are ignored."""
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception:
                logger.exception("Tick observer %r failed", observer)

    def _emit(self, level: Level, message: str) -> None:
        self.sink.emit(level, Category.APPLICATION, message)


def _clamp_speed(speed: float) -> float:
    return max(MIN_SPEED, min(MAX_SPEED, speed))


def _now(now: float | None) -> float:
    return time.monotonic() if now is None else now
