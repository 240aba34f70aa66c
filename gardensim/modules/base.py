"""GardenModule — the contract shared by every feedback controller.

A module is anything the garden can ``update`` once per tick, switch on
and off, and ask for a one-line status.  ``ControlModule`` provides the
shared plumbing (enable flag, event reporting) so the concrete modules
only implement their control law.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from gardensim.events.sink import Category, EventSink, Level, NullEventSink

if TYPE_CHECKING:
    from gardensim.world.garden import Garden


@runtime_checkable
class GardenModule(Protocol):
    """Anything the garden can drive once per tick."""

    name: ClassVar[str]
    enabled: bool

    def update(self, garden: Garden) -> None:
        """Read sensors/state and act on the garden for one tick."""

    def set_enabled(self, enabled: bool) -> None:
        """Switch the module on or off from the next update."""

    def status_summary(self) -> str:
        """Return a human-readable one-line status."""


@dataclass
class ControlModule:
    """Shared state for the built-in control modules.

    Attributes:
        sink: Where the module reports its actions.
        enabled: Disabled modules skip ``update`` entirely.
    """

    name: ClassVar[str] = "Module"
    category: ClassVar[Category] = Category.GARDEN

    sink: EventSink = field(default_factory=NullEventSink, repr=False)
    enabled: bool = True

    def update(self, garden: Garden) -> None:
        if not self.enabled:
            return
        self._control(garden)

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        self._emit(
            Level.INFO,
            f"{self.name} {'ENABLED' if enabled else 'DISABLED'}",
        )

    def status_summary(self) -> str:
        return f"{self.name} [{self._on_off(self.enabled)}]"

    def _control(self, garden: Garden) -> None:
        raise NotImplementedError

    @staticmethod
    def _on_off(flag: bool) -> str:
        return "ON" if flag else "OFF"

    def _emit(self, level: Level, message: str) -> None:
        self.sink.emit(level, self.category, message)
