"""Error taxonomy for failures caught inside a garden tick.

None of these ever escape ``Garden.tick()``.  They exist so the garden
can describe *what* failed when it reports to the event sink, and so
tests can assert on the kind of failure that was isolated.
"""

from __future__ import annotations


class GardenError(Exception):
    """Base class for all simulation-level failures."""


class EntityUpdateFailure(GardenError):
    """A single plant, insect or sensor failed to update this tick.

    Attributes:
        entity_id: Identifier of the failing entity.
    """

    def __init__(self, entity_id: str, cause: BaseException) -> None:
        self.entity_id = entity_id
        self.cause = cause
        super().__init__(
            f"Error updating {entity_id} | Exception: "
            f"{type(cause).__name__} - {cause}",
        )


class ModuleUpdateFailure(GardenError):
    """One control module failed to update this tick."""

    def __init__(self, module_name: str, cause: BaseException) -> None:
        self.module_name = module_name
        self.cause = cause
        super().__init__(
            f"Error in {module_name} update | Exception: "
            f"{type(cause).__name__} - {cause}",
        )


class TickFailure(GardenError):
    """Last-resort failure caught at the outermost tick boundary."""

    def __init__(self, tick: int, cause: BaseException) -> None:
        self.tick = tick
        self.cause = cause
        super().__init__(
            f"Error during tick {tick} | Exception: {type(cause).__name__} - {cause}",
        )
