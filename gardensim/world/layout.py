"""Default layout — the standard planting plan for a fresh garden.

Three irrigation lanes run down columns 4, 10 and 16.  Sprinklers sit
on the lanes every six rows starting at row 3, each with a moisture
probe one row below it.  Crop beds are laid out in bands between the
lanes, sensors cover the corners and the centre, and a small starting
population of insects is released.

Everything goes through the garden's public seeding interface, so the
layout could equally be built by hand or loaded from elsewhere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gardensim.entities.species import SensorKind
from gardensim.events.sink import Category, Level
from gardensim.modules.heating import HeatingSystem
from gardensim.modules.lighting import LightingSystem
from gardensim.modules.pest_control import PestControl
from gardensim.modules.watering import WateringSystem
from gardensim.world.geometry import Position

if TYPE_CHECKING:
    from gardensim.simulation.config import SimulationConfig
    from gardensim.world.garden import Garden

# -- Plan ----------------------------------------------------------------------

IRRIGATION_LANES: tuple[int, ...] = (4, 10, 16)
SPRINKLER_FIRST_ROW = 3
SPRINKLER_ROW_SPACING = 6

# (species, rows, first column, column step, columns kept free on the right)
CROP_BEDS: tuple[tuple[str, tuple[int, ...], int, int, int], ...] = (
    ("Tomato", (1, 2), 1, 3, 1),
    ("Rose", (5, 6), 1, 3, 1),
    ("Sunflower", (9,), 2, 4, 1),
    ("Carrot", (13,), 1, 2, 1),
    ("Lettuce", (14,), 1, 2, 1),
    ("Cactus", (18,), 1, 5, 0),
)

STARTING_INSECTS: tuple[tuple[str, int, int], ...] = (
    ("Bee", 4, 4),
    ("Bee", 8, 8),
    ("Bee", 6, 16),
    ("Ladybug", 6, 6),
    ("Aphid", 3, 5),
    ("Caterpillar", 11, 3),
)


def seed_default_garden(garden: Garden, config: SimulationConfig) -> None:
    """Populate ``garden`` with the standard plan and control modules.

    Cells that fall outside a smaller-than-default grid are skipped, so
    the plan degrades gracefully on tiny gardens.

    Args:
        garden: An empty garden.
        config: Supplies module set points and sprinkler geometry.
    """
    rows, cols = garden.rows, garden.cols
    sink = garden.sink

    # Irrigation
    watering = WateringSystem(
        sink=sink,
        threshold_low=config.watering.threshold_low,
        threshold_high=config.watering.threshold_high,
    )
    for lane in IRRIGATION_LANES:
        if lane >= cols:
            continue
        for row in range(SPRINKLER_FIRST_ROW, rows, SPRINKLER_ROW_SPACING):
            watering.add_sprinkler(
                Position(row, lane),
                config.watering.sprinkler_radius,
                config.watering.sprinkler_flow,
            )
            if row + 1 < rows:
                garden.sensor(SensorKind.MOISTURE, Position(row + 1, lane))

    # Climate sensors
    for row, col in ((0, 0), (rows - 1, cols - 1), (rows // 2, cols // 2)):
        garden.sensor(SensorKind.TEMPERATURE, Position(row, col))
    for row, col in ((0, cols // 2), (rows - 1, 0)):
        garden.sensor(SensorKind.LIGHT, Position(row, col))

    # Crops, leaving the lanes clear
    for species, bed_rows, first_col, step, margin in CROP_BEDS:
        for row in bed_rows:
            if row >= rows:
                continue
            for col in range(first_col, cols - margin, step):
                if col in IRRIGATION_LANES:
                    continue
                garden.plant(species, Position(row, col))

    for species, row, col in STARTING_INSECTS:
        position = Position(row, col)
        if position.in_bounds(rows, cols):
            garden.insect(species, position)

    heating = HeatingSystem(
        sink=sink,
        mode=config.heating.mode,
        target_temperature=config.heating.target_temperature,
        adjust_rate=config.heating.adjust_rate,
    )
    pest_control = PestControl(
        sink=sink,
        method=config.pest_control.method,
        threshold=config.pest_control.threshold,
        check_interval=config.pest_control.check_interval,
    )
    lighting = LightingSystem(sink=sink, target_light=config.lighting.target_light)

    for module in (watering, heating, pest_control, lighting):
        garden.register_module(module)

    sink.emit(
        Level.INFO,
        Category.GARDEN,
        f"Garden initialized: {len(garden.plants)} plants, "
        f"{len(garden.insects)} insects, {len(garden.sensors)} sensors, "
        f"{len(garden.modules)} modules",
    )
