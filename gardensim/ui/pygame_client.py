"""Pygame 2D visualization for the garden simulation.

Draws the garden grid, sprinkler zones, plants, sensors and insects in
a window, with a side panel for environment readings and module
status.  The renderer only ever reads ``Garden.snapshot()``; it drives
the simulation through the engine's ``advance`` and the garden's
manual overrides.  Insects are interpolated between their previous and
current cell using the engine's tick progress.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from gardensim.events.sink import MemoryEventSink
    from gardensim.simulation.engine import SimulationEngine
    from gardensim.world.snapshot import GardenSnapshot

# Colour palette
_SOIL_NIGHT = np.array([20, 14, 8], dtype=np.float64)
_SOIL_DAY = np.array([92, 64, 40], dtype=np.float64)
_GRID_LINE = (60, 45, 30)
_SPRINKLER_IDLE = (70, 110, 160)
_SPRINKLER_ACTIVE = (80, 170, 255)
_SENSOR = (220, 220, 220)
_SENSOR_ALERT = (255, 70, 70)
_TEXT = (200, 200, 200)
_DEAD_PLANT = (90, 80, 60)

_PLANT_COLOURS: dict[str, tuple[int, int, int]] = {
    "Tomato": (220, 60, 50),
    "Rose": (230, 90, 160),
    "Sunflower": (250, 210, 40),
    "Carrot": (245, 140, 30),
    "Lettuce": (120, 210, 90),
    "Cactus": (60, 150, 90),
}

_INSECT_COLOURS: dict[str, tuple[int, int, int]] = {
    "Aphid": (150, 230, 120),
    "Caterpillar": (110, 180, 40),
    "Bee": (255, 220, 0),
    "Ladybug": (255, 40, 40),
}

# Wilting plants fade toward the dead colour
_HEALTH_FLOOR = 0.35


class PygameRenderer:
    """Renders garden snapshots into a Pygame window.

    Attributes:
        engine: The simulation engine to drive and visualise.
        cell_size: Pixel size of each grid cell.
        history: Optional event history shown in the panel.
        screen: The Pygame display surface.
    """

    _SPEED_STEPS: ClassVar[list[float]] = [0.1, 0.25, 0.5, 1.0, 2.0, 4.0, 6.0, 10.0]
    _RECENT_EVENTS: ClassVar[int] = 8

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 32,
        history: MemoryEventSink | None = None,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            history: Event history to tail in the side panel.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.history = history
        self._speed_index = self._nearest_speed(engine.speed)

        garden = engine.garden
        w = garden.cols * cell_size
        h = garden.rows * cell_size
        self._panel_width = 420
        self._win_w = w + self._panel_width
        self._win_h = max(h, 480)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption(garden.name)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 13)
        self.running = True

    def _nearest_speed(self, speed: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - speed) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, advance the engine, render.

        Args:
            fps: Target frames per second.
        """
        self.engine.start()
        while self.running:
            self.clock.tick(fps)
            self._handle_events()
            self.engine.advance()
            self._draw(self.engine.garden.snapshot(), self.engine.tick_progress())

        self.engine.stop()
        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        garden = self.engine.garden
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.engine.toggle_pause()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._change_speed(+1)
                elif event.key == pygame.K_MINUS:
                    self._change_speed(-1)
                elif event.key == pygame.K_w:
                    garden.manual_water()
                elif event.key == pygame.K_p:
                    garden.manual_pest_control()
                elif event.key == pygame.K_f:
                    garden.fertilize_all()

    def _change_speed(self, step: int) -> None:
        self._speed_index = max(
            0,
            min(len(self._SPEED_STEPS) - 1, self._speed_index + step),
        )
        self.engine.set_speed(self._SPEED_STEPS[self._speed_index])

    def _draw(self, snapshot: GardenSnapshot, progress: float) -> None:
        """Render one frame."""
        self.screen.fill((0, 0, 0))
        self._draw_soil(snapshot)
        self._draw_sprinklers(snapshot)
        self._draw_plants(snapshot)
        self._draw_sensors(snapshot)
        self._draw_insects(snapshot, progress)
        self._draw_info_panel(snapshot)
        pygame.display.flip()

    def _draw_soil(self, snapshot: GardenSnapshot) -> None:
        """Fill the grid with soil tinted by the current light level."""
        cs = self.cell_size
        t = snapshot.light / 100.0
        colour = _SOIL_NIGHT + t * (_SOIL_DAY - _SOIL_NIGHT)
        pygame.draw.rect(
            self.screen,
            colour.astype(int).tolist(),
            (0, 0, snapshot.cols * cs, snapshot.rows * cs),
        )
        for row in range(snapshot.rows + 1):
            pygame.draw.line(
                self.screen,
                _GRID_LINE,
                (0, row * cs),
                (snapshot.cols * cs, row * cs),
            )
        for col in range(snapshot.cols + 1):
            pygame.draw.line(
                self.screen,
                _GRID_LINE,
                (col * cs, 0),
                (col * cs, snapshot.rows * cs),
            )

    def _draw_sprinklers(self, snapshot: GardenSnapshot) -> None:
        """Draw each sprinkler head, with a translucent zone while active."""
        cs = self.cell_size
        overlay = pygame.Surface(
            (snapshot.cols * cs, snapshot.rows * cs),
            pygame.SRCALPHA,
        )
        for sprinkler in snapshot.sprinklers:
            centre = self._cell_centre(sprinkler.position.row, sprinkler.position.col)
            if sprinkler.active:
                pygame.draw.circle(
                    overlay,
                    (*_SPRINKLER_ACTIVE, 40),
                    centre,
                    int(sprinkler.radius * cs),
                )
            colour = _SPRINKLER_ACTIVE if sprinkler.active else _SPRINKLER_IDLE
            pygame.draw.circle(self.screen, colour, centre, max(3, cs // 5))
        self.screen.blit(overlay, (0, 0))

    def _draw_plants(self, snapshot: GardenSnapshot) -> None:
        """Draw plants as squares sized by growth stage, faded by health."""
        cs = self.cell_size
        for plant in snapshot.plants:
            if plant.alive:
                base = np.array(_PLANT_COLOURS.get(plant.species, (0, 200, 0)))
                t = _HEALTH_FLOOR + (1.0 - _HEALTH_FLOOR) * plant.health / 100.0
                colour = (np.array(_DEAD_PLANT) + t * (base - _DEAD_PLANT)).astype(int)
                size = max(4, int(cs * _stage_scale(plant.stage)))
            else:
                colour = np.array(_DEAD_PLANT)
                size = max(4, cs // 3)
            x = plant.position.col * cs + (cs - size) // 2
            y = plant.position.row * cs + (cs - size) // 2
            pygame.draw.rect(self.screen, colour.tolist(), (x, y, size, size))

    def _draw_sensors(self, snapshot: GardenSnapshot) -> None:
        """Draw sensors as small diamonds in the cell corner."""
        cs = self.cell_size
        r = max(2, cs // 8)
        for sensor in snapshot.sensors:
            x = sensor.position.col * cs + r + 1
            y = sensor.position.row * cs + r + 1
            colour = _SENSOR_ALERT if sensor.alert else _SENSOR
            pygame.draw.polygon(
                self.screen,
                colour,
                [(x, y - r), (x + r, y), (x, y + r), (x - r, y)],
            )

    def _draw_insects(self, snapshot: GardenSnapshot, progress: float) -> None:
        """Draw living insects as dots interpolated along their last move."""
        cs = self.cell_size
        radius = max(2, cs // 6)
        for insect in snapshot.insects:
            if not insect.alive:
                continue
            row = _lerp(insect.previous_position.row, insect.position.row, progress)
            col = _lerp(insect.previous_position.col, insect.position.col, progress)
            colour = _INSECT_COLOURS.get(insect.species, (200, 200, 200))
            centre = (int(col * cs + cs / 2), int(row * cs + cs / 2))
            pygame.draw.circle(self.screen, colour, centre, radius)

    def _draw_info_panel(self, snapshot: GardenSnapshot) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = snapshot.cols * self.cell_size + 10
        y = 10
        state = "PAUSED" if self.engine.paused else "RUNNING"

        lines = [
            f"Tick: {snapshot.tick}  ({state})",
            f"Speed: {self.engine.speed:.2f}x",
            "",
            "--- Environment ---",
            f"Temperature: {snapshot.temperature:.1f} F",
            f"Light: {snapshot.light:.0f}",
            f"Humidity: {snapshot.humidity:.0f}%",
            f"Time of day: {snapshot.day_progress * 24:.1f}h",
            "",
            f"Plants: {snapshot.alive_plants}/{len(snapshot.plants)} alive",
            f"Insects: {snapshot.alive_insects} ({snapshot.alive_pests} pests)",
            "",
            "--- Modules ---",
        ]
        lines += [module.status for module in snapshot.modules]

        if self.history is not None:
            lines += ["", "--- Events ---"]
            lines += [
                f"{event.category.name}: {event.message}"[:56]
                for event in self.history.recent()[-self._RECENT_EVENTS :]
            ]

        lines += [
            "",
            "--- Controls ---",
            "SPACE: pause   +/-: speed   ESC: quit",
            "W: water   P: pest control   F: fertilize",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 16

    def _cell_centre(self, row: int, col: int) -> tuple[int, int]:
        cs = self.cell_size
        return col * cs + cs // 2, row * cs + cs // 2


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _stage_scale(stage: str) -> float:
    """Fraction of a cell a plant fills at ``stage``."""
    return {
        "SEED": 0.2,
        "SPROUT": 0.35,
        "VEGETATIVE": 0.5,
        "FLOWERING": 0.65,
        "FRUITING": 0.75,
        "MATURE": 0.85,
        "WILTING": 0.5,
    }.get(stage, 0.4)
