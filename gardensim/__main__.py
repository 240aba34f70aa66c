"""Entry point for ``python -m gardensim``.

Loads the default YAML config, builds a simulation engine with the
standard planting plan, and either opens a Pygame window to watch the
garden or, with ``--headless``, runs a fixed number of ticks and prints
the final module status.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from gardensim.events.sink import FanoutEventSink, LoggingEventSink, MemoryEventSink
from gardensim.simulation.config import SimulationConfig
from gardensim.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gardensim",
        description="gardensim - autonomous garden simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and print a status report",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=1000,
        help="Ticks to run in headless mode (default: 1000)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Tick rate multiplier, 0.1-10 (default: 1)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=32,
        help="Pixel size per grid cell (default: 32)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for garden events (default: INFO)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create engine, run headless or launch renderer."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    history = MemoryEventSink()
    engine = SimulationEngine(
        config=config,
        sink=FanoutEventSink(LoggingEventSink(), history),
        speed=args.speed,
    )

    if args.headless:
        engine.run(args.ticks)
        print(engine.garden.status_summary())
        for module in engine.garden.modules:
            print(module.status_summary())
        return

    from gardensim.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        engine=engine,
        cell_size=args.cell_size,
        history=history,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
