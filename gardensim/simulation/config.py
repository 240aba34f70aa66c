"""Config — load garden simulation parameters from YAML files.

All tunable constants (grid size, tick cadence, housekeeping intervals,
control-module set points, ecological spawn rates) live in YAML and are
parsed into typed dataclasses here.  Species constants are not
configuration; they live in ``gardensim.entities.species``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from gardensim.modules.heating import HeatingMode
from gardensim.modules.pest_control import PestControlMethod


@dataclass
class WateringConfig:
    """Irrigation layout and hysteresis band.

    Attributes:
        threshold_low: Moisture below which an idle zone starts.
        threshold_high: Moisture above which a running zone may stop.
        sprinkler_radius: Coverage radius of default-layout sprinklers.
        sprinkler_flow: Flow rate of default-layout sprinklers.
    """

    threshold_low: float = 25.0
    threshold_high: float = 65.0
    sprinkler_radius: float = 7.5
    sprinkler_flow: float = 8.0


@dataclass
class HeatingConfig:
    """Climate controller set points."""

    mode: HeatingMode = HeatingMode.AUTO
    target_temperature: float = 65.0
    adjust_rate: float = 2.0


@dataclass
class LightingConfig:
    """Grow light set point."""

    target_light: float = 60.0


@dataclass
class PestControlConfig:
    """Pest management policy.

    Attributes:
        method: Treatment applied on activation.
        threshold: Living pests needed to trigger treatment.
        check_interval: Ticks between population checks.
    """

    method: PestControlMethod = PestControlMethod.TARGETED
    threshold: int = 1
    check_interval: int = 5


@dataclass
class EcologyConfig:
    """Predation parameters for beneficial insects.

    Attributes:
        hunt_radius: Distance within which a predator can catch a pest.
        kill_chance: Probability of a kill per pest in range.
    """

    hunt_radius: float = 2.0
    kill_chance: float = 0.3


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        name: Garden display name.
        rows: Number of grid rows.
        cols: Number of grid columns.
        day_length: Ticks per full day/night cycle.
        weather_interval: Ticks between weather drift steps.
        tick_seconds: Wall-clock seconds per tick at 1x speed.
        cleanup_interval: Ticks between removals of dead insects.
        status_interval: Ticks between periodic status events.
        default_layout: Seed the standard planting plan on startup.
    """

    seed: int = 42
    name: str = "My Automated Garden"
    rows: int = 20
    cols: int = 20
    day_length: int = 200
    weather_interval: int = 50
    tick_seconds: float = 0.5
    cleanup_interval: int = 200
    status_interval: int = 50
    default_layout: bool = True

    watering: WateringConfig = field(default_factory=WateringConfig)
    heating: HeatingConfig = field(default_factory=HeatingConfig)
    lighting: LightingConfig = field(default_factory=LightingConfig)
    pest_control: PestControlConfig = field(default_factory=PestControlConfig)
    ecology: EcologyConfig = field(default_factory=EcologyConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Missing keys keep their defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """Build a config from an already-parsed mapping."""
        heating = dict(data.get("heating") or {})
        if "mode" in heating:
            heating["mode"] = HeatingMode[str(heating["mode"]).upper()]
        pest = dict(data.get("pest_control") or {})
        if "method" in pest:
            pest["method"] = PestControlMethod[str(pest["method"]).upper()]

        return cls(
            seed=data.get("seed", cls.seed),
            name=data.get("name", cls.name),
            rows=data.get("rows", cls.rows),
            cols=data.get("cols", cls.cols),
            day_length=data.get("day_length", cls.day_length),
            weather_interval=data.get("weather_interval", cls.weather_interval),
            tick_seconds=data.get("tick_seconds", cls.tick_seconds),
            cleanup_interval=data.get("cleanup_interval", cls.cleanup_interval),
            status_interval=data.get("status_interval", cls.status_interval),
            default_layout=data.get("default_layout", cls.default_layout),
            watering=_section(WateringConfig, data.get("watering")),
            heating=_section(HeatingConfig, heating),
            lighting=_section(LightingConfig, data.get("lighting")),
            pest_control=_section(PestControlConfig, pest),
            ecology=_section(EcologyConfig, data.get("ecology")),
        )


def _section(cls: type, data: dict[str, Any] | None) -> Any:
    """Build a nested config dataclass, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in (data or {}).items() if k in known})
