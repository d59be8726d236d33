"""Trainer configuration loaded from YAML.

``ConfigLoader`` gives dot-notation access to a YAML document and
``TrainerSettings`` turns the trainer section of it into typed values with
sensible defaults, so a missing key never breaks startup.

Typical usage example:
    from vortrainer.core.config import ConfigLoader, TrainerSettings

    config = ConfigLoader.load("config/trainer.yaml")
    settings = TrainerSettings.from_config(config)
    engine = NavigationEngine(catalog, settings=settings)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Dot-notation view over a YAML configuration document.

    Examples:
        >>> config = ConfigLoader.load("config/trainer.yaml")
        >>> config.get("aircraft.max_speed_kts", default=300)
        300
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data if data is not None else {}

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            ConfigLoader holding the parsed document.

        Raises:
            ConfigError: If the file is missing or is not valid YAML.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value using dot notation such as ``"simulation.min_tick_ms"``.

        Args:
            key: Dotted key.
            default: Returned when any part of the key is missing.

        Returns:
            The configured value or ``default``.
        """
        value: Any = self._data
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation, creating sections as needed."""
        parts = key.split(".")
        data = self._data
        for part in parts[:-1]:
            data = data.setdefault(part, {})
        data[parts[-1]] = value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get a whole configuration section.

        Raises:
            ConfigError: If the section is missing or is not a mapping.
        """
        value = self.get(key)
        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")
        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")
        return value

    def save(self, path: str | Path) -> None:
        """Write the configuration back to a YAML file.

        Raises:
            ConfigError: If the file cannot be written.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

        logger.info("Saved configuration to: %s", path)

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one; ``other`` wins."""
        self._data = _merge_dicts(self._data, other._data)

    def to_dict(self) -> dict[str, Any]:
        return self._data.copy()


def _merge_dicts(base: dict, override: dict) -> dict:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


@dataclass
class TrainerSettings:
    """Typed trainer settings.

    Attributes:
        max_speed_kts: Upper clamp for aircraft groundspeed.
        initial_latitude: Aircraft latitude at session start.
        initial_longitude: Aircraft longitude at session start.
        initial_heading: Aircraft heading at session start (degrees true).
        initial_altitude_ft: Aircraft altitude at session start.
        initial_speed_kts: Aircraft groundspeed at session start.
        initial_frequency: NAV frequency tuned at session start.
        min_multiplier: Lower clamp for the time-acceleration multiplier.
        max_multiplier: Upper clamp for the time-acceleration multiplier.
        min_tick_ms: Shortest interval the flight timer may fire at.
        stations_file: Station catalog CSV, relative to the data directory.
        scenarios_file: Training scenario YAML, relative to the data directory.
    """

    max_speed_kts: float = 300.0
    initial_latitude: float = 34.0522
    initial_longitude: float = -118.2437
    initial_heading: float = 90.0
    initial_altitude_ft: float = 5000.0
    initial_speed_kts: float = 120.0
    initial_frequency: str = "113.60"
    min_multiplier: float = 0.1
    max_multiplier: float = 100.0
    min_tick_ms: float = 10.0
    stations_file: str = "navigation/vor_stations.csv"
    scenarios_file: str = "scenarios/training_scenarios.yaml"

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "TrainerSettings":
        """Build settings from a loaded configuration, keeping defaults for gaps."""
        defaults = cls()
        frequency = config.get("receiver.initial_frequency", defaults.initial_frequency)
        return cls(
            max_speed_kts=float(config.get("aircraft.max_speed_kts", defaults.max_speed_kts)),
            initial_latitude=float(config.get("aircraft.initial.latitude", defaults.initial_latitude)),
            initial_longitude=float(
                config.get("aircraft.initial.longitude", defaults.initial_longitude)
            ),
            initial_heading=float(config.get("aircraft.initial.heading", defaults.initial_heading)),
            initial_altitude_ft=float(
                config.get("aircraft.initial.altitude_ft", defaults.initial_altitude_ft)
            ),
            initial_speed_kts=float(
                config.get("aircraft.initial.speed_kts", defaults.initial_speed_kts)
            ),
            # YAML reads 113.60 as a float; the catalog matches on "113.60".
            initial_frequency=frequency if isinstance(frequency, str) else f"{frequency:.2f}",
            min_multiplier=float(config.get("simulation.min_multiplier", defaults.min_multiplier)),
            max_multiplier=float(config.get("simulation.max_multiplier", defaults.max_multiplier)),
            min_tick_ms=float(config.get("simulation.min_tick_ms", defaults.min_tick_ms)),
            stations_file=config.get("data.stations", defaults.stations_file),
            scenarios_file=config.get("data.scenarios", defaults.scenarios_file),
        )
