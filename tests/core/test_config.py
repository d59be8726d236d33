"""Tests for YAML configuration and trainer settings."""

from pathlib import Path

import pytest

from vortrainer.core.config import ConfigError, ConfigLoader, TrainerSettings
from vortrainer.core.resource_path import get_config_path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "trainer.yaml"
    path.write_text(
        "aircraft:\n"
        "  max_speed_kts: 250\n"
        "  initial:\n"
        "    heading: 180\n"
        "receiver:\n"
        "  initial_frequency: 115.8\n",
        encoding="utf-8",
    )
    return path


class TestConfigLoader:
    """Test dot-notation access to YAML documents."""

    def test_get_nested(self, config_file: Path) -> None:
        config = ConfigLoader.load(config_file)
        assert config.get("aircraft.max_speed_kts") == 250
        assert config.get("aircraft.initial.heading") == 180

    def test_get_default(self, config_file: Path) -> None:
        config = ConfigLoader.load(config_file)
        assert config.get("aircraft.initial.altitude_ft", 5000) == 5000
        assert config.get("aircraft.max_speed_kts.extra") is None

    def test_set_creates_sections(self) -> None:
        config = ConfigLoader()
        config.set("simulation.max_multiplier", 50)
        assert config.get("simulation.max_multiplier") == 50
        assert config.get_section("simulation") == {"max_multiplier": 50}

    def test_get_section_errors(self, config_file: Path) -> None:
        config = ConfigLoader.load(config_file)
        with pytest.raises(ConfigError):
            config.get_section("simulation")
        with pytest.raises(ConfigError):
            config.get_section("aircraft.max_speed_kts")

    def test_merge_overrides(self, config_file: Path) -> None:
        config = ConfigLoader.load(config_file)
        config.merge(ConfigLoader({"aircraft": {"initial": {"heading": 90, "latitude": 33.0}}}))

        assert config.get("aircraft.initial.heading") == 90
        assert config.get("aircraft.initial.latitude") == 33.0
        assert config.get("aircraft.max_speed_kts") == 250

    def test_save_and_reload(self, tmp_path: Path) -> None:
        config = ConfigLoader({"receiver": {"initial_frequency": "117.80"}})
        path = tmp_path / "nested" / "out.yaml"

        config.save(path)

        assert ConfigLoader.load(path).to_dict() == config.to_dict()

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load(tmp_path / "missing.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("aircraft: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ConfigLoader.load(path)

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ConfigLoader.load(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigLoader.load(path).to_dict() == {}


class TestTrainerSettings:
    """Test typed settings built from configuration."""

    def test_defaults(self) -> None:
        settings = TrainerSettings()
        assert settings.max_speed_kts == 300
        assert (settings.initial_latitude, settings.initial_longitude) == (34.0522, -118.2437)
        assert settings.initial_frequency == "113.60"
        assert (settings.min_multiplier, settings.max_multiplier) == (0.1, 100)
        assert settings.min_tick_ms == 10

    def test_partial_config_keeps_defaults(self, config_file: Path) -> None:
        settings = TrainerSettings.from_config(ConfigLoader.load(config_file))

        assert settings.max_speed_kts == 250
        assert settings.initial_heading == 180
        assert settings.initial_speed_kts == 120
        assert settings.stations_file == "navigation/vor_stations.csv"

    def test_unquoted_frequency_becomes_token(self, config_file: Path) -> None:
        settings = TrainerSettings.from_config(ConfigLoader.load(config_file))
        assert settings.initial_frequency == "115.80"

    def test_bundled_config(self) -> None:
        settings = TrainerSettings.from_config(ConfigLoader.load(get_config_path("trainer.yaml")))
        assert settings == TrainerSettings()
