"""Tests for the command-line entry point.

Window tests run against the SDL dummy video driver set up in conftest;
the rest cover settings loading, session setup and headless flights.
"""

from pathlib import Path
from unittest.mock import patch

import pygame
import pytest

from vortrainer.core.config import TrainerSettings
from vortrainer.engine.events import ReceiverStatusChangedEvent, SimulationStateChangedEvent
from vortrainer.engine.state import ToFrom
from vortrainer.main import (
    VORTrainer,
    build_engine,
    load_settings,
    main,
    parse_args,
    run_headless,
    setup_session,
)
from vortrainer.scenario.training import ScenarioError


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path: Path):
    with patch("vortrainer.core.logging_system.get_platform_log_dir", return_value=tmp_path):
        yield


class TestSessionSetup:
    """Test building and configuring an engine from the CLI."""

    def test_load_bundled_settings(self) -> None:
        assert load_settings() == TrainerSettings()

    def test_build_engine_loads_catalogs(self) -> None:
        engine = build_engine(TrainerSettings())
        assert len(engine.stations) == 3
        assert len(engine.scenarios) == 4

    def test_missing_data_files_fall_back(self) -> None:
        settings = TrainerSettings(stations_file="nope.csv", scenarios_file="nope.yaml")
        engine = build_engine(settings)
        assert engine.stations.find_station("LAX") is not None
        assert engine.scenarios.find("course-tracking") is not None

    def test_setup_applies_arguments(self) -> None:
        engine = build_engine(TrainerSettings())
        args = parse_args(["--scenario", "course-tracking", "--obs", "265", "--time-scale", "5"])

        setup_session(engine, args)

        assert engine.selected_scenario == "course-tracking"
        assert engine.receiver.obs == 265
        assert engine.simulation.speed == 5

    def test_setup_unknown_scenario(self) -> None:
        engine = build_engine(TrainerSettings())
        with pytest.raises(ScenarioError):
            setup_session(engine, parse_args(["--scenario", "barrel-roll"]))


class TestHeadless:
    """Test flying without a window."""

    def test_course_tracking_inbound(self) -> None:
        engine = build_engine(TrainerSettings())
        engine.reset_to_scenario("course-tracking")

        ticks = run_headless(engine, duration_s=60)

        assert ticks == 60
        assert engine.simulation.running is False
        assert engine.receiver.to_from is ToFrom.TO
        assert engine.receiver.cdi == 0
        assert engine.receiver.distance == pytest.approx(23.3, abs=0.1)

    def test_timer_detached_afterwards(self) -> None:
        engine = build_engine(TrainerSettings())
        run_headless(engine, duration_s=5)

        assert engine.event_bus.get_subscriber_count(SimulationStateChangedEvent) == 0
        assert engine.event_bus.get_subscriber_count(ReceiverStatusChangedEvent) == 0


class TestMain:
    """Test exit codes."""

    def test_list_scenarios(self, capsys) -> None:
        assert main(["--list-scenarios"]) == 0
        out = capsys.readouterr().out
        assert "station-passage" in out
        assert "Advanced" in out

    def test_headless_run(self) -> None:
        argv = ["--headless", "--scenario", "station-passage", "--duration", "120", "--time-scale", "10"]
        assert main(argv) == 0

    def test_unknown_scenario(self) -> None:
        assert main(["--headless", "--scenario", "barrel-roll"]) == 2

    def test_missing_config(self, tmp_path: Path) -> None:
        assert main(["--headless", "--config", str(tmp_path / "missing.yaml")]) == 2


class TestTrainerWindow:
    """Test keyboard handling in the pygame window."""

    @pytest.fixture
    def trainer(self):
        window = VORTrainer(build_engine(TrainerSettings()))
        yield window
        window.flight_timer.detach()

    def test_heading_keys(self, trainer: VORTrainer) -> None:
        trainer._handle_key(pygame.K_LEFT, 0)
        assert trainer.engine.aircraft.heading == 85

    def test_obs_keys(self, trainer: VORTrainer) -> None:
        trainer._handle_key(pygame.K_q, 0)
        assert trainer.engine.receiver.obs == 359
        trainer._handle_key(pygame.K_e, pygame.KMOD_SHIFT)
        assert trainer.engine.receiver.obs == 9

    def test_frequency_keys(self, trainer: VORTrainer) -> None:
        trainer._handle_key(pygame.K_PAGEUP, 0)
        assert trainer.engine.receiver.frequency == "113.65"
        assert trainer.engine.receiver.selected_station is None

    def test_space_starts_timer(self, trainer: VORTrainer) -> None:
        trainer._handle_key(pygame.K_SPACE, 0)
        assert trainer.engine.simulation.running is True
        assert trainer.flight_timer.active
        trainer._handle_key(pygame.K_SPACE, 0)
        assert not trainer.flight_timer.active

    def test_scenario_key(self, trainer: VORTrainer) -> None:
        trainer._handle_key(pygame.K_3, 0)
        assert trainer.engine.selected_scenario == "course-tracking"
        assert trainer.tuner.frequency == "113.60"

    def test_render(self, trainer: VORTrainer) -> None:
        trainer._render()

    def test_escape_quits(self, trainer: VORTrainer) -> None:
        trainer._handle_key(pygame.K_ESCAPE, 0)
        assert trainer.running is False
