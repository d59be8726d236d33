"""VOR Trainer - interactive VOR navigation trainer.

Main entry point. Loads configuration, the station catalog and the training
scenarios, builds the navigation engine, then either opens the pygame
trainer window or flies a headless session and logs the receiver readout.

Typical usage:
    vortrainer
    vortrainer --scenario course-tracking
    vortrainer --scenario station-passage --headless --duration 900 --time-scale 10
"""

import argparse
import sys
from pathlib import Path

import pygame

from vortrainer.core.config import ConfigError, ConfigLoader, TrainerSettings
from vortrainer.core.event_bus import EventBus
from vortrainer.core.logging_system import get_logger, initialize_logging, shutdown_logging
from vortrainer.core.resource_path import get_config_path, get_data_path
from vortrainer.engine.events import ReceiverStatusChangedEvent
from vortrainer.engine.vor_engine import NavigationEngine
from vortrainer.navigation.frequency_tuner import FrequencyTuner
from vortrainer.navigation.stations import StationCatalog, StationCatalogError
from vortrainer.scenario.training import ScenarioCatalog, ScenarioError
from vortrainer.simulation.flight_timer import FlightTimer, ManualScheduler, PygameScheduler
from vortrainer.ui.status_display import aircraft_lines, receiver_lines, status_line

logger = get_logger(__name__)

WINDOW_SIZE = (800, 600)
HEADING_STEP = 5
SPEED_STEP_KTS = 10
MOVE_STEP_NM = 1.0


def load_settings(config_path: str | Path | None = None) -> TrainerSettings:
    """Load trainer settings, falling back to defaults when no file exists.

    Raises:
        ConfigError: If an explicitly given file is missing or invalid.
    """
    if config_path is not None:
        return TrainerSettings.from_config(ConfigLoader.load(config_path))

    default_path = get_config_path("trainer.yaml")
    if not default_path.exists():
        logger.info("No trainer.yaml found, using built-in settings")
        return TrainerSettings()
    return TrainerSettings.from_config(ConfigLoader.load(default_path))


def load_stations(settings: TrainerSettings) -> StationCatalog:
    path = get_data_path(settings.stations_file)
    if not path.exists():
        logger.warning("Station file %s not found, using built-in stations", path)
        return StationCatalog.default()
    return StationCatalog.from_csv(path)


def load_scenarios(settings: TrainerSettings) -> ScenarioCatalog:
    path = get_data_path(settings.scenarios_file)
    if not path.exists():
        logger.warning("Scenario file %s not found, using built-in scenarios", path)
        return ScenarioCatalog.default()
    return ScenarioCatalog.from_yaml(path)


def build_engine(settings: TrainerSettings, event_bus: EventBus | None = None) -> NavigationEngine:
    """Create an engine wired to the configured station and scenario catalogs."""
    return NavigationEngine(
        load_stations(settings),
        settings=settings,
        event_bus=event_bus or EventBus(),
        scenarios=load_scenarios(settings),
    )


def setup_session(engine: NavigationEngine, args: argparse.Namespace) -> None:
    """Apply CLI choices to a fresh engine.

    Raises:
        ScenarioError: If ``--scenario`` names an unknown scenario.
    """
    if args.scenario:
        if engine.scenarios is None or engine.scenarios.find(args.scenario) is None:
            raise ScenarioError(f"Unknown scenario: {args.scenario}")
        engine.reset_to_scenario(args.scenario)
    if args.frequency:
        engine.tune_frequency(args.frequency)
    if args.obs is not None:
        engine.set_obs(args.obs)
    if args.time_scale is not None:
        engine.set_simulation_speed(args.time_scale)


def run_headless(engine: NavigationEngine, duration_s: float, report_every_s: float = 10.0) -> int:
    """Fly the aircraft for ``duration_s`` simulated seconds without a window.

    Returns:
        Number of flight timer ticks executed.
    """
    scheduler = ManualScheduler()
    timer = FlightTimer(engine, scheduler)
    timer.attach()

    def on_status(event: ReceiverStatusChangedEvent) -> None:
        logger.info("Receiver now %s", event.current.name)

    engine.event_bus.subscribe(ReceiverStatusChangedEvent, on_status)
    engine.start_simulation()
    logger.info(status_line(engine.aircraft, engine.receiver))

    elapsed = 0.0
    while elapsed < duration_s:
        step = min(report_every_s, duration_s - elapsed)
        scheduler.advance(step)
        elapsed += step
        logger.info("t+%4.0fs %s", elapsed, status_line(engine.aircraft, engine.receiver))

    engine.stop_simulation()
    timer.detach()
    engine.event_bus.unsubscribe(ReceiverStatusChangedEvent, on_status)
    return timer.tick_count


class VORTrainer:
    """Interactive trainer window.

    Keys:
        Left/Right: heading -/+5    Up/Down: speed +/-10 kts
        Q/E: OBS -/+1 (shift: 10)   PgUp/PgDn: frequency +/-0.05
        F/B: move 1 nm fwd/back     Space: start/stop
        +/-: time acceleration      1-4: training scenarios
        A: autopilot flag           Esc: quit
    """

    def __init__(self, engine: NavigationEngine) -> None:
        self.engine = engine

        pygame.init()
        pygame.display.set_caption("VOR Trainer")
        self.screen = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 16)
        self.running = True

        self.scheduler = PygameScheduler()
        self.flight_timer = FlightTimer(engine, self.scheduler)
        self.flight_timer.attach()
        self.tuner = FrequencyTuner(engine.receiver.frequency, on_tune=engine.tune_frequency)
        self.scenario_ids = [s.id for s in engine.scenarios] if engine.scenarios else []

        logger.info("Trainer window ready")

    def run(self) -> None:
        while self.running:
            self.clock.tick(60)
            for event in pygame.event.get():
                self._handle_event(event)
            self._render()
            pygame.display.flip()
        self.shutdown()

    def _handle_event(self, event: pygame.event.Event) -> None:
        if self.scheduler.handle_event(event):
            return
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event.key, event.mod)

    def _handle_key(self, key: int, mods: int) -> None:
        engine = self.engine
        aircraft = engine.aircraft
        obs_step = 10 if mods & pygame.KMOD_SHIFT else 1

        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_LEFT:
            engine.set_aircraft_heading(aircraft.heading - HEADING_STEP)
        elif key == pygame.K_RIGHT:
            engine.set_aircraft_heading(aircraft.heading + HEADING_STEP)
        elif key == pygame.K_UP:
            engine.set_aircraft_speed(aircraft.speed + SPEED_STEP_KTS)
        elif key == pygame.K_DOWN:
            engine.set_aircraft_speed(aircraft.speed - SPEED_STEP_KTS)
        elif key == pygame.K_q:
            engine.set_obs(engine.receiver.obs - obs_step)
        elif key == pygame.K_e:
            engine.set_obs(engine.receiver.obs + obs_step)
        elif key == pygame.K_PAGEUP:
            self.tuner.step("up")
        elif key == pygame.K_PAGEDOWN:
            self.tuner.step("down")
        elif key == pygame.K_f:
            engine.move_forward(MOVE_STEP_NM)
        elif key == pygame.K_b:
            engine.move_backward(MOVE_STEP_NM)
        elif key == pygame.K_SPACE:
            if engine.simulation.running:
                engine.stop_simulation()
            else:
                engine.start_simulation()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            engine.set_simulation_speed(engine.simulation.speed * 2)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            engine.set_simulation_speed(engine.simulation.speed / 2)
        elif key == pygame.K_a:
            engine.toggle_autopilot()
        elif pygame.K_1 <= key <= pygame.K_9:
            index = key - pygame.K_1
            if index < len(self.scenario_ids):
                engine.reset_to_scenario(self.scenario_ids[index])
                self.tuner = FrequencyTuner(
                    engine.receiver.frequency, on_tune=engine.tune_frequency
                )

    def _render(self) -> None:
        self.screen.fill((16, 20, 28))
        simulation = self.engine.simulation
        state = "RUNNING" if simulation.running else "PAUSED"

        lines = [f"VOR Trainer  [{state} x{simulation.speed:g}]", ""]
        lines += aircraft_lines(self.engine.aircraft)
        lines.append("")
        lines += receiver_lines(self.engine.receiver)
        if self.engine.selected_scenario:
            lines += ["", f"Scenario: {self.engine.selected_scenario}"]

        y = 16
        for line in lines:
            text = self.font.render(line, True, (220, 230, 240))
            self.screen.blit(text, (16, y))
            y += 22

    def shutdown(self) -> None:
        self.flight_timer.detach()
        pygame.quit()
        logger.info("Trainer window closed")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="VOR Trainer - VOR radio navigation trainer")
    parser.add_argument("--scenario", type=str, help="Training scenario id (e.g., course-tracking)")
    parser.add_argument("--frequency", type=str, help="NAV frequency to tune (e.g., 113.60)")
    parser.add_argument("--obs", type=float, help="Course to select in degrees")
    parser.add_argument("--time-scale", type=float, help="Time acceleration multiplier (0.1-100)")
    parser.add_argument("--config", type=str, help="Path to a trainer.yaml file")
    parser.add_argument("--headless", action="store_true", help="Fly without opening a window")
    parser.add_argument(
        "--duration", type=float, default=300.0, help="Headless flight time in simulated seconds"
    )
    parser.add_argument(
        "--list-scenarios", action="store_true", help="List training scenarios and exit"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)

    logging_config = get_config_path("logging.yaml")
    initialize_logging(logging_config if logging_config.exists() else None)

    try:
        settings = load_settings(args.config)
        engine = build_engine(settings)

        if args.list_scenarios:
            for scenario in engine.scenarios or ():
                print(f"{scenario.id:24s} {scenario.difficulty.value:13s} {scenario.title}")
            return 0

        setup_session(engine, args)

        if args.headless:
            ticks = run_headless(engine, args.duration)
            logger.info("Headless session finished after %d ticks", ticks)
        else:
            VORTrainer(engine).run()
        return 0
    except (ConfigError, ScenarioError, StationCatalogError) as e:
        logger.error("%s", e)
        return 2
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return 1
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
