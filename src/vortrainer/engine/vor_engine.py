"""Navigation state engine.

The engine owns the aircraft, the VOR receiver and the simulation flags for
one training session. Inputs change only through its mutators, and every
mutator that touches position, heading, speed, altitude, OBS or tuning runs
``calculate_vor_data`` before returning, so the derived receiver fields can
never be observed stale.

Typical usage example:
    from vortrainer.engine import NavigationEngine
    from vortrainer.navigation import StationCatalog

    engine = NavigationEngine(StationCatalog.default())
    engine.set_aircraft_position(33.9425, -117.9000)
    engine.set_obs(270)
    engine.receiver.to_from  # ToFrom.TO
"""

import math
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from vortrainer.core.config import TrainerSettings
from vortrainer.core.event_bus import EventBus
from vortrainer.core.logging_system import get_logger
from vortrainer.engine.events import (
    AircraftStateChangedEvent,
    ReceiverStatusChangedEvent,
    ReceiverUpdatedEvent,
    ScenarioAppliedEvent,
    SimulationStateChangedEvent,
)
from vortrainer.engine.state import (
    AircraftState,
    ReceiverStatus,
    SimulationState,
    ToFrom,
    VORReceiver,
)
from vortrainer.navigation.geodesy import (
    GeoPoint,
    bearing_deg,
    displace,
    distance_nm,
    max_reception_range_nm,
    normalize_degrees,
)
from vortrainer.navigation.stations import Station, StationCatalog

if TYPE_CHECKING:
    from vortrainer.scenario.training import ScenarioCatalog

logger = get_logger(__name__)

CDI_FULL_SCALE = 10.0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, e.g. 2.25 -> 2.3 and -2.25 -> -2.2."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


class NavigationEngine:
    """Authoritative state of one VOR training session.

    All mutators and the recompute run under a single re-entrant lock, so a
    threaded flight timer and the UI never interleave. Events are published
    on the engine's ``EventBus`` after the derived state is up to date.

    Args:
        stations: Read-only station catalog shared by the process.
        settings: Clamps and initial values. Defaults apply when None.
        event_bus: Bus to publish change events on. A private bus is created
            when None.
        scenarios: Catalog used by ``reset_to_scenario``.

    Examples:
        >>> engine = NavigationEngine(StationCatalog.default())
        >>> engine.set_aircraft_heading(-10)
        >>> engine.aircraft.heading
        350
        >>> engine.tune_frequency("109.00")
        >>> engine.receiver.to_from
        <ToFrom.OFF: 'OFF'>
    """

    def __init__(
        self,
        stations: StationCatalog,
        settings: TrainerSettings | None = None,
        event_bus: EventBus | None = None,
        scenarios: "ScenarioCatalog | None" = None,
    ) -> None:
        self.settings = settings or TrainerSettings()
        self.event_bus = event_bus or EventBus()
        self._stations = stations
        self._scenarios = scenarios
        self._lock = threading.RLock()

        self._aircraft = AircraftState(
            position=GeoPoint(self.settings.initial_latitude, self.settings.initial_longitude),
            heading=normalize_degrees(self.settings.initial_heading),
            altitude=max(0.0, self.settings.initial_altitude_ft),
            speed=self._clamp_speed(self.settings.initial_speed_kts),
        )
        self._receiver = VORReceiver(frequency=self.settings.initial_frequency)
        self._simulation = SimulationState(
            speed=self._clamp_multiplier(1.0),
        )
        self._selected_scenario: str | None = None
        self._status = self._receiver.status

        self.calculate_vor_data()

    # Read access

    @property
    def lock(self):
        """The engine's re-entrant lock. Hold it to make several calls atomic."""
        return self._lock

    @property
    def aircraft(self) -> AircraftState:
        with self._lock:
            return replace(self._aircraft)

    @property
    def receiver(self) -> VORReceiver:
        with self._lock:
            return replace(self._receiver)

    @property
    def simulation(self) -> SimulationState:
        with self._lock:
            return replace(self._simulation)

    @property
    def stations(self) -> StationCatalog:
        return self._stations

    @property
    def scenarios(self) -> "ScenarioCatalog | None":
        return self._scenarios

    @property
    def status(self) -> ReceiverStatus:
        with self._lock:
            return self._receiver.status

    @property
    def selected_scenario(self) -> str | None:
        return self._selected_scenario

    # Aircraft mutators

    def set_aircraft_position(self, latitude: float, longitude: float) -> None:
        """Place the aircraft. Coordinates are stored as given."""
        with self._lock:
            self._aircraft.position = GeoPoint(latitude, longitude)
            self._after_aircraft_change()

    def set_aircraft_heading(self, heading: float) -> None:
        """Set the heading, wrapped into [0, 360)."""
        with self._lock:
            self._aircraft.heading = normalize_degrees(heading)
            self._after_aircraft_change()

    def set_aircraft_speed(self, speed: float) -> None:
        """Set groundspeed, clamped to [0, max_speed_kts]."""
        with self._lock:
            self._aircraft.speed = self._clamp_speed(speed)
            self._after_aircraft_change()

    def set_aircraft_altitude(self, altitude: float) -> None:
        """Set altitude in feet; negative values clamp to 0 (no reception)."""
        with self._lock:
            self._aircraft.altitude = max(0.0, altitude)
            self._after_aircraft_change()

    def toggle_autopilot(self) -> None:
        with self._lock:
            self._aircraft.autopilot_enabled = not self._aircraft.autopilot_enabled
            self.event_bus.publish(AircraftStateChangedEvent(aircraft=replace(self._aircraft)))

    def move_forward(self, distance: float) -> None:
        """Fly ``distance`` nautical miles along the current heading.

        Uses the flat-earth step (60 nm per degree of latitude, longitude
        scaled by the cosine of latitude). Negative distances fly backward.
        """
        with self._lock:
            new_position = displace(self._aircraft.position, self._aircraft.heading, distance)
            self.set_aircraft_position(new_position.latitude, new_position.longitude)

    def move_backward(self, distance: float) -> None:
        self.move_forward(-distance)

    # Receiver mutators

    def set_obs(self, obs: float) -> None:
        """Select a course, wrapped into [0, 360)."""
        with self._lock:
            self._receiver.obs = normalize_degrees(obs)
            self.calculate_vor_data()

    def tune_frequency(self, frequency: str) -> None:
        """Tune the receiver to a frequency token.

        Unknown frequencies are not an error; the receiver shows NO_SIGNAL.
        """
        with self._lock:
            self._receiver.frequency = frequency
            self._receiver.selected_station = self._stations.find_by_frequency(frequency)
            logger.info("Tuned %s (%s)", frequency, self._receiver.selected_station or "no station")
            self.calculate_vor_data()

    # Simulation controls

    def start_simulation(self) -> None:
        with self._lock:
            self._simulation.running = True
            self._after_simulation_change()

    def stop_simulation(self) -> None:
        with self._lock:
            self._simulation.running = False
            self._after_simulation_change()

    def set_simulation_speed(self, multiplier: float) -> None:
        """Set the time-acceleration multiplier, clamped to [0.1, 100]."""
        with self._lock:
            self._simulation.speed = self._clamp_multiplier(multiplier)
            self._after_simulation_change()

    # Scenarios

    def select_scenario(self, scenario_id: str | None) -> None:
        self._selected_scenario = scenario_id

    def reset_to_scenario(self, scenario_id: str) -> bool:
        """Apply a scenario from the engine's scenario catalog.

        Returns:
            True if applied. Unknown ids, or an engine without a catalog,
            leave the state untouched and return False.
        """
        scenario = self._scenarios.find(scenario_id) if self._scenarios else None
        if scenario is None:
            logger.warning("Cannot reset to unknown scenario %s", scenario_id)
            return False

        with self._lock:
            scenario.apply_to(self)
            self.select_scenario(scenario.id)
            self.event_bus.publish(ScenarioAppliedEvent(scenario_id=scenario.id))
        logger.info("Reset to scenario %s", scenario.id)
        return True

    # VOR computation

    def calculate_vor_data(self) -> None:
        """Derive CDI, TO/FROM, radial and distance from the current inputs."""
        with self._lock:
            receiver = self._receiver
            station = self._stations.find_by_frequency(receiver.frequency)

            if station is None:
                self._store_indications(None, in_range=False, distance=0.0)
            else:
                aircraft_pos = self._aircraft.position
                distance = distance_nm(aircraft_pos, station.position)
                max_range = max_reception_range_nm(self._aircraft.altitude)

                if distance > max_range:
                    self._store_indications(station, in_range=False, distance=distance)
                else:
                    radial = int(round_half_up(bearing_deg(station.position, aircraft_pos))) % 360
                    cdi, to_from = self._deviation(radial, receiver.obs)
                    self._store_indications(
                        station,
                        in_range=True,
                        distance=distance,
                        radial=radial,
                        cdi=cdi,
                        to_from=to_from,
                    )

            self._publish_receiver()

    @staticmethod
    def _deviation(radial: int, obs: float) -> tuple[float, ToFrom]:
        """CDI deflection and flag for a radial against the selected course.

        The sine of the difference gives left/right deviation without a
        discontinuity at +/-180 degrees; the cosine separates the TO and FROM
        hemispheres.
        """
        delta = math.radians(radial - obs)
        cross = math.sin(delta)
        dot = math.cos(delta)

        cdi_angle = math.degrees(math.asin(max(-1.0, min(1.0, cross))))
        cdi = max(-CDI_FULL_SCALE, min(CDI_FULL_SCALE, cdi_angle))

        to_from = ToFrom.TO if dot < 0 else ToFrom.FROM
        if to_from is ToFrom.TO:
            cdi = -cdi
        return cdi, to_from

    def _store_indications(
        self,
        station: Station | None,
        in_range: bool,
        distance: float,
        radial: int = 0,
        cdi: float = 0.0,
        to_from: ToFrom = ToFrom.OFF,
    ) -> None:
        receiver = self._receiver
        receiver.selected_station = station
        receiver.station_in_range = in_range
        receiver.distance = round_half_up(distance, 1)
        receiver.radial = radial
        receiver.cdi = round_half_up(cdi, 1)
        receiver.to_from = to_from

    def _publish_receiver(self) -> None:
        status = self._receiver.status
        if status is not self._status:
            previous, self._status = self._status, status
            logger.info("Receiver %s -> %s", previous.name, status.name)
            self.event_bus.publish(ReceiverStatusChangedEvent(previous=previous, current=status))

        logger.debug(
            "VOR %s radial=%03d cdi=%.1f %s dist=%.1f",
            self._receiver.frequency,
            self._receiver.radial,
            self._receiver.cdi,
            self._receiver.to_from.value,
            self._receiver.distance,
        )
        self.event_bus.publish(ReceiverUpdatedEvent(receiver=replace(self._receiver), status=status))

    def _after_aircraft_change(self) -> None:
        self.calculate_vor_data()
        self.event_bus.publish(AircraftStateChangedEvent(aircraft=replace(self._aircraft)))

    def _after_simulation_change(self) -> None:
        logger.debug(
            "Simulation running=%s x%.1f", self._simulation.running, self._simulation.speed
        )
        self.event_bus.publish(SimulationStateChangedEvent(simulation=replace(self._simulation)))

    def _clamp_speed(self, speed: float) -> float:
        return max(0.0, min(self.settings.max_speed_kts, speed))

    def _clamp_multiplier(self, multiplier: float) -> float:
        return max(self.settings.min_multiplier, min(self.settings.max_multiplier, multiplier))
