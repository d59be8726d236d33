"""State records owned by the navigation engine.

Only ``NavigationEngine`` writes these. Readers receive copies from the
engine's snapshot properties.
"""

from dataclasses import dataclass
from enum import Enum

from vortrainer.navigation.geodesy import GeoPoint
from vortrainer.navigation.stations import Station


class ToFrom(Enum):
    """TO/FROM flag of the VOR indicator.

    Attributes:
        TO: Following the selected course leads toward the station.
        FROM: Following the selected course leads away from the station.
        OFF: No usable signal.
    """

    TO = "TO"
    FROM = "FROM"
    OFF = "OFF"


class ReceiverStatus(Enum):
    """Receiver state machine.

    NO_SIGNAL -> OUT_OF_RANGE -> TRACKING, driven only by the recompute.
    """

    NO_SIGNAL = "no_signal"
    OUT_OF_RANGE = "out_of_range"
    TRACKING = "tracking"


@dataclass
class AircraftState:
    """Aircraft kinematic state.

    Attributes:
        position: Current latitude/longitude.
        heading: True heading in degrees, [0, 360).
        altitude: Altitude in feet; only used for reception range.
        speed: Groundspeed in knots.
        autopilot_enabled: Advisory flag, not acted on by the engine.
    """

    position: GeoPoint
    heading: float = 90.0
    altitude: float = 5000.0
    speed: float = 120.0
    autopilot_enabled: bool = False


@dataclass
class VORReceiver:
    """Tuned VOR receiver and its derived indications.

    ``frequency`` and ``obs`` are inputs. Every other field is written only
    by ``NavigationEngine.calculate_vor_data``.

    Attributes:
        frequency: Tuned frequency token, e.g. "113.60".
        obs: Selected course in degrees, [0, 360).
        cdi: Needle deflection, [-10, +10], one decimal.
        to_from: TO/FROM/OFF flag.
        station_in_range: Whether the selected station is received.
        selected_station: Station matching the frequency, if any.
        radial: Whole-degree radial the aircraft is on, [0, 360).
        distance: Distance to the station in nm, one decimal.
    """

    frequency: str = "113.60"
    obs: float = 0.0
    cdi: float = 0.0
    to_from: ToFrom = ToFrom.OFF
    station_in_range: bool = False
    selected_station: Station | None = None
    radial: int = 0
    distance: float = 0.0

    @property
    def status(self) -> ReceiverStatus:
        if self.selected_station is None:
            return ReceiverStatus.NO_SIGNAL
        if not self.station_in_range:
            return ReceiverStatus.OUT_OF_RANGE
        return ReceiverStatus.TRACKING


@dataclass
class SimulationState:
    """Flags read by the flight timer.

    Attributes:
        running: Whether the aircraft is being flown by the timer.
        speed: Time-acceleration multiplier.
        auto_fly: Demonstration flag, unused.
    """

    running: bool = False
    speed: float = 1.0
    auto_fly: bool = False
