"""Events published by the navigation engine.

Each event carries a snapshot, so subscribers can keep it without seeing
later mutations.
"""

from dataclasses import dataclass, field

from vortrainer.core.event_bus import Event
from vortrainer.engine.state import (
    AircraftState,
    ReceiverStatus,
    SimulationState,
    VORReceiver,
)
from vortrainer.navigation.geodesy import GeoPoint


def _default_aircraft() -> AircraftState:
    return AircraftState(position=GeoPoint(0.0, 0.0))


@dataclass
class AircraftStateChangedEvent(Event):
    """Published after position, heading, speed, altitude or autopilot change."""

    aircraft: AircraftState = field(default_factory=_default_aircraft)


@dataclass
class ReceiverUpdatedEvent(Event):
    """Published after every VOR recompute."""

    receiver: VORReceiver = field(default_factory=VORReceiver)
    status: ReceiverStatus = ReceiverStatus.NO_SIGNAL


@dataclass
class ReceiverStatusChangedEvent(Event):
    """Published when the receiver moves between NO_SIGNAL, OUT_OF_RANGE and TRACKING."""

    previous: ReceiverStatus = ReceiverStatus.NO_SIGNAL
    current: ReceiverStatus = ReceiverStatus.NO_SIGNAL


@dataclass
class SimulationStateChangedEvent(Event):
    """Published after start, stop or a multiplier change."""

    simulation: SimulationState = field(default_factory=SimulationState)


@dataclass
class ScenarioAppliedEvent(Event):
    """Published once a training scenario has been applied."""

    scenario_id: str = ""
