"""VOR navigation state engine.

Typical usage:
    from vortrainer.engine import NavigationEngine, ToFrom
    from vortrainer.navigation import StationCatalog

    engine = NavigationEngine(StationCatalog.default())
    engine.tune_frequency("113.60")
"""

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
from vortrainer.engine.vor_engine import NavigationEngine, round_half_up

__all__ = [
    "AircraftState",
    "AircraftStateChangedEvent",
    "NavigationEngine",
    "ReceiverStatus",
    "ReceiverStatusChangedEvent",
    "ReceiverUpdatedEvent",
    "ScenarioAppliedEvent",
    "SimulationState",
    "SimulationStateChangedEvent",
    "ToFrom",
    "VORReceiver",
    "round_half_up",
]
