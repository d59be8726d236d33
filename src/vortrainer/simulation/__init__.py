"""Timer-driven flight animation."""

from vortrainer.simulation.flight_timer import (
    FlightTimer,
    ManualScheduler,
    PygameScheduler,
    Scheduler,
    ThreadedScheduler,
    TimerHandle,
)

__all__ = [
    "FlightTimer",
    "ManualScheduler",
    "PygameScheduler",
    "Scheduler",
    "ThreadedScheduler",
    "TimerHandle",
]
