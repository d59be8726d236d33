"""Repeating timer that flies the aircraft while the simulation runs.

The navigation engine has no notion of wall-clock time. ``FlightTimer``
turns groundspeed and the time-acceleration multiplier into periodic
``move_forward`` calls, using a ``Scheduler`` supplied by the host:

- ``ManualScheduler`` advances virtual time explicitly (headless runs, tests).
- ``ThreadedScheduler`` runs each interval on a daemon thread.
- ``PygameScheduler`` posts timer events into the pygame event queue.

Whenever the running flag, the groundspeed or the multiplier changes, the
current timer is cancelled and replaced, so a stale interval never keeps
firing after a rate change.

Typical usage example:
    scheduler = ManualScheduler()
    timer = FlightTimer(engine, scheduler)
    timer.attach()
    engine.start_simulation()
    scheduler.advance(60.0)  # one minute of flight
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

import pygame

from vortrainer.core.logging_system import get_logger
from vortrainer.engine.events import AircraftStateChangedEvent, SimulationStateChangedEvent
from vortrainer.engine.vor_engine import NavigationEngine

logger = get_logger(__name__)

SECONDS_PER_HOUR = 3600.0
JOIN_TIMEOUT_S = 1.0


class TimerHandle:
    """Cancellation handle for a scheduled interval.

    Attributes:
        interval_s: Seconds between callbacks.
    """

    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        self.interval_s = interval_s
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop the interval. A cancelled handle never fires again."""
        self._active = False

    def fire(self) -> None:
        if self._active:
            self.callback()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for an in-flight callback to finish. True once none is running."""
        return True


class Scheduler(ABC):
    """Source of repeating intervals for ``FlightTimer``."""

    @abstractmethod
    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Call ``callback`` every ``interval_s`` seconds until cancelled."""


class _ManualHandle(TimerHandle):
    def __init__(self, interval_s: float, callback: Callable[[], None], next_due: float) -> None:
        super().__init__(interval_s, callback)
        self.next_due = next_due


class ManualScheduler(Scheduler):
    """Scheduler driven by explicit calls to ``advance``.

    Examples:
        >>> scheduler = ManualScheduler()
        >>> handle = scheduler.schedule_interval(0.5, tick)
        >>> scheduler.advance(2.0)  # tick runs four times
        4
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[_ManualHandle] = []

    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_s <= 0:
            raise ValueError(f"Interval must be positive, got {interval_s}")
        handle = _ManualHandle(interval_s, callback, self.now + interval_s)
        self._handles.append(handle)
        return handle

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing every interval that falls due.

        Returns:
            Number of callbacks fired.
        """
        target = self.now + seconds
        fired = 0

        while True:
            self._handles = [h for h in self._handles if h.active]
            due = [h for h in self._handles if h.next_due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.next_due)
            self.now = max(self.now, handle.next_due)
            handle.next_due += handle.interval_s
            handle.fire()
            fired += 1

        self.now = target
        return fired

    @property
    def active_count(self) -> int:
        return sum(1 for h in self._handles if h.active)


class _ThreadHandle(TimerHandle):
    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        super().__init__(interval_s, callback)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True, name="flight-timer")

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        super().cancel()
        self._stop.set()

    def join(self, timeout: float | None = None) -> bool:
        # A callback cancelling its own timer cannot wait for itself.
        if self._thread is not threading.current_thread() and self._thread.is_alive():
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop.wait(self.interval_s):
            try:
                self.fire()
            except Exception as e:
                logger.error("Flight timer callback failed: %s", e, exc_info=True)
                self.cancel()


class ThreadedScheduler(Scheduler):
    """Runs each interval on its own daemon thread.

    The engine serialises mutators with its lock, so ticks from this thread
    and calls from the UI thread never interleave.
    """

    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ThreadHandle(interval_s, callback)
        handle.start()
        return handle


class _PygameHandle(TimerHandle):
    def __init__(
        self, interval_s: float, callback: Callable[[], None], event_type: int, generation: int
    ) -> None:
        super().__init__(interval_s, callback)
        self.event_type = event_type
        self.generation = generation

    def cancel(self) -> None:
        if self.active:
            pygame.time.set_timer(self.event_type, 0)
        super().cancel()


class PygameScheduler(Scheduler):
    """Interval timer backed by ``pygame.time.set_timer``.

    pygame keeps one timer per event type, so only the latest handle is live.
    Each timer event carries a generation number and events queued by a
    replaced timer are dropped in ``handle_event``.
    """

    def __init__(self, event_type: int | None = None) -> None:
        self.event_type = event_type if event_type is not None else pygame.event.custom_type()
        self._generation = 0
        self._current: _PygameHandle | None = None

    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        if self._current is not None:
            self._current.cancel()

        self._generation += 1
        handle = _PygameHandle(interval_s, callback, self.event_type, self._generation)
        millis = max(1, round(interval_s * 1000))
        pygame.time.set_timer(pygame.event.Event(self.event_type, generation=self._generation), millis)
        self._current = handle
        return handle

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Fire the live timer for one of its events.

        Returns:
            True if the event belonged to this scheduler.
        """
        if event.type != self.event_type:
            return False
        handle = self._current
        if handle is not None and getattr(event, "generation", None) == handle.generation:
            handle.fire()
        return True


class FlightTimer:
    """Moves the aircraft forward at a rate set by speed and time acceleration.

    Interval: ``max(min_tick_ms, 1000 / multiplier)`` milliseconds.
    Distance per tick: ``speed / 3600 * interval_s * multiplier`` nm.

    Rate changes and ticks both run under the engine lock. A tick that was
    already waiting for the lock when its interval was replaced does nothing.

    Args:
        engine: Engine to fly.
        scheduler: Source of repeating intervals.
        min_interval_ms: Shortest interval; defaults to the engine's
            ``min_tick_ms`` setting.
    """

    def __init__(
        self,
        engine: NavigationEngine,
        scheduler: Scheduler,
        min_interval_ms: float | None = None,
    ) -> None:
        self.engine = engine
        self.scheduler = scheduler
        self.min_interval_ms = (
            min_interval_ms if min_interval_ms is not None else engine.settings.min_tick_ms
        )

        self._handle: TimerHandle | None = None
        self._generation = 0
        self._rate: tuple[bool, float, float] | None = None
        self._in_tick = False
        self._attached = False
        self.tick_count = 0

    @property
    def handle(self) -> TimerHandle | None:
        return self._handle

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    def interval_ms(self, multiplier: float) -> float:
        return max(self.min_interval_ms, 1000.0 / multiplier)

    def attach(self) -> None:
        """Start following the engine's simulation and speed changes."""
        with self.engine.lock:
            if self._attached:
                return
            bus = self.engine.event_bus
            bus.subscribe(SimulationStateChangedEvent, self._on_rate_input)
            bus.subscribe(AircraftStateChangedEvent, self._on_rate_input)
            self._attached = True
            self._sync()

    def detach(self) -> None:
        """Stop following the engine and cancel any pending interval.

        Waits briefly for a tick already in progress on another thread, so
        call this without holding the engine lock.
        """
        with self.engine.lock:
            if self._attached:
                bus = self.engine.event_bus
                bus.unsubscribe(SimulationStateChangedEvent, self._on_rate_input)
                bus.unsubscribe(AircraftStateChangedEvent, self._on_rate_input)
                self._attached = False
            handle = self._handle
            self._cancel()
            self._rate = None

        if handle is not None and not handle.join(JOIN_TIMEOUT_S):
            logger.warning("Flight timer thread still running after detach")

    def _on_rate_input(self, _event) -> None:
        self._sync()

    def _sync(self) -> None:
        simulation = self.engine.simulation
        rate = (simulation.running, self.engine.aircraft.speed, simulation.speed)
        if rate == self._rate:
            return

        self._cancel()
        self._rate = rate
        running, speed, multiplier = rate
        if not running:
            return

        interval_s = self.interval_ms(multiplier) / 1000.0
        step_nm = speed / SECONDS_PER_HOUR * interval_s * multiplier
        generation = self._generation
        self._handle = self.scheduler.schedule_interval(
            interval_s, lambda: self._tick(generation, step_nm)
        )
        logger.info(
            "Flight timer every %.0f ms, %.4f nm per tick (%.0f kts x%.1f)",
            interval_s * 1000,
            step_nm,
            speed,
            multiplier,
        )

    def _cancel(self) -> None:
        # Ticks from earlier intervals compare against this and drop out.
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self, generation: int, step_nm: float) -> None:
        with self.engine.lock:
            if generation != self._generation:
                return
            if self._in_tick:
                logger.warning("Skipping re-entrant flight timer tick")
                return
            self._in_tick = True
            try:
                self.engine.move_forward(step_nm)
                self.tick_count += 1
            finally:
                self._in_tick = False
