"""Countdown clock that drives an attempt towards automatic submission."""

from __future__ import annotations

from enum import Enum, auto
import logging
from threading import Event, RLock, Thread
import time
from typing import Callable

from quicktestly.constants.quiz_constants import (
    LOW_TIME_WARNING_SECONDS,
    TICKING_WINDOW_SECONDS,
    TIMER_TICK_INTERVAL_SECONDS,
)
from quicktestly.core.errors import ValidationError

logger = logging.getLogger(__name__)


class TimerState(Enum):
    """Lifecycle of an attempt timer. EXPIRED and STOPPED are terminal."""

    IDLE = auto()
    RUNNING = auto()
    EXPIRED = auto()
    STOPPED = auto()


class AttemptTimer:
    """Once-per-second countdown owned by exactly one attempt.

    ``tick`` and ``stop`` are serialised by the same lock, so once ``stop``
    returns no further decrement or signal happens. Low-time and tick signals
    are emitted while the lock is held and must not block on other locks; the
    expiry callback runs after the lock is released.

    With ``tick_interval_seconds=None`` no background thread is started and the
    owner drives the countdown by calling ``tick`` directly.
    """

    def __init__(
        self,
        total_seconds: int,
        on_expire: Callable[[], None],
        *,
        on_low_time: Callable[[int], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        tick_interval_seconds: float | None = TIMER_TICK_INTERVAL_SECONDS,
        name: str = "AttemptTimer",
    ) -> None:
        if total_seconds <= 0:
            raise ValidationError("Timer duration must be a positive number of seconds.")
        self._total_seconds = total_seconds
        self._remaining_seconds = total_seconds
        self._on_expire = on_expire
        self._on_low_time = on_low_time
        self._on_tick = on_tick
        self._interval = tick_interval_seconds
        self._name = name

        self._lock = RLock()
        self._stop_event = Event()
        self._state = TimerState.IDLE
        self._low_time_emitted = False
        self._thread: Thread | None = None

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    @property
    def remaining_seconds(self) -> int:
        with self._lock:
            return self._remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    def is_running(self) -> bool:
        return self.state is TimerState.RUNNING

    def start(self) -> None:
        """Move from IDLE to RUNNING and begin the countdown."""
        with self._lock:
            if self._state is not TimerState.IDLE:
                raise RuntimeError(f"Timer cannot be started from state {self._state.name}.")
            self._state = TimerState.RUNNING
            self._remaining_seconds = self._total_seconds

        if self._interval is not None:
            self._thread = Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def stop(self) -> bool:
        """Cancel the countdown. Returns False if the timer was not running."""
        with self._lock:
            if self._state is not TimerState.RUNNING:
                return False
            self._state = TimerState.STOPPED
            self._stop_event.set()
        logger.debug("%s stopped with %s seconds left", self._name, self._remaining_seconds)
        return True

    def tick(self) -> bool:
        """Apply one decrement. Returns True while the timer keeps running."""
        with self._lock:
            if self._state is not TimerState.RUNNING:
                return False

            previous = self._remaining_seconds
            self._remaining_seconds = max(0, previous - 1)
            remaining = self._remaining_seconds

            if previous == LOW_TIME_WARNING_SECONDS and not self._low_time_emitted:
                self._low_time_emitted = True
                if self._on_low_time is not None:
                    self._on_low_time(remaining)

            if 1 <= remaining <= TICKING_WINDOW_SECONDS and self._on_tick is not None:
                self._on_tick(remaining)

            expired = remaining == 0
            if expired:
                self._state = TimerState.EXPIRED
                self._stop_event.set()

        if expired:
            logger.info("%s expired", self._name)
            self._on_expire()
        return not expired

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background thread, if any, to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        interval = self._interval or TIMER_TICK_INTERVAL_SECONDS
        next_deadline = time.monotonic() + interval
        while not self._stop_event.wait(max(0.0, next_deadline - time.monotonic())):
            if not self.tick():
                break
            next_deadline += interval
