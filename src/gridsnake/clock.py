"""Virtual-time scheduler and the timed-mode countdown."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class TimerHandle:
    """A scheduled callback, one-shot or periodic."""

    callback: Callable[[], None]
    due_ms: int
    interval_ms: int | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled


@dataclass(slots=True)
class Scheduler:
    """Cooperative single-threaded timer queue on a millisecond clock.

    Time only moves when the host loop calls :meth:`advance`, so a test can
    replay minutes of play without sleeping. Due timers fire in
    chronological order; timers due at the same instant fire in the order
    they were scheduled.
    """

    now_ms: int = 0
    _queue: list[tuple[int, int, TimerHandle]] = field(default_factory=list)
    _sequence: itertools.count = field(default_factory=itertools.count)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""
        assert delay_ms >= 0, "delay must not be negative"
        handle = TimerHandle(callback=callback, due_ms=self.now_ms + delay_ms)
        self._push(handle)
        return handle

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` every ``interval_ms``, first after one full interval."""
        assert interval_ms > 0, "interval must be positive"
        handle = TimerHandle(callback=callback, due_ms=self.now_ms + interval_ms, interval_ms=interval_ms)
        self._push(handle)
        return handle

    def advance(self, dt_ms: float) -> None:
        """Move the clock forward and fire every timer that falls due."""
        target = self.now_ms + max(0, int(dt_ms))
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = due_ms
            if handle.interval_ms is not None:
                handle.due_ms = due_ms + handle.interval_ms
                self._push(handle)
            else:
                handle.cancelled = True
            handle.callback()
        self.now_ms = target

    def pending(self) -> int:
        """Return the number of live timers."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (handle.due_ms, next(self._sequence), handle))


class Countdown:
    """One-second resolution countdown that fires ``on_expire`` exactly once.

    Stopping keeps ``remaining``; starting again resumes from it with a fresh
    full second until the next decrement.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        duration_s: int,
        on_expire: Callable[[], None],
        on_second: Callable[[int], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.duration_s = duration_s
        self.remaining = duration_s
        self.on_expire = on_expire
        self.on_second = on_second
        self.expired = False
        self._handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> None:
        """Begin or resume counting down."""
        if self.running or self.expired:
            return
        self._handle = self.scheduler.call_every(1000, self._on_second)

    def stop(self) -> None:
        """Suspend counting without touching ``remaining``."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def reset(self, duration_s: int | None = None) -> None:
        """Stop and restore the full duration."""
        self.stop()
        if duration_s is not None:
            self.duration_s = duration_s
        self.remaining = self.duration_s
        self.expired = False

    def _on_second(self) -> None:
        if self.expired:
            return
        self.remaining = max(0, self.remaining - 1)
        if self.on_second is not None:
            self.on_second(self.remaining)
        if self.remaining == 0:
            self.expired = True
            self.stop()
            logger.debug("Countdown expired after %d seconds", self.duration_s)
            self.on_expire()
