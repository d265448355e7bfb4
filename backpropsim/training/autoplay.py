"""Timed repetition of phase advances.

The controller only needs something that can run a callback after a delay and
hand back a cancellable handle. :class:`AsyncioScheduler` uses the running
event loop, so every tick executes on the loop thread and completes before the
next command is processed. :class:`ManualScheduler` is a virtual clock for
headless runs and tests.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


class Cancellable(Protocol):
    def cancel(self) -> None:
        """Prevent the scheduled callback from running."""


class Scheduler(Protocol):
    """Anything able to run ``callback`` once after ``delay`` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        """Schedule ``callback`` and return a handle that can cancel it."""


class AsyncioScheduler:
    """Schedule ticks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


@dataclass(order=True)
class _ManualTimer:
    when: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[_ManualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self.now + max(0.0, float(delay)), next(self._seq), callback)
        heapq.heappush(self._queue, timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._queue if not timer.cancelled)

    def _pop_due(self, until: Optional[float]) -> Optional[_ManualTimer]:
        while self._queue:
            timer = self._queue[0]
            if timer.cancelled:
                heapq.heappop(self._queue)
                continue
            if until is not None and timer.when > until:
                return None
            return heapq.heappop(self._queue)
        return None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that falls due."""

        until = self.now + float(seconds)
        fired = 0
        while (timer := self._pop_due(until)) is not None:
            self.now = timer.when
            timer.callback()
            fired += 1
        self.now = until
        return fired

    def run_until_idle(self, max_callbacks: int | None = None) -> int:
        """Fire timers in order until none remain (or ``max_callbacks`` ran)."""

        fired = 0
        while max_callbacks is None or fired < max_callbacks:
            timer = self._pop_due(None)
            if timer is None:
                break
            self.now = timer.when
            timer.callback()
            fired += 1
        return fired


class AutoplayController:
    """Issue one phase advance per ``interval`` until stopped or a target epoch."""

    def __init__(
        self,
        advance: Callable[[], object],
        current_epoch: Callable[[], int],
        scheduler: Scheduler,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self._advance = advance
        self._current_epoch = current_epoch
        self._scheduler = scheduler
        self.interval = float(interval)
        self._handle: Cancellable | None = None
        self._running = False
        self._in_tick = False
        self._target_epoch: int | None = None
        # Bumped by start/stop; a tick only reschedules for its own run.
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def target_epoch(self) -> int | None:
        return self._target_epoch

    def start(self, epoch_limit: int | None = None) -> None:
        """Begin autoplay; a non-positive or missing limit runs until stopped."""

        self.stop()
        limit = int(epoch_limit) if epoch_limit else 0
        self._target_epoch = self._current_epoch() + limit if limit > 0 else None
        self._running = True
        logger.info(
            "Autoplay started (target epoch: %s)",
            self._target_epoch if self._target_epoch is not None else "none",
        )
        self._schedule()

    def stop(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._running:
            logger.info("Autoplay stopped at epoch %d", self._current_epoch())
        self._running = False
        self._target_epoch = None

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self.interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self._running or self._in_tick:
            return
        generation = self._generation
        self._in_tick = True
        try:
            self._advance()
        except BaseException:
            if generation == self._generation:
                self.stop()
            raise
        finally:
            self._in_tick = False
        if generation != self._generation or not self._running:
            return
        if self._target_epoch is not None and self._current_epoch() >= self._target_epoch:
            self.stop()
            return
        self._schedule()


__all__ = [
    "AsyncioScheduler",
    "AutoplayController",
    "Cancellable",
    "DEFAULT_INTERVAL",
    "ManualScheduler",
    "Scheduler",
]
