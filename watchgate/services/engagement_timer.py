"""
Engagement timer: a single recurring tick that can be started and stopped.

Ticks are scheduled on anything that looks like an asyncio event loop
(``time``, ``call_at``, ``call_later``).  The service uses the running loop;
tests use a manual clock.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def time(self) -> float: ...

    def call_at(self, when: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


class EngagementTimer:
    """Fires ``on_tick`` once per period while started.

    ``start()`` and ``stop()`` are idempotent: a second ``start()`` never
    schedules a second series of ticks.  Ticks are anchored to the start
    instant so the cadence does not drift with callback latency.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_tick: Callable[[], None],
        period: float = 1.0,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._period = period
        self._handle: Cancellable | None = None
        self._next_at = 0.0

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def period(self) -> float:
        return self._period

    def start(self) -> None:
        if self._handle is not None:
            return
        self._next_at = self._scheduler.time() + self._period
        self._handle = self._scheduler.call_at(self._next_at, self._fire)
        logger.debug("Engagement timer started (period=%.2fs)", self._period)

    def stop(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug("Engagement timer stopped")

    def _fire(self) -> None:
        if self._handle is None:
            return
        # Re-arm first so a stop() from inside on_tick cancels the next tick.
        self._next_at += self._period
        self._handle = self._scheduler.call_at(self._next_at, self._fire)
        self._on_tick()
