"""Shared fixtures: a manual clock standing in for the event loop."""
from __future__ import annotations

import heapq
import itertools
from typing import Any, Callable

import pytest

from watchgate.services.catalog import CatalogItem
from watchgate.services.embed import OutboundEmbedChannel
from watchgate.services.gate import GateConfig, GateController
from watchgate.services.player_events import PlayerEventAdapter
from watchgate.services.session_boundary import SessionBoundary
from watchgate.services.session_stats import stats as gate_stats

YT_ORIGIN = "https://www.youtube.com"


class ManualHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: tuple) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic stand-in for ``asyncio`` loop timers."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self.now

    def call_at(self, when: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        handle = ManualHandle(when, callback, args)
        heapq.heappush(self._queue, (when, next(self._seq), handle))
        return handle

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        return self.call_at(self.now + delay, callback, *args)

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        # small epsilon so 1.0 + 1.0 + ... lands on the scheduled instants
        while self._queue and self._queue[0][0] <= target + 1e-9:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, when)
            handle.callback(*handle.args)
        self.now = target


def make_item(item_id: int = 1, video_id: str = "5gVI329nO7c") -> CatalogItem:
    return CatalogItem(
        id=item_id,
        title=f"Film {item_id}",
        video_id=video_id,
        youtube_url=f"https://youtu.be/{video_id}",
        direct_link="https://in.bookmyshow.com",
        thumbnail=f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg",
    )


def playing() -> dict:
    return {"event": "onStateChange", "info": 1}


def paused() -> dict:
    return {"event": "onStateChange", "info": 2}


def ended() -> dict:
    return {"event": "onStateChange", "info": 0}


@pytest.fixture(autouse=True)
def _reset_stats():
    gate_stats.reset()
    yield
    gate_stats.reset()


@pytest.fixture
def clock() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def embed() -> OutboundEmbedChannel:
    return OutboundEmbedChannel()


def build_controller(clock, embed, **config) -> GateController:
    adapter = PlayerEventAdapter(embed, YT_ORIGIN)
    return GateController(clock, adapter, GateConfig(**config))


@pytest.fixture
def controller(clock, embed) -> GateController:
    # no fallback unless a test asks for it
    return build_controller(clock, embed, autostart_enabled=False)


@pytest.fixture
def boundary(controller, embed) -> SessionBoundary:
    return SessionBoundary(controller, embed)
