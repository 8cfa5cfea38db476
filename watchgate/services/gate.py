"""
Watch-time gate.

The controller owns the one viewing session and is its only writer.  Three
kinds of events reach it, all on the same event loop and each run to
completion before the next:

  * player notifications, relayed through the PlayerEventAdapter
  * engagement-timer ticks
  * open/close from the session boundary

State machine (per session):

  closed ──begin──▶ idle ──playing / fallback──▶ running ──threshold──▶ unlocked
                      ▲                              │
                      └──────paused / ended──────────┘

``unlocked`` is terminal until the session ends.  Any state ──end──▶ closed.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from watchgate.config import Settings
from watchgate.services.catalog import CatalogItem
from watchgate.services.engagement_timer import Cancellable, EngagementTimer, Scheduler
from watchgate.services.player_events import PlaybackSignal, PlayerEventAdapter
from watchgate.services.session_stats import stats as gate_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateConfig:
    required_seconds: int = 20
    tick_seconds: float = 1.0
    autostart_enabled: bool = True
    autostart_grace_seconds: float = 3.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GateConfig":
        return cls(
            required_seconds=settings.required_watch_seconds,
            tick_seconds=settings.tick_seconds,
            autostart_enabled=settings.autostart_enabled,
            autostart_grace_seconds=settings.autostart_grace_seconds,
        )


class GateState(str, Enum):
    CLOSED = "closed"
    IDLE = "idle"
    RUNNING = "running"
    UNLOCKED = "unlocked"


@dataclass
class ViewingSession:
    session_id: str | None = None
    item: CatalogItem | None = None
    is_open: bool = False
    accumulated_seconds: int = 0
    is_playing: bool = False
    timer_running: bool = False
    player_ready: bool = False
    media_ref: str | None = None
    unlocked_at: float | None = None

    def reset(self) -> None:
        self.session_id = None
        self.item = None
        self.is_open = False
        self.accumulated_seconds = 0
        self.is_playing = False
        self.timer_running = False
        self.player_ready = False
        self.media_ref = None
        self.unlocked_at = None


class GateController:
    def __init__(
        self,
        scheduler: Scheduler,
        adapter: PlayerEventAdapter,
        config: GateConfig | None = None,
    ) -> None:
        self.config = config or GateConfig()
        self.session = ViewingSession()
        self._scheduler = scheduler
        self._adapter = adapter
        self._timer = EngagementTimer(scheduler, self._on_tick, self.config.tick_seconds)
        self._fallback: Cancellable | None = None

    # ── derived state ───────────────────────────────────────────────────
    @property
    def is_unlocked(self) -> bool:
        return self.session.is_open and self.session.accumulated_seconds >= self.config.required_seconds

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.config.required_seconds - self.session.accumulated_seconds)

    @property
    def state(self) -> GateState:
        if not self.session.is_open:
            return GateState.CLOSED
        if self.is_unlocked:
            return GateState.UNLOCKED
        if self._timer.running:
            return GateState.RUNNING
        return GateState.IDLE

    # ── lifecycle ───────────────────────────────────────────────────────
    def begin(self, item: CatalogItem) -> str:
        """Start a fresh session for *item* and return its id.

        Whatever session was active is discarded first; nothing carries over.
        """
        if self.session.is_open:
            self.end()

        self.session.reset()
        self.session.session_id = uuid.uuid4().hex
        self.session.item = item
        self.session.media_ref = item.video_id
        self.session.is_open = True

        self._adapter.subscribe(self._apply_signal)
        if self.config.autostart_enabled:
            self._fallback = self._scheduler.call_later(
                self.config.autostart_grace_seconds,
                self._autostart,
                self.session.session_id,
            )

        gate_stats.sessions_opened += 1
        logger.info(
            "[%s] Session opened for item %s (video=%s, required=%ds)",
            self.session.session_id, item.id, item.video_id, self.config.required_seconds,
        )
        return self.session.session_id

    def end(self) -> None:
        """Close the session: stop ticking, drop the fallback, reset everything."""
        if not self.session.is_open:
            return
        session_id = self.session.session_id
        self._timer.stop()
        if self._fallback is not None:
            self._fallback.cancel()
            self._fallback = None
        self._adapter.unsubscribe()
        accumulated = self.session.accumulated_seconds
        self.session.reset()

        gate_stats.sessions_closed += 1
        logger.info("[%s] Session closed after %ds", session_id, accumulated)

    # ── inbound events ──────────────────────────────────────────────────
    def handle_notification(
        self, session_id: str | None, origin: str | None, data: Any
    ) -> PlaybackSignal | None:
        """Relay a raw player notification addressed to *session_id*.

        Notifications for a closed or superseded session are discarded.
        Only rejected messages are counted; ``IGNORED`` ones are valid.
        """
        if not self.session.is_open or session_id != self.session.session_id:
            gate_stats.rejected_notifications += 1
            logger.debug("Discarding notification for stale session %s", session_id)
            return None
        signal = self._adapter.handle(origin, data)
        if signal is None:
            gate_stats.rejected_notifications += 1
        return signal

    def _apply_signal(self, signal: PlaybackSignal) -> None:
        session = self.session
        if not session.is_open:
            return
        logger.debug("[%s] Signal %s (state=%s)", session.session_id, signal.value, self.state.value)

        if signal is PlaybackSignal.READY:
            session.player_ready = True
        elif signal is PlaybackSignal.PLAYING:
            if session.is_playing and self._timer.running:
                return
            session.is_playing = True
            if not self.is_unlocked:
                self._timer.start()
        elif signal in (PlaybackSignal.PAUSED, PlaybackSignal.ENDED):
            session.is_playing = False
            self._timer.stop()
        self._sync_timer_flag()

    def _autostart(self, session_id: str) -> None:
        if not self.session.is_open or session_id != self.session.session_id:
            return
        self._fallback = None
        if self.state is not GateState.IDLE:
            return
        logger.info("[%s] No playback reported after %.1fs, starting timer anyway",
                    session_id, self.config.autostart_grace_seconds)
        self._apply_signal(PlaybackSignal.PLAYING)

    def _on_tick(self) -> None:
        session = self.session
        if not session.is_open or not session.is_playing or self.is_unlocked:
            return
        session.accumulated_seconds += 1
        if session.accumulated_seconds >= self.config.required_seconds:
            self._timer.stop()
            session.unlocked_at = self._scheduler.time()
            gate_stats.unlocks += 1
            logger.info("[%s] Gate unlocked after %ds of playback",
                        session.session_id, session.accumulated_seconds)
        self._sync_timer_flag()

    # ── helpers ─────────────────────────────────────────────────────────
    def _sync_timer_flag(self) -> None:
        self.session.timer_running = self._timer.running
