"""
Player event adapter.

Normalises the notifications an embedded YouTube player posts to its host
page into a small closed set of playback signals.

  onReady                  → ready   (once per subscription)
  onStateChange  1         → playing
  onStateChange  2         → paused
  onStateChange  0         → ended
  onStateChange -1, 3, 5   → ignored (unstarted, buffering, cued)

Notifications from any origin other than the trusted one, and payloads that
do not have one of the shapes above, are dropped without a signal.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable

from watchgate.services.embed import EmbedSurface

logger = logging.getLogger(__name__)

LISTENING_HANDSHAKE = {"event": "listening"}


class PlaybackSignal(str, Enum):
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    IGNORED = "ignored"


_STATE_CODES = {
    1: PlaybackSignal.PLAYING,
    2: PlaybackSignal.PAUSED,
    0: PlaybackSignal.ENDED,
}


def _state_code(value: Any) -> int | None:
    # bool is an int subclass; True must not read as "playing"
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def normalize_notification(data: Any) -> PlaybackSignal | None:
    """Map a raw player payload to a signal, or ``None`` if it is malformed.

    The iframe posts JSON strings; relays may already have decoded them.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (ValueError, RecursionError):
            return None
    if not isinstance(data, dict):
        return None

    event = data.get("event")
    if event == "onReady":
        return PlaybackSignal.READY
    if event == "onStateChange":
        raw = data.get("info")
        if raw is None:
            raw = data.get("data")
        code = _state_code(raw)
        if code is None:
            return None
        return _STATE_CODES.get(code, PlaybackSignal.IGNORED)
    return None


class PlayerEventAdapter:
    """Owns the inbound player channel for one session at a time."""

    def __init__(self, embed: EmbedSurface, trusted_origin: str) -> None:
        self._embed = embed
        self._trusted_origin = trusted_origin.rstrip("/")
        self._listener: Callable[[PlaybackSignal], None] | None = None
        self._ready_seen = False

    @property
    def subscribed(self) -> bool:
        return self._listener is not None

    def subscribe(self, listener: Callable[[PlaybackSignal], None]) -> None:
        """Bind *listener* and ask the embed to start emitting state changes.

        The handshake is not acknowledged.  If it gets lost no signals arrive
        and the gate simply stays locked.
        """
        self._listener = listener
        self._ready_seen = False
        self._embed.post_message(LISTENING_HANDSHAKE)

    def unsubscribe(self) -> None:
        self._listener = None
        self._ready_seen = False

    def handle(self, origin: str | None, data: Any) -> PlaybackSignal | None:
        """Validate one notification and forward the resulting signal.

        Returns the signal that was delivered to the listener, ``IGNORED``
        for a valid message that causes no transition (buffering, cued,
        unstarted, a repeated ready) and ``None`` when the message was
        rejected.
        """
        if self._listener is None:
            return None
        if (origin or "").rstrip("/") != self._trusted_origin:
            logger.debug("Dropping player message from untrusted origin %r", origin)
            return None

        signal = normalize_notification(data)
        if signal is None:
            logger.debug("Dropping malformed player message: %.200r", data)
            return None
        if signal is PlaybackSignal.IGNORED:
            return signal
        if signal is PlaybackSignal.READY:
            if self._ready_seen:
                return PlaybackSignal.IGNORED
            self._ready_seen = True

        self._listener(signal)
        return signal
