"""
Outbound side of the embedded player.

The service never talks to the iframe directly.  Commands are queued here and
the page drains them and applies them to the iframe (set ``src``, call
``postMessage``, re-assign ``src`` to stop playback).
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Protocol

from watchgate.services.youtube_service import embed_url

logger = logging.getLogger(__name__)


class EmbedSurface(Protocol):
    """What the gate needs from an embedded player."""

    def load(self, video_id: str) -> None:
        """Point the player at *video_id* with state notifications enabled."""
        ...

    def post_message(self, payload: dict[str, Any]) -> None:
        """Send a message to the player.  Fire-and-forget."""
        ...

    def reload(self) -> None:
        """Discard and recreate the loaded reference.  The only stop primitive."""
        ...


@dataclass
class EmbedCommand:
    action: str  # "load" | "post_message" | "reload"
    src: str | None = None
    payload: dict[str, Any] | None = None


@dataclass
class OutboundEmbedChannel:
    """Queue of commands waiting to be applied by the page."""

    base_url: str = "https://www.youtube.com/embed"
    max_pending: int = 64
    src: str | None = None
    _pending: deque[EmbedCommand] = field(default_factory=deque)

    def load(self, video_id: str) -> None:
        self.src = embed_url(video_id, self.base_url)
        self._push(EmbedCommand(action="load", src=self.src))

    def post_message(self, payload: dict[str, Any]) -> None:
        self._push(EmbedCommand(action="post_message", payload=dict(payload)))

    def reload(self) -> None:
        if self.src is None:
            return
        self._push(EmbedCommand(action="reload", src=self.src))

    def drain(self) -> list[EmbedCommand]:
        commands = list(self._pending)
        self._pending.clear()
        return commands

    def _push(self, command: EmbedCommand) -> None:
        if len(self._pending) >= self.max_pending:
            dropped = self._pending.popleft()
            logger.debug("Embed queue full, dropping %s", dropped.action)
        self._pending.append(command)
