"""
Session boundary: the open/close edges driven by the detail view.

Opening binds the embed and the gate to one catalog item; closing tears both
down.  The embed is stopped by reloading its reference, since an opaque
iframe offers no other reliable stop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from watchgate.services.catalog import CatalogItem
from watchgate.services.embed import EmbedSurface
from watchgate.services.gate import GateController, GateState

logger = logging.getLogger(__name__)


@dataclass
class GateView:
    """What the page needs to render the detail view."""

    is_open: bool
    overlay_visible: bool
    state: GateState
    session_id: str | None
    item_id: int | None
    required_seconds: int
    accumulated_seconds: int
    remaining_seconds: int
    is_playing: bool
    timer_running: bool
    unlocked: bool
    action_link: str | None


class SessionBoundary:
    def __init__(self, controller: GateController, embed: EmbedSurface) -> None:
        self.controller = controller
        self._embed = embed
        self.overlay_visible = False

    @property
    def current_item(self) -> CatalogItem | None:
        return self.controller.session.item

    def open(self, item: CatalogItem) -> str:
        """Show the detail view for *item* with the gate locked."""
        if self.controller.session.is_open:
            self.close()
        self._embed.load(item.video_id)
        logger.debug("Embed loaded for video %s", item.video_id)
        session_id = self.controller.begin(item)
        self.overlay_visible = True
        return session_id

    def close(self) -> None:
        if not self.controller.session.is_open and not self.overlay_visible:
            return
        self.controller.end()
        self._embed.reload()
        logger.debug("Embed reloaded to stop playback")
        self.overlay_visible = False

    def view(self) -> GateView:
        controller = self.controller
        session = controller.session
        item = session.item
        return GateView(
            is_open=session.is_open,
            overlay_visible=self.overlay_visible,
            state=controller.state,
            session_id=session.session_id,
            item_id=item.id if item else None,
            required_seconds=controller.config.required_seconds,
            accumulated_seconds=session.accumulated_seconds,
            remaining_seconds=controller.remaining_seconds,
            is_playing=session.is_playing,
            timer_running=session.timer_running,
            unlocked=controller.is_unlocked,
            action_link=item.direct_link if item else None,
        )
