from typing import Any

from pydantic import BaseModel


# ── Catalog ──────────────────────────────────────────────────────────────────
class CatalogItemOut(BaseModel):
    id: int
    title: str
    video_id: str
    youtube_url: str
    thumbnail: str


class CatalogResponse(BaseModel):
    total: int
    items: list[CatalogItemOut]


class TitleRefreshResponse(BaseModel):
    status: str = "success"
    updated: int


# ── Session ──────────────────────────────────────────────────────────────────
class OpenSessionRequest(BaseModel):
    item_id: int


class SessionView(BaseModel):
    is_open: bool
    overlay_visible: bool
    state: str
    session_id: str | None = None
    item_id: int | None = None
    required_seconds: int
    accumulated_seconds: int
    remaining_seconds: int
    is_playing: bool
    timer_running: bool
    unlocked: bool
    action_link: str | None = None


class PlayerNotification(BaseModel):
    """A message the iframe posted to the page, relayed as-is."""

    origin: str | None = None
    data: Any = None


class PlayerNotificationResult(BaseModel):
    accepted: bool
    signal: str | None = None
    session: SessionView


class EmbedCommandOut(BaseModel):
    action: str
    src: str | None = None
    payload: dict[str, Any] | None = None


class EmbedCommandsResponse(BaseModel):
    commands: list[EmbedCommandOut]


# ── Dashboard ────────────────────────────────────────────────────────────────
class GateSettingsOut(BaseModel):
    required_seconds: int
    tick_seconds: float
    autostart_enabled: bool
    autostart_grace_seconds: float
    trusted_player_origin: str


class DashboardStats(BaseModel):
    sessions_opened: int
    sessions_closed: int
    unlocks: int
    rejected_notifications: int
    uptime_seconds: int


class DashboardResponse(BaseModel):
    version: str
    catalog_items: int
    gate: GateSettingsOut
    stats: DashboardStats
