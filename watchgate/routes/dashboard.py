"""
Dashboard endpoint: returns the effective gate configuration and
in-memory activity counters.

  GET /api/dashboard
"""
from fastapi import APIRouter, Request

from watchgate.schemas.response import (
    DashboardResponse,
    DashboardStats,
    GateSettingsOut,
)
from watchgate.services.session_stats import stats as gate_stats

APP_VERSION = "0.1.0"

router = APIRouter(tags=["dashboard"])


@router.get("/api/dashboard", response_model=DashboardResponse)
async def get_dashboard(request: Request) -> DashboardResponse:
    """Return gate settings and session statistics."""
    state = request.app.state
    config = state.boundary.controller.config

    return DashboardResponse(
        version=APP_VERSION,
        catalog_items=len(state.catalog),
        gate=GateSettingsOut(
            required_seconds=config.required_seconds,
            tick_seconds=config.tick_seconds,
            autostart_enabled=config.autostart_enabled,
            autostart_grace_seconds=config.autostart_grace_seconds,
            trusted_player_origin=state.settings.trusted_player_origin,
        ),
        stats=DashboardStats(
            sessions_opened=gate_stats.sessions_opened,
            sessions_closed=gate_stats.sessions_closed,
            unlocks=gate_stats.unlocks,
            rejected_notifications=gate_stats.rejected_notifications,
            uptime_seconds=gate_stats.uptime_seconds,
        ),
    )
