"""
Detail-view session endpoints.

  POST   /api/session                               open the view for { item_id }
  DELETE /api/session                               close it
  GET    /api/session                               current gate view
  POST   /api/session/{session_id}/player-events    relay an iframe message
  GET    /api/session/embed-commands                commands for the iframe
  GET    /api/session/link                          the gated action link

Handlers are ``async``: gate state is only touched from the event loop that
fires the engagement-timer ticks.
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse

from watchgate.schemas.response import (
    EmbedCommandOut,
    EmbedCommandsResponse,
    OpenSessionRequest,
    PlayerNotification,
    PlayerNotificationResult,
    SessionView,
)
from watchgate.services.session_boundary import GateView, SessionBoundary

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


def _boundary(request: Request) -> SessionBoundary:
    return request.app.state.boundary


def _view_out(view: GateView) -> SessionView:
    data = asdict(view)
    data["state"] = view.state.value
    return SessionView(**data)


@router.post("/api/session", response_model=SessionView, status_code=201)
async def open_session(body: OpenSessionRequest, request: Request) -> SessionView:
    try:
        item = request.app.state.catalog.get(body.item_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown item {body.item_id}.")

    boundary = _boundary(request)
    boundary.open(item)
    return _view_out(boundary.view())


@router.delete("/api/session", response_model=SessionView)
async def close_session(request: Request) -> SessionView:
    boundary = _boundary(request)
    boundary.close()
    return _view_out(boundary.view())


@router.get("/api/session", response_model=SessionView)
async def get_session(request: Request) -> SessionView:
    return _view_out(_boundary(request).view())


@router.post("/api/session/{session_id}/player-events", response_model=PlayerNotificationResult)
async def relay_player_event(
    session_id: str,
    body: PlayerNotification,
    request: Request,
) -> PlayerNotificationResult:
    """Feed one player message into the gate.

    Rejected messages (wrong origin, unknown shape, old session) are not
    errors; they just leave the gate untouched.
    """
    boundary = _boundary(request)
    signal = boundary.controller.handle_notification(session_id, body.origin, body.data)
    return PlayerNotificationResult(
        accepted=signal is not None,
        signal=signal.value if signal is not None else None,
        session=_view_out(boundary.view()),
    )


@router.get("/api/session/embed-commands", response_model=EmbedCommandsResponse)
async def drain_embed_commands(request: Request) -> EmbedCommandsResponse:
    commands = request.app.state.embed.drain()
    return EmbedCommandsResponse(
        commands=[EmbedCommandOut(**asdict(c)) for c in commands],
    )


@router.get("/api/session/link", response_class=RedirectResponse, status_code=307)
async def follow_action_link(request: Request) -> RedirectResponse:
    """Follow the action link, but only once the gate is unlocked."""
    view = _boundary(request).view()
    if not view.is_open or view.action_link is None:
        raise HTTPException(status_code=409, detail="No item is open.")
    if not view.unlocked:
        raise HTTPException(
            status_code=423,
            detail=f"Keep watching: {view.remaining_seconds}s remaining.",
        )
    logger.info("[%s] Action link followed → %s", view.session_id, view.action_link)
    return RedirectResponse(view.action_link, status_code=307)
