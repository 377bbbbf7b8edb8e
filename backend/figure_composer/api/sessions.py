"""Composition session endpoints: figures, placement, drag and canvas settings."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from figure_composer.dependencies import SessionStore, get_session_store
from figure_composer.engine.placement import FigureRole
from figure_composer.engine.pointer import PointerEvent
from figure_composer.exceptions import RetrievalError
from figure_composer.models.requests import (
    CanvasUpdateRequest,
    CreateSessionRequest,
    DragMoveRequest,
    DragStartRequest,
    FetchFigureRequest,
    ModeRequest,
    ScaleRequest,
    SupplyFigureRequest,
)
from figure_composer.models.responses import SessionState

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/sessions", response_model=SessionState)
async def create_session(
    request: CreateSessionRequest | None = None,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    request = request or CreateSessionRequest()
    session = store.create()
    session.switch_mode(request.mode)

    initial = {FigureRole.BASE: request.base_id, FigureRole.ACCENT: request.accent_id}
    for role, identifier in initial.items():
        if identifier is None:
            continue
        try:
            await session.fetch_now(role, identifier)
        except RetrievalError:
            # Surfaced through error_message in the returned state.
            logger.info("Session %s created without %s figure", session.id, role.value)

    return SessionState.from_session(session)


@router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    return SessionState.from_session(store.get(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    await store.remove(session_id)
    return Response(status_code=204)


@router.post("/sessions/{session_id}/figures/{role}/fetch", response_model=SessionState)
async def fetch_figure(
    session_id: str,
    role: FigureRole,
    request: FetchFigureRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    await session.fetch_now(role, request.identifier)
    return SessionState.from_session(session)


@router.put("/sessions/{session_id}/figures/{role}", response_model=SessionState)
async def supply_figure(
    session_id: str,
    role: FigureRole,
    request: SupplyFigureRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    session.supply_figure(role, request.identifier, request.svg)
    return SessionState.from_session(session)


@router.post("/sessions/{session_id}/drag/start", response_model=SessionState)
async def drag_start(
    session_id: str,
    request: DragStartRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    rect = request.canvas
    canvas = (
        session.display_canvas(rect.left, rect.top, rect.width, rect.height)
        if rect is not None
        else None
    )
    session.drag_start(PointerEvent("down", request.client_x, request.client_y), canvas)
    return SessionState.from_session(session)


@router.post("/sessions/{session_id}/drag/move", response_model=SessionState)
async def drag_move(
    session_id: str,
    request: DragMoveRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    session.drag_move(PointerEvent("move", request.client_x, request.client_y))
    return SessionState.from_session(session)


@router.post("/sessions/{session_id}/drag/end", response_model=SessionState)
async def drag_end(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    session.drag_end()
    return SessionState.from_session(session)


@router.post("/sessions/{session_id}/scale", response_model=SessionState)
async def scale(
    session_id: str,
    request: ScaleRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    if request.direction == "up":
        session.scale_up()
    else:
        session.scale_down()
    return SessionState.from_session(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionState)
async def reset(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    session.reset()
    return SessionState.from_session(session)


@router.post("/sessions/{session_id}/mode", response_model=SessionState)
async def switch_mode(
    session_id: str,
    request: ModeRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    session.switch_mode(request.mode)
    return SessionState.from_session(session)


@router.patch("/sessions/{session_id}/canvas", response_model=SessionState)
async def update_canvas(
    session_id: str,
    request: CanvasUpdateRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    session = store.get(session_id)
    session.update_canvas(background=request.background, auto_crop=request.auto_crop)
    return SessionState.from_session(session)
