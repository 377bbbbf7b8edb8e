"""Health check."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from figure_composer.dependencies import SessionStore, get_session_store
from figure_composer.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(store: SessionStore = Depends(get_session_store)) -> HealthResponse:
    return HealthResponse(status="ok", version="0.1.0", sessions=len(store))
