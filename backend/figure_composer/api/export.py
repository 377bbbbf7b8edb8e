"""GET /api/sessions/{id}/export/* -- SVG and PNG downloads of the current composition."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Response

from figure_composer.dependencies import SessionStore, get_session_store
from figure_composer.engine.exporter import ExportArtifact, export_png, export_svg
from figure_composer.models.responses import DataUrlResponse

router = APIRouter()


def _attachment(artifact: ExportArtifact) -> Response:
    return Response(
        content=artifact.data,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@router.get("/sessions/{session_id}/export/svg")
async def download_svg(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    session = store.get(session_id)
    return _attachment(export_svg(session.scene(), session.canvas))


async def _render_png(store: SessionStore, session_id: str) -> ExportArtifact:
    session = store.get(session_id)
    # Snapshot on the loop; only rasterization runs in the worker thread.
    scene, canvas = session.scene(), session.canvas
    return await asyncio.to_thread(export_png, scene, canvas)


@router.get("/sessions/{session_id}/export/png")
async def download_png(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    return _attachment(await _render_png(store, session_id))


@router.get("/sessions/{session_id}/export/png/data-url", response_model=DataUrlResponse)
async def png_data_url(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> DataUrlResponse:
    artifact = await _render_png(store, session_id)
    return DataUrlResponse(filename=artifact.filename, data_url=artifact.data_url)
