"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from figure_composer.engine.placement import FigureRole
from figure_composer.engine.session import CompositionSession


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    sessions: int = 0


class PlacementState(BaseModel):
    x: float
    y: float
    scale: float


class FigureState(BaseModel):
    requested_id: int
    loaded: bool = False
    identifier: int | None = None
    width: float | None = None
    height: float | None = None


class CanvasState(BaseModel):
    background: str
    auto_crop: bool
    export_width: int
    export_height: int


class ViewportState(BaseModel):
    viewbox: str
    min_x: float
    min_y: float
    width: float
    height: float


class SessionState(BaseModel):
    id: str
    mode: str
    floating: str
    placements: dict[str, PlacementState] = Field(default_factory=dict)
    figures: dict[str, FigureState] = Field(default_factory=dict)
    canvas: CanvasState
    viewport: ViewportState
    dragging: bool = False
    exportable: bool = False
    error_message: str | None = None

    @classmethod
    def from_session(cls, session: CompositionSession) -> SessionState:
        model = session.model
        vp = session.viewport()
        figures: dict[str, FigureState] = {}
        for role in FigureRole:
            figure = session.figures[role]
            figures[role.value] = FigureState(
                requested_id=session.identifiers[role],
                loaded=figure is not None,
                identifier=figure.identifier if figure else None,
                width=figure.width if figure else None,
                height=figure.height if figure else None,
            )
        return cls(
            id=session.id,
            mode=model.mode.value,
            floating=model.floating_role.value,
            placements={
                role.value: PlacementState(x=p.x, y=p.y, scale=p.scale)
                for role, p in model.snapshot().items()
            },
            figures=figures,
            canvas=CanvasState(
                background=session.canvas.background,
                auto_crop=session.canvas.auto_crop,
                export_width=session.canvas.export_width,
                export_height=session.canvas.export_height,
            ),
            viewport=ViewportState(
                viewbox=vp.to_viewbox(),
                min_x=vp.min_x,
                min_y=vp.min_y,
                width=vp.width,
                height=vp.height,
            ),
            dragging=session.pointer.dragging,
            exportable=all(f is not None for f in session.figures.values()),
            error_message=session.error_message,
        )


class DataUrlResponse(BaseModel):
    filename: str
    data_url: str
