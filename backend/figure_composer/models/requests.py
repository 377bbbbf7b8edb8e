"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from figure_composer.engine.placement import LayoutMode


class CreateSessionRequest(BaseModel):
    base_id: int | None = Field(default=None, description="Base figure to fetch on creation")
    accent_id: int | None = Field(default=None, description="Accent figure to fetch on creation")
    mode: LayoutMode = Field(default=LayoutMode.ACCENT_FLOATS, description="Initial layout mode")


class FetchFigureRequest(BaseModel):
    identifier: int = Field(..., description="Figure identifier; clamped to the role's range")


class SupplyFigureRequest(BaseModel):
    identifier: int = Field(..., description="Identifier the payload is recorded under")
    svg: str = Field(..., description="Raw SVG payload")


class CanvasRect(BaseModel):
    left: float = 0.0
    top: float = 0.0
    width: float = Field(..., description="On-screen width of the canvas element")
    height: float = Field(..., description="On-screen height of the canvas element")


class DragStartRequest(BaseModel):
    client_x: float
    client_y: float
    canvas: CanvasRect | None = Field(
        default=None,
        description="Canvas element rect; omitted when the canvas is not mounted",
    )


class DragMoveRequest(BaseModel):
    client_x: float
    client_y: float


class ScaleRequest(BaseModel):
    direction: Literal["up", "down"]


class ModeRequest(BaseModel):
    mode: LayoutMode


class CanvasUpdateRequest(BaseModel):
    background: str | None = Field(default=None, description="CSS colour, e.g. #fff")
    auto_crop: bool | None = None
