"""Viewport fitter — the crop rectangle (viewBox) that frames the composition.

With auto-crop on, the crop is tight around both figures except at the
bottom: the bottom edge is pinned to the base figure's lower boundary (the
"ground line") and the accent can only widen the crop sideways and upward.
Minimum-size floors grow the width symmetrically and the height upward only.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from figure_composer.engine.canvas import CanvasSettings
from figure_composer.engine.figure import Figure
from figure_composer.engine.placement import FigureRole, LayoutMode, PlacementModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewport:
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.min_x + self.width

    @property
    def bottom(self) -> float:
        return self.min_y + self.height

    def to_viewbox(self) -> str:
        return " ".join(_fmt(v) for v in (self.min_x, self.min_y, self.width, self.height))

    @classmethod
    def from_viewbox(cls, text: str) -> Viewport:
        parts = [float(p) for p in text.replace(",", " ").split()]
        if len(parts) != 4:
            raise ValueError(f"viewBox needs 4 numbers, got {text!r}")
        return cls(*parts)


def full_canvas_viewport(canvas: CanvasSettings) -> Viewport:
    """Whole display frame, extended upward-room by the fixed margin."""
    return Viewport(0.0, 0.0, canvas.width, canvas.height + canvas.viewport_margin)


def fit_viewport(
    model: PlacementModel,
    figures: Mapping[FigureRole, Figure | None],
    canvas: CanvasSettings,
) -> Viewport:
    """Compute the viewport for the current placements.

    Auto-crop only applies in accent-floats mode with a base figure present;
    every other case gets the full-canvas viewport.
    """
    base = figures.get(FigureRole.BASE)
    if not canvas.auto_crop or model.mode is not LayoutMode.ACCENT_FLOATS or base is None:
        return full_canvas_viewport(canvas)

    left, top, right, bottom = base.bounds(model.placement(FigureRole.BASE))
    # Ground line: nothing below the base figure's lower edge, ever.
    pinned_bottom = bottom

    accent = figures.get(FigureRole.ACCENT)
    if accent is not None:
        a_left, a_top, a_right, _a_bottom = accent.bounds(model.placement(FigureRole.ACCENT))
        left = min(left, a_left)
        top = min(top, a_top)
        right = max(right, a_right)

    width = right - left
    height = pinned_bottom - top

    if width < canvas.min_viewport_width:
        deficit = canvas.min_viewport_width - width
        left -= deficit / 2
        width = canvas.min_viewport_width

    if height < canvas.min_viewport_height:
        deficit = canvas.min_viewport_height - height
        top -= deficit
        height = canvas.min_viewport_height

    # Height is taken between the rounded edges so rounding never shifts the ground line.
    r_top = _round1(top)
    viewport = Viewport(
        _round1(left),
        r_top,
        _round1(width),
        _round1(_round1(pinned_bottom) - r_top),
    )
    logger.debug("Fitted viewport %s", viewport.to_viewbox())
    return viewport


def _round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
