"""Figure composition engine.

Exporter and CompositionSession depend on the svg package, which in turn
imports from here; import them from their own modules.
"""

from figure_composer.engine.placement import FigureRole, LayoutMode, Placement, PlacementModel
from figure_composer.engine.figure import Figure
from figure_composer.engine.canvas import CanvasSettings
from figure_composer.engine.viewport import Viewport, fit_viewport
from figure_composer.engine.compositor import Scene, compose_scene
from figure_composer.engine.pointer import DisplayCanvas, PointerEvent, PointerMapper

__all__ = [
    "FigureRole",
    "LayoutMode",
    "Placement",
    "PlacementModel",
    "Figure",
    "CanvasSettings",
    "Viewport",
    "fit_viewport",
    "Scene",
    "compose_scene",
    "DisplayCanvas",
    "PointerEvent",
    "PointerMapper",
]
