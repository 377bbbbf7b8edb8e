"""Compose the background and both figures, in paint order, into one renderable scene."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from figure_composer.engine.canvas import CanvasSettings
from figure_composer.engine.figure import Figure
from figure_composer.engine.placement import FigureRole, Placement, PlacementModel
from figure_composer.engine.viewport import Viewport, fit_viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneLayer:
    figure: Figure
    placement: Placement

    @property
    def role(self) -> FigureRole:
        return self.figure.role


@dataclass(frozen=True)
class Scene:
    background: str
    viewport: Viewport
    # Back to front
    layers: tuple[SceneLayer, ...]
    missing: tuple[FigureRole, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.missing

    def layer(self, role: FigureRole) -> SceneLayer | None:
        for layer in self.layers:
            if layer.role is role:
                return layer
        return None

    def identifier(self, role: FigureRole) -> int | None:
        layer = self.layer(role)
        return layer.figure.identifier if layer else None


def compose_scene(
    model: PlacementModel,
    figures: Mapping[FigureRole, Figure | None],
    canvas: CanvasSettings,
    viewport: Viewport | None = None,
) -> Scene:
    """Assemble the scene for the active layout mode.

    Absent figures are listed in ``Scene.missing`` instead of being drawn;
    exporters refuse such scenes.
    """
    if viewport is None:
        viewport = fit_viewport(model, figures, canvas)

    layers: list[SceneLayer] = []
    missing: list[FigureRole] = []
    for role in model.mode.paint_order:
        figure = figures.get(role)
        if figure is None:
            missing.append(role)
            continue
        layers.append(SceneLayer(figure=figure, placement=model.placement(role)))

    scene = Scene(
        background=canvas.background,
        viewport=viewport,
        layers=tuple(layers),
        missing=tuple(missing),
    )
    logger.debug(
        "Composed scene: %d layers, missing=%s, viewBox=%s",
        len(layers),
        [r.value for r in missing],
        viewport.to_viewbox(),
    )
    return scene
