"""An immutable vector-image payload plus its intrinsic size."""

from __future__ import annotations

from dataclasses import dataclass

from figure_composer.engine.placement import FigureRole, Placement


@dataclass(frozen=True)
class Figure:
    role: FigureRole
    identifier: int
    # Sanitized, self-contained <svg> markup
    markup: str
    width: float
    height: float

    def bounds(self, placement: Placement) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) of this figure under ``placement``."""
        return (
            placement.x,
            placement.y,
            placement.x + self.width * placement.scale,
            placement.y + self.height * placement.scale,
        )

