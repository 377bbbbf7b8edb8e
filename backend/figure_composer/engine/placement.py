"""Placement model — per-figure transforms and the active layout mode.

Each figure owns one Placement (translate, then uniform scale). The layout
mode decides which figure is pinned to a fixed anchor and which one floats
under user control.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from figure_composer.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Scale arithmetic is rounded to this many decimals so repeated ±0.1 steps
# land on the same values the user sees.
_SCALE_DECIMALS = 6


class FigureRole(str, enum.Enum):
    BASE = "base"
    ACCENT = "accent"


@dataclass(frozen=True)
class Placement:
    """Translate-then-uniform-scale transform applied to a figure."""

    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ValidationError(f"Placement scale must be positive, got {self.scale}")

    def moved_to(self, x: float, y: float) -> Placement:
        return replace(self, x=x, y=y)

    def with_scale(self, scale: float) -> Placement:
        return replace(self, scale=scale)

    def to_transform(self) -> str:
        """SVG transform attribute value."""
        return f"translate({_fmt(self.x)},{_fmt(self.y)}) scale({_fmt(self.scale)})"


@dataclass(frozen=True)
class ModeLayout:
    """Constants that define one layout mode."""

    floating: FigureRole
    fixed: FigureRole
    fixed_anchor: Placement
    default_floating: Placement


class LayoutMode(str, enum.Enum):
    ACCENT_FLOATS = "accent-floats"
    BASE_FLOATS = "base-floats"

    @property
    def layout(self) -> ModeLayout:
        return _MODE_LAYOUTS[self]

    @property
    def floating(self) -> FigureRole:
        return self.layout.floating

    @property
    def fixed(self) -> FigureRole:
        return self.layout.fixed

    @property
    def paint_order(self) -> tuple[FigureRole, FigureRole]:
        """Back-to-front figure order; the floating figure is always on top."""
        return (self.fixed, self.floating)


# Accent default sits centred over a 480-wide base, slightly below the top edge.
ACCENT_DEFAULT = Placement(x=480 / 2 - 24, y=20.0, scale=0.6)
BASE_ANCHOR = Placement(x=0.0, y=0.0, scale=1.0)
ACCENT_ANCHOR = Placement(x=50.0, y=120.0, scale=2.0)
BASE_DEFAULT = Placement(x=0.0, y=0.0, scale=0.5)

_MODE_LAYOUTS: dict[LayoutMode, ModeLayout] = {
    LayoutMode.ACCENT_FLOATS: ModeLayout(
        floating=FigureRole.ACCENT,
        fixed=FigureRole.BASE,
        fixed_anchor=BASE_ANCHOR,
        default_floating=ACCENT_DEFAULT,
    ),
    LayoutMode.BASE_FLOATS: ModeLayout(
        floating=FigureRole.BASE,
        fixed=FigureRole.ACCENT,
        fixed_anchor=ACCENT_ANCHOR,
        default_floating=BASE_DEFAULT,
    ),
}


class PlacementModel:
    """Holds both figures' placements and the layout mode.

    Mutated only by explicit user actions: drag, scale step, reset and
    mode switch.
    """

    def __init__(
        self,
        mode: LayoutMode = LayoutMode.ACCENT_FLOATS,
        min_scale: float = 0.1,
        scale_step: float = 0.1,
    ) -> None:
        self.min_scale = min_scale
        self.scale_step = scale_step
        self._mode = mode
        self._placements: dict[FigureRole, Placement] = {}
        self._apply_mode_defaults()

    @property
    def mode(self) -> LayoutMode:
        return self._mode

    @property
    def floating_role(self) -> FigureRole:
        return self._mode.floating

    def placement(self, role: FigureRole) -> Placement:
        return self._placements[role]

    def snapshot(self) -> dict[FigureRole, Placement]:
        return dict(self._placements)

    def move_floating(self, x: float, y: float) -> Placement:
        """Translate the floating figure; its scale is left untouched."""
        role = self.floating_role
        self._placements[role] = self._placements[role].moved_to(x, y)
        return self._placements[role]

    def scale_up(self) -> Placement:
        return self._set_floating_scale(self.placement(self.floating_role).scale + self.scale_step)

    def scale_down(self) -> Placement:
        current = self.placement(self.floating_role).scale
        return self._set_floating_scale(max(self.min_scale, current - self.scale_step))

    def reset(self) -> Placement:
        """Return the floating figure to its mode default."""
        role = self.floating_role
        self._placements[role] = self._mode.layout.default_floating
        logger.debug("Reset %s placement to %s", role.value, self._placements[role])
        return self._placements[role]

    def switch_mode(self, mode: LayoutMode) -> None:
        """Enter ``mode``: the fixed figure snaps to its anchor, the floating one resets.

        The previously floating figure's last position is never carried over.
        """
        self._mode = mode
        self._apply_mode_defaults()
        logger.info("Layout mode switched to %s", mode.value)

    def toggle_mode(self) -> LayoutMode:
        other = (
            LayoutMode.BASE_FLOATS
            if self._mode is LayoutMode.ACCENT_FLOATS
            else LayoutMode.ACCENT_FLOATS
        )
        self.switch_mode(other)
        return other

    def _set_floating_scale(self, scale: float) -> Placement:
        role = self.floating_role
        scale = max(self.min_scale, round(scale, _SCALE_DECIMALS))
        self._placements[role] = self._placements[role].with_scale(scale)
        return self._placements[role]

    def _apply_mode_defaults(self) -> None:
        layout = self._mode.layout
        self._placements[layout.fixed] = layout.fixed_anchor
        self._placements[layout.floating] = layout.default_floating


def _fmt(value: float) -> str:
    """Compact number formatting for SVG attributes (no trailing zeros)."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
