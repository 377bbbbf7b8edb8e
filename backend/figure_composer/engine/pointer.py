"""Pointer mapper — screen-space pointer events → local canvas coordinates → placement deltas.

Dragging is relative: the floating figure's placement at pointer-down is
snapshotted and each move applies ``current_local - start_local`` to that
snapshot. The figure therefore never jumps to the pointer when the drag did
not start exactly over its origin.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import numpy as np

from figure_composer.engine.placement import FigureRole, Placement, PlacementModel
from figure_composer.engine.viewport import Viewport

logger = logging.getLogger(__name__)

# Determinant below this is treated as a collapsed (unmappable) transform.
_SINGULAR_EPS = 1e-12

_DOWN_TYPES = {"mousedown", "touchstart", "pointerdown"}
_MOVE_TYPES = {"mousemove", "touchmove", "pointermove"}
_UP_TYPES = {"mouseup", "touchend", "pointerup"}
_CANCEL_TYPES = {"touchcancel", "pointercancel"}


@dataclass(frozen=True)
class ScreenTransform:
    """2-D affine matrix mapping local canvas units to screen pixels.

    Same layout as an SVGMatrix: ``screen = [a c e; b d f; 0 0 1] · local``.
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def matrix(self) -> np.ndarray:
        return np.array(
            [[self.a, self.c, self.e], [self.b, self.d, self.f], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )

    @property
    def is_invertible(self) -> bool:
        return abs(self.a * self.d - self.b * self.c) > _SINGULAR_EPS

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        sx, sy, _ = self.matrix() @ np.array([x, y, 1.0])
        return (float(sx), float(sy))

    def to_local(self, x: float, y: float) -> tuple[float, float]:
        lx, ly, _ = np.linalg.inv(self.matrix()) @ np.array([x, y, 1.0])
        return (float(lx), float(ly))


class CanvasHandle(Protocol):
    """Explicit reference to the displayed canvas. May be absent or unmeasured."""

    def screen_ctm(self) -> ScreenTransform | None: ...


@dataclass
class StaticCanvas:
    """Canvas handle with a fixed, known transform (or none when unmounted)."""

    ctm: ScreenTransform | None = None

    def screen_ctm(self) -> ScreenTransform | None:
        return self.ctm


@dataclass
class DisplayCanvas:
    """Canvas element of on-screen rect ``(left, top, width, height)`` showing a viewport.

    ``viewport`` is either a fixed Viewport or a callable returning the one
    currently displayed (auto-crop changes it while a figure is dragged).
    Mirrors ``preserveAspectRatio="xMidYMid meet"``: uniform scale to fit,
    content centred on the free axis.
    """

    left: float
    top: float
    width: float
    height: float
    viewport: Viewport | Callable[[], Viewport]

    def screen_ctm(self) -> ScreenTransform | None:
        vp = self.viewport() if callable(self.viewport) else self.viewport
        if self.width <= 0 or self.height <= 0 or vp.width <= 0 or vp.height <= 0:
            return None
        s = min(self.width / vp.width, self.height / vp.height)
        pad_x = (self.width - vp.width * s) / 2
        pad_y = (self.height - vp.height * s) / 2
        return ScreenTransform(
            a=s,
            d=s,
            e=self.left + pad_x - vp.min_x * s,
            f=self.top + pad_y - vp.min_y * s,
        )


@dataclass(frozen=True)
class PointerEvent:
    """Device-independent pointer event in screen coordinates."""

    kind: str  # down, move, up, cancel
    x: float | None = None
    y: float | None = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


def normalize_event(raw: Mapping[str, Any]) -> PointerEvent | None:
    """Turn a DOM-style mouse/touch event dict into a PointerEvent.

    Touch events read ``touches[0]``; end/cancel events carry no active
    touches, so ``changedTouches[0]`` is used when present. Returns None for
    event types that are not pointer input.
    """
    etype = str(raw.get("type", "")).lower()
    if etype in _DOWN_TYPES:
        kind = "down"
    elif etype in _MOVE_TYPES:
        kind = "move"
    elif etype in _UP_TYPES:
        kind = "up"
    elif etype in _CANCEL_TYPES:
        kind = "cancel"
    else:
        return None

    point: Mapping[str, Any] | None = raw
    if etype.startswith("touch"):
        touches = raw.get("touches") or raw.get("changedTouches") or []
        point = touches[0] if touches else None

    if point is None or "clientX" not in point or "clientY" not in point:
        return PointerEvent(kind=kind)
    return PointerEvent(kind=kind, x=float(point["clientX"]), y=float(point["clientY"]))


PointerListener = Callable[[PointerEvent], None]


class PointerSource(Protocol):
    """Stream of normalised move/up events, subscribed to per drag session."""

    def subscribe(self, listener: PointerListener) -> Callable[[], None]: ...


class PointerEventBus:
    """In-process PointerSource: feeds raw events to current subscribers."""

    def __init__(self) -> None:
        self._listeners: list[PointerListener] = []

    def subscribe(self, listener: PointerListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, raw: Mapping[str, Any] | PointerEvent) -> None:
        event = raw if isinstance(raw, PointerEvent) else normalize_event(raw)
        if event is None:
            return
        for listener in list(self._listeners):
            listener(event)


@dataclass
class DragSession:
    """State captured at pointer-down."""

    role: FigureRole
    start_local: tuple[float, float]
    start_placements: dict[FigureRole, Placement]
    canvas: CanvasHandle
    _unsubscribe: Callable[[], None] | None = field(default=None, repr=False)

    @property
    def start_placement(self) -> Placement:
        return self.start_placements[self.role]


class PointerMapper:
    """Turns pointer input into placement updates for the floating figure."""

    def __init__(self, model: PlacementModel, source: PointerSource | None = None) -> None:
        self.model = model
        self.source = source
        self._session: DragSession | None = None

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def dragging(self) -> bool:
        return self._session is not None

    def pointer_down(self, event: PointerEvent, canvas: CanvasHandle | None) -> DragSession | None:
        """Start a drag session. No-op (returns None) if the canvas cannot be mapped."""
        start = _map_to_local(event, canvas)
        if start is None:
            logger.debug("Pointer down ignored: canvas unavailable")
            return None

        self.end()
        session = DragSession(
            role=self.model.floating_role,
            start_local=start,
            start_placements=self.model.snapshot(),
            canvas=canvas,
        )
        if self.source is not None:
            session._unsubscribe = self.source.subscribe(self._on_event)
        self._session = session
        logger.debug("Drag started on %s at local %s", session.role.value, start)
        return session

    def pointer_move(self, event: PointerEvent) -> Placement | None:
        """Apply the drag delta. Returns the new placement, or None when nothing moved."""
        session = self._session
        if session is None:
            return None
        current = _map_to_local(event, session.canvas)
        if current is None:
            return None
        # The mode may have flipped mid-drag; the session only drives the role it grabbed.
        if session.role is not self.model.floating_role:
            return None

        dx = current[0] - session.start_local[0]
        dy = current[1] - session.start_local[1]
        start = session.start_placement
        return self.model.move_floating(start.x + dx, start.y + dy)

    def pointer_up(self, event: PointerEvent | None = None) -> None:
        self.end()

    def end(self) -> None:
        """End the active session, if any, and drop its event subscription."""
        session = self._session
        if session is None:
            return
        self._session = None
        if session._unsubscribe is not None:
            session._unsubscribe()
        logger.debug("Drag ended on %s", session.role.value)

    def _on_event(self, event: PointerEvent) -> None:
        if event.kind == "move":
            self.pointer_move(event)
        elif event.kind in ("up", "cancel"):
            self.end()


def _map_to_local(event: PointerEvent, canvas: CanvasHandle | None) -> tuple[float, float] | None:
    if canvas is None or not event.has_position:
        return None
    ctm = canvas.screen_ctm()
    if ctm is None or not ctm.is_invertible:
        return None
    return ctm.to_local(event.x, event.y)
