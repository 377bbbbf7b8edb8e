"""One in-memory composition and everything it owns.

Single event loop, no locks. Figures and placements are only written from
that loop; the one ordering rule is that, per role, only the most recently
requested fetch may commit its result. Every request takes a sequence token
and a result whose token is no longer current is dropped.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from figure_composer.config import Settings
from figure_composer.engine.canvas import CanvasSettings, validate_color
from figure_composer.engine.compositor import Scene, compose_scene
from figure_composer.engine.exporter import ExportArtifact, export_png, export_svg
from figure_composer.engine.figure import Figure
from figure_composer.engine.placement import FigureRole, LayoutMode, Placement, PlacementModel
from figure_composer.engine.pointer import (
    DisplayCanvas,
    DragSession,
    PointerEvent,
    PointerMapper,
    PointerSource,
)
from figure_composer.engine.sources import Availability, ImageSource, clamp_identifier
from figure_composer.engine.viewport import Viewport, fit_viewport
from figure_composer.exceptions import RetrievalError
from figure_composer.svg.parser import parse_figure

logger = logging.getLogger(__name__)


class CompositionSession:
    """Owns figures, placements, canvas settings, drag state and fetches."""

    def __init__(
        self,
        source: ImageSource | None = None,
        canvas: CanvasSettings | None = None,
        availability: Availability | None = None,
        pointer_source: PointerSource | None = None,
        *,
        id_limits: dict[FigureRole, int] | None = None,
        default_sizes: dict[FigureRole, float] | None = None,
        settle_delay: float = 0.4,
        min_scale: float = 0.1,
        scale_step: float = 0.1,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.source = source
        self.canvas = canvas or CanvasSettings()
        self.availability = availability or Availability(ready=True)
        self.id_limits = id_limits or {FigureRole.BASE: 9999, FigureRole.ACCENT: 25439}
        self.default_sizes = default_sizes or {FigureRole.BASE: 480.0, FigureRole.ACCENT: 64.0}
        self.settle_delay = settle_delay

        self.model = PlacementModel(min_scale=min_scale, scale_step=scale_step)
        self.pointer = PointerMapper(self.model, pointer_source)
        self.figures: dict[FigureRole, Figure | None] = {role: None for role in FigureRole}
        self.identifiers: dict[FigureRole, int] = {role: 0 for role in FigureRole}
        self.error_message: str | None = None

        self._request_seq: dict[FigureRole, int] = {role: 0 for role in FigureRole}
        self._settle_tasks: dict[FigureRole, asyncio.Task] = {}
        self._closed = False
        self._unsubscribe_availability = self.availability.subscribe(self._on_availability)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        source: ImageSource | None = None,
        availability: Availability | None = None,
        pointer_source: PointerSource | None = None,
    ) -> CompositionSession:
        return cls(
            source=source,
            canvas=CanvasSettings.from_settings(settings),
            availability=availability,
            pointer_source=pointer_source,
            id_limits={
                FigureRole.BASE: settings.base_id_max,
                FigureRole.ACCENT: settings.accent_id_max,
            },
            default_sizes={
                FigureRole.BASE: settings.base_default_size,
                FigureRole.ACCENT: settings.accent_default_size,
            },
            settle_delay=settings.settle_delay_ms / 1000,
            min_scale=settings.min_scale,
            scale_step=settings.scale_step,
        )

    # ── Figures ──────────────────────────────────────────────────────

    def clamp(self, role: FigureRole, value: int | float) -> int:
        return clamp_identifier(value, self.id_limits[role])

    def set_identifier(self, role: FigureRole, value: int | float) -> int:
        """Record an identifier change and (re)start its settle timer.

        The fetch is only issued after ``settle_delay`` seconds without a
        further change for the same role. Must be called on the event loop.
        """
        identifier = self.clamp(role, value)
        self.identifiers[role] = identifier
        self._cancel_settle(role)
        self._settle_tasks[role] = asyncio.get_running_loop().create_task(
            self._settle(role, identifier, self.settle_delay)
        )
        logger.debug("Settle scheduled for %s #%d", role.value, identifier)
        return identifier

    async def fetch_now(self, role: FigureRole, identifier: int | float) -> Figure | None:
        """Fetch and commit a figure immediately.

        Returns the committed Figure, or None when a newer request for the
        same role superseded this one while it was in flight.

        Raises:
            RetrievalError: If the source is unavailable, rejects the
                identifier, or returns an unusable payload. Prior figure
                state is left untouched.
        """
        identifier = self.clamp(role, identifier)
        self.identifiers[role] = identifier
        token = self._next_token(role)

        try:
            if self.source is None or not self.availability.ready:
                raise RetrievalError(f"Image source unavailable for {role.value} #{identifier}")
            payload = await self.source.fetch(role, identifier)
            figure = parse_figure(payload, role, identifier, self.default_sizes[role])
        except RetrievalError as e:
            if self._is_current(role, token):
                self.error_message = str(e)
            logger.warning("Fetch %s #%d failed: %s", role.value, identifier, e)
            raise

        if not self._is_current(role, token):
            logger.warning(
                "Discarding stale %s #%d result (superseded)", role.value, identifier
            )
            return None
        self._commit(figure)
        return figure

    def supply_figure(self, role: FigureRole, identifier: int | float, svg: str) -> Figure:
        """Commit a caller-supplied payload; supersedes any in-flight fetch for ``role``."""
        identifier = self.clamp(role, identifier)
        self.identifiers[role] = identifier
        self._next_token(role)
        self._cancel_settle(role)
        try:
            figure = parse_figure(svg, role, identifier, self.default_sizes[role])
        except RetrievalError as e:
            self.error_message = str(e)
            raise
        self._commit(figure)
        return figure

    # ── Placement ────────────────────────────────────────────────────

    def scale_up(self) -> Placement:
        return self.model.scale_up()

    def scale_down(self) -> Placement:
        return self.model.scale_down()

    def reset(self) -> Placement:
        return self.model.reset()

    def switch_mode(self, mode: LayoutMode) -> None:
        self.pointer.end()
        self.model.switch_mode(mode)

    def update_canvas(self, background: str | None = None, auto_crop: bool | None = None) -> CanvasSettings:
        changes: dict[str, object] = {}
        if background is not None:
            changes["background"] = validate_color(background)
        if auto_crop is not None:
            changes["auto_crop"] = auto_crop
        if changes:
            self.canvas = self.canvas.updated(**changes)
        return self.canvas

    # ── Pointer ──────────────────────────────────────────────────────

    def display_canvas(self, left: float, top: float, width: float, height: float) -> DisplayCanvas:
        """Handle for the on-screen canvas; it always maps through the live viewport."""
        return DisplayCanvas(left=left, top=top, width=width, height=height, viewport=self.viewport)

    def drag_start(self, event: PointerEvent, canvas: DisplayCanvas | None) -> DragSession | None:
        return self.pointer.pointer_down(event, canvas)

    def drag_move(self, event: PointerEvent) -> Placement | None:
        return self.pointer.pointer_move(event)

    def drag_end(self) -> None:
        self.pointer.end()

    # ── Rendering & export ───────────────────────────────────────────

    def viewport(self) -> Viewport:
        return fit_viewport(self.model, self.figures, self.canvas)

    def scene(self) -> Scene:
        return compose_scene(self.model, self.figures, self.canvas, self.viewport())

    def export_svg(self) -> ExportArtifact | None:
        return export_svg(self.scene(), self.canvas)

    def export_png(self) -> ExportArtifact | None:
        return export_png(self.scene(), self.canvas)

    # ── Lifecycle ────────────────────────────────────────────────────

    async def close(self) -> None:
        """Cancel pending settles, invalidate in-flight fetches and end any drag."""
        self._closed = True
        self.pointer.end()
        self._unsubscribe_availability()
        for role in FigureRole:
            self._next_token(role)
        tasks = list(self._settle_tasks.values())
        self._settle_tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Session %s closed", self.id)

    @property
    def closed(self) -> bool:
        return self._closed

    # ── Internals ────────────────────────────────────────────────────

    async def _settle(self, role: FigureRole, identifier: int, delay: float) -> None:
        await asyncio.sleep(delay)
        await self.availability.wait_ready()
        try:
            await self.fetch_now(role, identifier)
        except RetrievalError:
            # Already recorded on the session for display; the user retries by
            # changing the identifier or restoring availability.
            pass
        finally:
            if self._settle_tasks.get(role) is asyncio.current_task():
                del self._settle_tasks[role]

    def _cancel_settle(self, role: FigureRole) -> None:
        task = self._settle_tasks.pop(role, None)
        if task is not None and not task.done():
            task.cancel()

    def _on_availability(self, ready: bool) -> None:
        if not ready or self._closed:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Availability restored outside the event loop; no refetch scheduled")
            return
        for role in FigureRole:
            figure = self.figures[role]
            identifier = self.identifiers[role]
            if figure is not None and figure.identifier == identifier:
                continue
            if role in self._settle_tasks:
                continue
            self._settle_tasks[role] = loop.create_task(self._settle(role, identifier, 0))

    def _next_token(self, role: FigureRole) -> int:
        self._request_seq[role] += 1
        return self._request_seq[role]

    def _is_current(self, role: FigureRole, token: int) -> bool:
        return not self._closed and self._request_seq[role] == token

    def _commit(self, figure: Figure) -> None:
        self.figures[figure.role] = figure
        self.error_message = None
        logger.info(
            "Committed %s #%d (%s×%s)",
            figure.role.value,
            figure.identifier,
            figure.width,
            figure.height,
        )
