"""Image source and availability collaborators.

The engine treats the image source as opaque: given a role and an in-range
identifier it returns SVG markup or raises RetrievalError.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

from figure_composer.engine.placement import FigureRole
from figure_composer.exceptions import RetrievalError

logger = logging.getLogger(__name__)


class ImageSource(Protocol):
    async def fetch(self, role: FigureRole, identifier: int) -> str: ...


class StaticImageSource:
    """In-memory payloads keyed by (role, identifier)."""

    def __init__(self, payloads: Mapping[tuple[FigureRole, int], str] | None = None) -> None:
        self._payloads: dict[tuple[FigureRole, int], str] = dict(payloads or {})

    async def fetch(self, role: FigureRole, identifier: int) -> str:
        try:
            return self._payloads[(role, identifier)]
        except KeyError:
            raise RetrievalError(f"No {role.value} image for #{identifier}") from None


class DirectoryImageSource:
    """Payloads stored on disk as ``<root>/<role>/<identifier>.svg``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, role: FigureRole, identifier: int) -> Path:
        return self.root / role.value / f"{identifier}.svg"

    async def fetch(self, role: FigureRole, identifier: int) -> str:
        path = self.path_for(role, identifier)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise RetrievalError(f"Failed to fetch {role.value} #{identifier}: {e}") from e


class Availability:
    """Whether the image source can be reached now, with change notification."""

    def __init__(self, ready: bool = True) -> None:
        self._ready = ready
        self._event: asyncio.Event | None = None
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def ready(self) -> bool:
        return self._ready

    def set_ready(self, ready: bool) -> None:
        if ready == self._ready:
            return
        self._ready = ready
        if self._event is not None:
            if ready:
                self._event.set()
            else:
                self._event.clear()
        logger.info("Image source availability: %s", "ready" if ready else "unavailable")
        for listener in list(self._listeners):
            listener(ready)

    async def wait_ready(self) -> None:
        if self._ready:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def subscribe(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


def clamp_identifier(value: int | float, upper: int, lower: int = 0) -> int:
    """Silently clamp to ``[lower, upper]``; out-of-range input is never an error."""
    return max(lower, min(upper, int(value)))
