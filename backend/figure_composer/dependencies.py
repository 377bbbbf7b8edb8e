"""FastAPI dependency injection."""

from __future__ import annotations

import logging

from figure_composer.config import Settings, settings
from figure_composer.engine.session import CompositionSession
from figure_composer.engine.sources import Availability, DirectoryImageSource, ImageSource
from figure_composer.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory compositions keyed by session id. Nothing is persisted."""

    def __init__(self, config: Settings, source: ImageSource | None = None) -> None:
        self.config = config
        self.source = source
        self.availability = Availability(ready=True)
        self._sessions: dict[str, CompositionSession] = {}

    def create(self) -> CompositionSession:
        session = CompositionSession.from_settings(
            self.config, source=self.source, availability=self.availability
        )
        self._sessions[session.id] = session
        logger.info("Session %s created (%d active)", session.id, len(self._sessions))
        return session

    def get(self, session_id: str) -> CompositionSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Unknown session {session_id}") from None

    async def remove(self, session_id: str) -> None:
        session = self.get(session_id)
        del self._sessions[session_id]
        await session.close()

    def __len__(self) -> int:
        return len(self._sessions)


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    global _store
    if _store is None:
        source = DirectoryImageSource(settings.image_source_dir) if settings.image_source_dir else None
        _store = SessionStore(settings, source)
    return _store
