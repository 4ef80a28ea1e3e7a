"""Registry of open playback sessions keyed by opaque id."""

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

import structlog

from streamhub.application.use_cases.playback_session import PlaybackSessionController
from streamhub.domain.entities.errors import PlaybackError, SelectionNotFound
from streamhub.domain.entities.media import SourceRequest

log = structlog.get_logger(__name__)

ControllerFactory = Callable[[], PlaybackSessionController]


class PlaybackSessionManager:
    """Creates, looks up and closes ``PlaybackSessionController`` instances.

    Sessions never share mutable state; only the collaborators handed
    out by *factory* (registry, HTTP clients) are shared. Each controller
    is expected to carry its own key source. A controller that closes
    itself (close key) is dropped from the registry.
    """

    def __init__(self, factory: ControllerFactory) -> None:
        self._factory = factory
        self._sessions: dict[str, PlaybackSessionController] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def ids(self) -> list[str]:
        return list(self._sessions)

    async def open(self, request: SourceRequest) -> tuple[str, PlaybackSessionController]:
        """Create a session and start loading *request*.

        Raises:
            InvalidRequestParameters: if *request* is incomplete; no
                session is kept in that case.
        """
        session_id = uuid4().hex
        controller = self._factory()
        controller.set_close_callback(lambda: self._forget(session_id))
        self._sessions[session_id] = controller
        try:
            await controller.start(request)
        except PlaybackError:
            self._sessions.pop(session_id, None)
            controller.close()
            raise
        log.info("session_opened", session_id=session_id)
        return session_id, controller

    def _forget(self, session_id: str) -> None:
        # Sessions closed from inside (close key) drop out here.
        if self._sessions.pop(session_id, None) is not None:
            log.info("session_removed", session_id=session_id)

    def get(self, session_id: str) -> PlaybackSessionController:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SelectionNotFound(f"Unknown session id: {session_id!r}") from None

    def close(self, session_id: str) -> None:
        controller = self.get(session_id)
        controller.close()
        self._forget(session_id)

    def close_all(self) -> int:
        controllers = list(self._sessions.values())
        self._sessions.clear()
        for controller in controllers:
            controller.close()
        count = len(controllers)
        if count:
            log.info("sessions_closed", count=count)
        return count
