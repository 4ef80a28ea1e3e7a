"""Playback session controller.

State machine for one watch session::

    IDLE -> LOADING -> READY     (switch source or subtitle: READY -> READY)
    LOADING -> ERROR -> RETRYING -> LOADING
    READY -> ERROR               (active source failed to load)
    any -> CLOSED

Async results carry the generation token they were dispatched with and
are dropped when the token no longer matches.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import Any, Protocol

import structlog

from streamhub.application.controls import ControlsAutoHide
from streamhub.domain.entities.errors import (
    InvalidRequestParameters,
    SelectionNotFound,
    SessionClosed,
    SourceLoadFailure,
    SubtitleFetchFailure,
)
from streamhub.domain.entities.media import (
    MediaKind,
    SourceRequest,
    SubtitleCue,
    SubtitleTrack,
    VideoSource,
)
from streamhub.domain.entities.session import (
    Menu,
    PlaybackSession,
    SessionError,
    SessionState,
    SubtitleAppearance,
)
from streamhub.domain.ports.keyboard import KeyboardPort
from streamhub.domain.ports.source_resolver import (
    FallbackGeneratorPort,
    SourceResolverPort,
)
from streamhub.domain.ports.subtitles import SubtitleServicePort

log = structlog.get_logger(__name__)

# Placeholder offered for subbed anime; captions are burned into the stream.
EMBEDDED_TRACK = SubtitleTrack(
    id="embedded",
    language="Embedded",
    country_code="JP",
    url="",
    provider="embedded",
)

# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class _PlayerConfig(Protocol):
    """Configuration values consumed by PlaybackSessionController."""

    controls_hide_seconds: float
    max_retries: int
    close_key: str
    controls_key: str


class PlaybackSessionController:
    """Sole writer of one ``PlaybackSession``."""

    def __init__(
        self,
        *,
        resolver: SourceResolverPort,
        subtitles: SubtitleServicePort,
        fallback: FallbackGeneratorPort,
        config: _PlayerConfig,
        keyboard: KeyboardPort | None = None,
    ) -> None:
        self._resolver = resolver
        self._subtitles = subtitles
        self._fallback = fallback
        self._config = config
        self._keyboard = keyboard
        self._session = PlaybackSession(max_retries=config.max_retries)
        self._controls = ControlsAutoHide(
            hide_after=config.controls_hide_seconds,
            on_change=self._on_controls_change,
        )
        self._generation = 0
        self._subtitle_generation = 0
        self._listening = False
        self._on_closed: Callable[[], None] | None = None

    @property
    def session(self) -> PlaybackSession:
        return self._session

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def keyboard(self) -> KeyboardPort | None:
        """Key source this session listens on while open."""
        return self._keyboard

    def set_close_callback(self, callback: Callable[[], None] | None) -> None:
        """Register *callback*, invoked once when the session closes."""
        self._on_closed = callback

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._session.is_closed:
            raise SessionClosed("Session is closed")

    def _on_controls_change(self, visible: bool) -> None:
        if not self._session.is_closed:
            self._session.controls_visible = visible

    def _on_key(self, key: str) -> None:
        if self._session.is_closed:
            return
        if key == self._config.close_key:
            self.close()
        elif key == self._config.controls_key:
            self.show_controls()

    def _register_keys(self) -> None:
        if self._keyboard is not None and not self._listening:
            self._keyboard.add_listener(self._on_key)
            self._listening = True

    def _unregister_keys(self) -> None:
        if self._keyboard is not None and self._listening:
            self._keyboard.remove_listener(self._on_key)
            self._listening = False

    async def _load_tracks(self, request: SourceRequest) -> list[SubtitleTrack]:
        if request.media_kind == MediaKind.ANIME:
            # Dubbed anime needs no captions; subbed anime has them embedded.
            return [] if request.is_dubbed else [EMBEDDED_TRACK]
        content_id = request.content_id
        if content_id is None:
            return []
        try:
            return await self._subtitles.list_tracks(
                content_id,
                request.media_kind,
                request.season_number,
                request.episode_number,
            )
        except Exception:  # noqa: BLE001
            log.warning(
                "subtitle_tracks_failed",
                content_id=content_id,
                exc_info=True,
            )
            return []

    async def _load(
        self,
        request: SourceRequest,
        *,
        preferred: VideoSource | None = None,
    ) -> None:
        self._generation += 1
        self._subtitle_generation += 1
        token = self._generation

        session = self._session
        session.request = request
        session.state = SessionState.LOADING
        session.candidates = []
        session.active_source = None
        session.subtitle_tracks = []
        session.active_subtitle_id = None
        session.active_cues = []
        session.error = None
        session.open_menu = None

        log.info(
            "session_loading",
            media_kind=request.media_kind.value,
            content_id=request.content_id,
            generation=token,
        )

        sources, tracks = await asyncio.gather(
            self._resolver.resolve(request),
            self._load_tracks(request),
        )

        if token != self._generation:
            log.debug("stale_resolution_dropped", generation=token)
            return

        if not sources:
            sources = list(self._fallback.generate(request))

        session.subtitle_tracks = list(tracks)
        if not sources:
            session.state = SessionState.ERROR
            session.error = SessionError(
                kind="NoSourcesAvailable",
                message="No sources available for this title",
            )
            log.warning(
                "session_no_sources",
                media_kind=request.media_kind.value,
                content_id=request.content_id,
            )
            return

        session.candidates = list(sources)
        active = sources[0]
        if preferred is not None:
            active = next(
                (
                    s
                    for s in sources
                    if s.provider == preferred.provider and s.url == preferred.url
                ),
                active,
            )
        session.active_source = active
        session.state = SessionState.READY
        self.show_controls()
        log.info(
            "session_ready",
            source_count=len(sources),
            active_source=active.id,
            track_count=len(tracks),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def start(self, request: SourceRequest) -> None:
        """Begin loading for *request*.

        A request whose identity matches the current one is a no-op in
        every state; an errored session recovers through ``retry()``.

        Raises:
            InvalidRequestParameters: if the request lacks identifiers.
            SessionClosed: if the session was closed.
        """
        self._ensure_open()
        request.validate()
        self._register_keys()

        current = self._session.request
        if current is not None and current.identity == request.identity:
            # Unchanged parameters never reload; ERROR recovers via retry().
            return
        self._session.retry_count = 0
        await self._load(request)

    async def set_dubbed(self, is_dubbed: bool) -> None:
        """Switch audio preference; a changed value starts a new load."""
        self._ensure_open()
        current = self._session.request
        if current is None:
            raise InvalidRequestParameters(
                "unknown", [], reason="session has no request yet"
            )
        await self.start(replace(current, is_dubbed=is_dubbed))

    def switch_source(self, source_id: str) -> VideoSource:
        self._ensure_open()
        session = self._session
        source = session.find_candidate(source_id)
        if source is None:
            raise SelectionNotFound(f"Unknown source id: {source_id!r}")
        session.active_source = source
        session.open_menu = None
        session.error = None
        session.state = SessionState.READY
        log.info("source_switched", source_id=source_id, provider=source.provider)
        return source

    async def switch_subtitle(self, track_id: str | None) -> list[SubtitleCue]:
        """Select a track (``None`` = off) and load its cues.

        Cue fetch failures degrade to no cues; the session is unaffected.
        """
        self._ensure_open()
        session = self._session
        session.open_menu = None

        if track_id is None:
            self._subtitle_generation += 1
            session.active_subtitle_id = None
            session.active_cues = []
            return []

        track = session.find_track(track_id)
        if track is None:
            raise SelectionNotFound(f"Unknown subtitle track: {track_id!r}")

        self._subtitle_generation += 1
        token = self._subtitle_generation
        session.active_subtitle_id = track_id
        session.active_cues = []

        if not track.has_source:
            return []

        try:
            cues = await self._subtitles.fetch_cues(track)
        except SubtitleFetchFailure:
            log.warning("subtitle_cues_failed", track_id=track_id, exc_info=True)
            cues = []

        if token != self._subtitle_generation or session.is_closed:
            log.debug("stale_cues_dropped", track_id=track_id)
            return []

        session.active_cues = list(cues)
        return session.active_cues

    def report_source_failure(self, source_id: str, reason: str = "") -> bool:
        """Rendering surface reports the active source failed to load.

        Returns False when the report does not concern the active source.
        """
        self._ensure_open()
        session = self._session
        active = session.active_source
        if session.state != SessionState.READY or active is None or active.id != source_id:
            log.debug("source_failure_ignored", source_id=source_id)
            return False
        failure = SourceLoadFailure(source_id, reason)
        session.state = SessionState.ERROR
        session.error = SessionError(
            kind="SourceLoadFailure",
            message=str(failure),
            source_id=source_id,
        )
        log.warning("source_load_failed", source_id=source_id, reason=reason)
        return True

    async def retry(self) -> bool:
        """Reload after an error. Returns False once retries are exhausted."""
        self._ensure_open()
        session = self._session
        if session.state != SessionState.ERROR or session.request is None:
            return False
        if session.retries_exhausted:
            log.info("session_retry_exhausted", retry_count=session.retry_count)
            return False

        session.retry_count += 1
        session.state = SessionState.RETRYING
        log.info("session_retry", attempt=session.retry_count)
        await self._load(session.request, preferred=session.active_source)
        return True

    def close(self) -> None:
        """Terminal; safe to call more than once."""
        if self._session.is_closed:
            return
        self._generation += 1
        self._subtitle_generation += 1
        self._controls.cancel()
        self._unregister_keys()
        self._session.state = SessionState.CLOSED
        self._session.open_menu = None
        log.info("session_closed")
        callback, self._on_closed = self._on_closed, None
        if callback is not None:
            callback()

    def show_controls(self) -> None:
        if self._session.is_closed:
            return
        self._controls.show()
        self._session.controls_visible = True

    def toggle_menu(self, menu: Menu) -> Menu | None:
        self._ensure_open()
        session = self._session
        session.open_menu = None if session.open_menu == menu else menu
        return session.open_menu

    def update_settings(
        self,
        *,
        playback_speed: float | None = None,
        quality: str | None = None,
        theme: str | None = None,
        subtitles: dict[str, Any] | None = None,
    ) -> None:
        """Apply a partial settings update.

        Raises:
            ValueError: if a value is outside its allowed set.
        """
        self._ensure_open()
        current = self._session.settings
        changes: dict[str, Any] = {}
        if playback_speed is not None:
            changes["playback_speed"] = playback_speed
        if quality is not None:
            changes["quality"] = quality
        if theme is not None:
            changes["theme"] = theme
        if subtitles:
            try:
                appearance: SubtitleAppearance = replace(current.subtitles, **subtitles)
            except TypeError as exc:
                raise ValueError(f"Unknown subtitle setting: {exc}") from exc
            changes["subtitles"] = appearance
        self._session.settings = replace(current, **changes)

    def active_cues_at(self, position_seconds: float) -> list[SubtitleCue]:
        return self._session.cues_at(position_seconds)
