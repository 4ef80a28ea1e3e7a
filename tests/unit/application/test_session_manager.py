"""Tests for PlaybackSessionManager."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from streamhub.application.session_manager import PlaybackSessionManager
from streamhub.application.use_cases.playback_session import PlaybackSessionController
from streamhub.domain.entities.errors import InvalidRequestParameters, SelectionNotFound
from streamhub.domain.entities.media import MediaKind, SourceRequest, VideoSource
from streamhub.domain.entities.session import SessionState
from streamhub.infrastructure.config.schema import PlayerConfig
from streamhub.infrastructure.keyboard import KeyEventBus


@pytest.fixture()
def manager(player_config: PlayerConfig) -> PlaybackSessionManager:
    resolver = AsyncMock()
    resolver.resolve.return_value = [
        VideoSource(id="a", name="A", url="http://a", provider="vidplus")
    ]
    subtitles = AsyncMock()
    subtitles.list_tracks.return_value = []
    fallback = MagicMock()
    fallback.generate.return_value = []

    def factory() -> PlaybackSessionController:
        return PlaybackSessionController(
            resolver=resolver,
            subtitles=subtitles,
            fallback=fallback,
            config=player_config,
            keyboard=KeyEventBus(),
        )

    return PlaybackSessionManager(factory)


class TestPlaybackSessionManager:
    @pytest.mark.asyncio()
    async def test_open_starts_loading(
        self, manager: PlaybackSessionManager, movie_request: SourceRequest
    ) -> None:
        session_id, controller = await manager.open(movie_request)
        assert session_id in manager
        assert len(manager) == 1
        assert manager.get(session_id) is controller
        assert controller.session.state == SessionState.READY

    @pytest.mark.asyncio()
    async def test_sessions_are_independent(
        self,
        manager: PlaybackSessionManager,
        movie_request: SourceRequest,
        series_request: SourceRequest,
    ) -> None:
        first_id, first = await manager.open(movie_request)
        second_id, second = await manager.open(series_request)
        assert first_id != second_id
        assert first.session is not second.session
        assert sorted(manager.ids()) == sorted([first_id, second_id])

    @pytest.mark.asyncio()
    async def test_invalid_request_keeps_nothing(
        self, manager: PlaybackSessionManager
    ) -> None:
        with pytest.raises(InvalidRequestParameters):
            await manager.open(SourceRequest(media_kind=MediaKind.SERIES, series_id="1"))
        assert len(manager) == 0

    def test_get_unknown(self, manager: PlaybackSessionManager) -> None:
        with pytest.raises(SelectionNotFound):
            manager.get("missing")

    @pytest.mark.asyncio()
    async def test_close_removes_and_closes(
        self,
        manager: PlaybackSessionManager,
        movie_request: SourceRequest,
    ) -> None:
        session_id, controller = await manager.open(movie_request)
        manager.close(session_id)
        assert session_id not in manager
        assert controller.session.is_closed
        assert controller.keyboard is not None
        assert controller.keyboard.listener_count == 0
        with pytest.raises(SelectionNotFound):
            manager.close(session_id)

    @pytest.mark.asyncio()
    async def test_close_all(
        self,
        manager: PlaybackSessionManager,
        movie_request: SourceRequest,
        anime_request: SourceRequest,
    ) -> None:
        _, first = await manager.open(movie_request)
        _, second = await manager.open(anime_request)
        assert manager.close_all() == 2
        assert len(manager) == 0
        assert first.session.is_closed and second.session.is_closed
        assert manager.close_all() == 0

    @pytest.mark.asyncio()
    async def test_close_key_reaches_only_its_own_session(
        self,
        manager: PlaybackSessionManager,
        movie_request: SourceRequest,
        series_request: SourceRequest,
    ) -> None:
        first_id, first = await manager.open(movie_request)
        second_id, second = await manager.open(series_request)
        assert first.keyboard is not second.keyboard
        assert first.keyboard is not None

        assert first.keyboard.dispatch("Escape") == 1

        assert first.session.is_closed
        assert second.session.state == SessionState.READY
        assert first_id not in manager
        assert second_id in manager
        assert len(manager) == 1

    @pytest.mark.asyncio()
    async def test_close_all_after_key_close(
        self,
        manager: PlaybackSessionManager,
        movie_request: SourceRequest,
        anime_request: SourceRequest,
    ) -> None:
        _, first = await manager.open(movie_request)
        await manager.open(anime_request)
        assert first.keyboard is not None
        first.keyboard.dispatch("Escape")
        assert manager.close_all() == 1
        assert len(manager) == 0
