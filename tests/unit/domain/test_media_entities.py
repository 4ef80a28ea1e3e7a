"""Tests for media value objects and request validation."""

from __future__ import annotations

import pytest

from streamhub.domain.entities.errors import InvalidRequestParameters, PlaybackError
from streamhub.domain.entities.media import (
    MediaKind,
    Provider,
    SourceRequest,
    SubtitleTrack,
)


def _echo_builder(request: SourceRequest) -> str:
    return f"https://echo.example/{request.content_id}"


class TestSourceRequest:
    def test_movie_content_id(self) -> None:
        req = SourceRequest(media_kind=MediaKind.MOVIE, movie_id="550")
        assert req.content_id == "550"
        assert req.missing_fields() == []

    def test_series_uses_series_id(self, series_request: SourceRequest) -> None:
        assert series_request.content_id == "1399"

    def test_series_missing_season_and_episode(self) -> None:
        req = SourceRequest(media_kind=MediaKind.SERIES, series_id="1399")
        assert req.missing_fields() == ["season_number", "episode_number"]

    def test_anime_requires_episode_only(self) -> None:
        req = SourceRequest(media_kind=MediaKind.ANIME, series_id="21")
        assert req.missing_fields() == ["episode_number"]

    def test_movie_without_id(self) -> None:
        req = SourceRequest(media_kind=MediaKind.MOVIE)
        assert req.missing_fields() == ["movie_id"]

    def test_validate_returns_self(self, movie_request: SourceRequest) -> None:
        assert movie_request.validate() is movie_request

    def test_validate_raises_for_missing(self) -> None:
        req = SourceRequest(media_kind=MediaKind.SERIES, series_id="1")
        with pytest.raises(InvalidRequestParameters) as exc_info:
            req.validate()
        assert exc_info.value.missing == ["season_number", "episode_number"]
        assert "series" in str(exc_info.value)

    def test_validate_rejects_negative_episode(self) -> None:
        req = SourceRequest(
            media_kind=MediaKind.ANIME, series_id="21", episode_number=-1
        )
        with pytest.raises(InvalidRequestParameters, match="must be >= 1"):
            req.validate()

    def test_invalid_parameters_is_value_error(self) -> None:
        exc = InvalidRequestParameters("movie", ["movie_id"])
        assert isinstance(exc, ValueError)
        assert isinstance(exc, PlaybackError)

    def test_identity_changes_with_dub_flag(self, anime_request: SourceRequest) -> None:
        dubbed = SourceRequest(
            media_kind=MediaKind.ANIME,
            series_id="21",
            episode_number=5,
            is_dubbed=True,
        )
        assert anime_request.identity != dubbed.identity

    def test_frozen(self, movie_request: SourceRequest) -> None:
        with pytest.raises(AttributeError):
            movie_request.movie_id = "1"  # type: ignore[misc]


class TestProvider:
    def _provider(self, kinds: frozenset[MediaKind]) -> Provider:
        return Provider(
            id="echo",
            name="Echo",
            priority=1,
            url_builder=_echo_builder,
            media_kinds=kinds,
        )

    def test_generate_url_supported(self, movie_request: SourceRequest) -> None:
        provider = self._provider(frozenset({MediaKind.MOVIE}))
        assert provider.generate_url(movie_request) == "https://echo.example/550"

    def test_generate_url_unsupported_kind(self, anime_request: SourceRequest) -> None:
        provider = self._provider(frozenset({MediaKind.MOVIE}))
        assert not provider.supports(MediaKind.ANIME)
        with pytest.raises(InvalidRequestParameters, match="does not support anime"):
            provider.generate_url(anime_request)


class TestSubtitleTrack:
    def test_empty_url_has_no_source(self) -> None:
        track = SubtitleTrack(
            id="1", language="English", country_code="US", url="", provider="Fallback"
        )
        assert track.has_source is False

    def test_url_has_source(self, english_track: SubtitleTrack) -> None:
        assert english_track.has_source is True
