"""Shared test fixtures for the streamhub test suite."""

from __future__ import annotations

import pytest

from streamhub.domain.entities.media import (
    MediaKind,
    SourceRequest,
    SubtitleTrack,
    VideoSource,
)
from streamhub.infrastructure.config.schema import PlayerConfig
from streamhub.infrastructure.providers import FallbackGenerator, ProviderRegistry

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_request() -> SourceRequest:
    return SourceRequest(media_kind=MediaKind.MOVIE, movie_id="550")


@pytest.fixture()
def series_request() -> SourceRequest:
    return SourceRequest(
        media_kind=MediaKind.SERIES,
        series_id="1399",
        season_number=1,
        episode_number=2,
    )


@pytest.fixture()
def anime_request() -> SourceRequest:
    return SourceRequest(
        media_kind=MediaKind.ANIME,
        series_id="21",
        episode_number=5,
        is_dubbed=False,
    )


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


@pytest.fixture()
def registry() -> ProviderRegistry:
    return ProviderRegistry()


@pytest.fixture()
def fallback(registry: ProviderRegistry) -> FallbackGenerator:
    return FallbackGenerator(registry)


@pytest.fixture()
def player_config() -> PlayerConfig:
    return PlayerConfig(controls_hide_seconds=0.05)


# ---------------------------------------------------------------------------
# Sample candidates / tracks
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_sources() -> list[VideoSource]:
    return [
        VideoSource(
            id="vidplus-registry",
            name="VidPlus",
            url="https://player.vidplus.to/embed/movie/550",
            provider="vidplus",
        ),
        VideoSource(
            id="p-stream-0",
            name="A",
            url="http://a",
            provider="p-stream",
        ),
    ]


@pytest.fixture()
def english_track() -> SubtitleTrack:
    return SubtitleTrack(
        id="101",
        language="en",
        country_code="US",
        url="https://subs.example/101.srt",
        provider="OpenSubtitles",
    )
