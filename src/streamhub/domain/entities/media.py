"""Domain entities for media source resolution.

Pure value objects with no framework dependencies and no I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from streamhub.domain.entities.errors import InvalidRequestParameters

SourceKind = Literal["embed", "direct"]

DEFAULT_QUALITY = "Auto"


class MediaKind(str, Enum):
    """Kind of content a request points at."""

    MOVIE = "movie"
    SERIES = "series"
    ANIME = "anime"


@dataclass(frozen=True)
class SourceRequest:
    """Abstract watch request.

    ``movie_id`` is used for movies, ``series_id`` for series (TMDB id)
    and anime (AniList id). Season/episode are 1-based.
    """

    media_kind: MediaKind
    movie_id: str | None = None
    series_id: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    is_dubbed: bool = False

    @property
    def content_id(self) -> str | None:
        if self.media_kind == MediaKind.MOVIE:
            return self.movie_id
        return self.series_id

    @property
    def identity(self) -> tuple[str | None, str, int | None, int | None, bool]:
        """Parameter tuple whose change starts a new loading phase."""
        return (
            self.content_id,
            self.media_kind.value,
            self.season_number,
            self.episode_number,
            self.is_dubbed,
        )

    def missing_fields(self) -> list[str]:
        """Names of identifiers required by ``media_kind`` but absent."""
        missing: list[str] = []
        if self.media_kind == MediaKind.MOVIE:
            if not self.movie_id:
                missing.append("movie_id")
            return missing

        if not self.series_id:
            missing.append("series_id")
        if self.media_kind == MediaKind.SERIES and not self.season_number:
            missing.append("season_number")
        if not self.episode_number:
            missing.append("episode_number")
        return missing

    def validate(self) -> SourceRequest:
        """Raise ``InvalidRequestParameters`` if identifiers are missing."""
        missing = self.missing_fields()
        if missing:
            raise InvalidRequestParameters(self.media_kind.value, missing)
        for name in ("season_number", "episode_number"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise InvalidRequestParameters(
                    self.media_kind.value, [name], reason=f"{name} must be >= 1"
                )
        return self


@dataclass(frozen=True)
class SourceSubtitle:
    """Subtitle reference attached to a source by the aggregator."""

    language: str
    url: str
    label: str


@dataclass(frozen=True)
class VideoSource:
    """A single playable candidate.

    ``id`` is unique within one resolution result only.
    """

    id: str
    name: str
    url: str
    provider: str
    quality: str = DEFAULT_QUALITY
    kind: SourceKind = "embed"
    subtitles: tuple[SourceSubtitle, ...] = ()


@dataclass(frozen=True)
class Provider:
    """Immutable descriptor of an embed provider.

    ``url_builder`` raises ``InvalidRequestParameters`` when the request
    lacks the identifiers this provider needs.
    """

    id: str
    name: str
    priority: int  # lower = preferred
    url_builder: Callable[[SourceRequest], str]
    media_kinds: frozenset[MediaKind]
    supports_subtitles: bool = False
    supports_quality_selection: bool = False

    def supports(self, media_kind: MediaKind) -> bool:
        return media_kind in self.media_kinds

    def generate_url(self, request: SourceRequest) -> str:
        if not self.supports(request.media_kind):
            raise InvalidRequestParameters(
                request.media_kind.value,
                [],
                reason=f"{self.name} does not support {request.media_kind.value}",
            )
        return self.url_builder(request)


@dataclass(frozen=True)
class SubtitleTrack:
    """Selectable subtitle track.

    An empty ``url`` marks a known language without a resolved file.
    """

    id: str
    language: str
    country_code: str
    url: str
    provider: str

    @property
    def has_source(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class SubtitleCue:
    """One timed caption entry (seconds from media start)."""

    start_seconds: float
    end_seconds: float
    text: str
