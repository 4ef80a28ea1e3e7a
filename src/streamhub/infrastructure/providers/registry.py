"""Static, ordered catalog of embed providers.

The catalog is built once at startup and shared read-only between
sessions. Each provider turns a ``SourceRequest`` into an embed URL or
raises ``InvalidRequestParameters`` when it cannot cover the request.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from types import MappingProxyType
from urllib.parse import urlencode

from streamhub.domain.entities.errors import InvalidRequestParameters
from streamhub.domain.entities.media import MediaKind, Provider, SourceRequest

_VIDPLUS_BASE = "https://player.vidplus.to/embed"
_VIDNEST_BASE = "https://vidnest.fun"
_SUPEREMBED_BASE = "https://multiembed.mov/directstream.php"

# Presentation parameters understood by the VidPlus player.
VIDPLUS_PLAYER_PARAMS: MappingProxyType[str, str] = MappingProxyType(
    {
        "primarycolor": "fbc9ff",
        "secondarycolor": "f8b4ff",
        "iconcolor": "fbc9ff",
        "autoplay": "true",
        "poster": "true",
        "title": "true",
        "watchparty": "false",
    }
)


def _require_identifiers(request: SourceRequest) -> None:
    missing = request.missing_fields()
    if missing:
        raise InvalidRequestParameters(request.media_kind.value, missing)


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def vidplus_url(request: SourceRequest) -> str:
    _require_identifiers(request)
    params = dict(VIDPLUS_PLAYER_PARAMS)

    if request.media_kind == MediaKind.MOVIE:
        return f"{_VIDPLUS_BASE}/movie/{request.movie_id}?{urlencode(params)}"
    if request.media_kind == MediaKind.SERIES:
        return (
            f"{_VIDPLUS_BASE}/tv/{request.series_id}/"
            f"{request.season_number}/{request.episode_number}?{urlencode(params)}"
        )
    params["dub"] = _bool_param(request.is_dubbed)
    return (
        f"{_VIDPLUS_BASE}/anime/{request.series_id}/"
        f"{request.episode_number}?{urlencode(params)}"
    )


def vidnest_url(request: SourceRequest) -> str:
    _require_identifiers(request)

    if request.media_kind == MediaKind.MOVIE:
        return f"{_VIDNEST_BASE}/movie/{request.movie_id}"
    if request.media_kind == MediaKind.SERIES:
        return (
            f"{_VIDNEST_BASE}/tv/{request.series_id}/"
            f"{request.season_number}/{request.episode_number}"
        )
    audio = "dub" if request.is_dubbed else "sub"
    return f"{_VIDNEST_BASE}/anime/{request.series_id}/{request.episode_number}/{audio}"


def superembed_url(request: SourceRequest) -> str:
    _require_identifiers(request)

    if request.media_kind == MediaKind.MOVIE:
        params = {"video_id": request.movie_id, "tmdb": "1"}
    elif request.media_kind == MediaKind.SERIES:
        params = {
            "video_id": request.series_id,
            "tmdb": "1",
            "s": str(request.season_number),
            "e": str(request.episode_number),
        }
    else:
        raise InvalidRequestParameters(
            request.media_kind.value,
            [],
            reason=f"SuperEmbed does not support {request.media_kind.value}",
        )
    return f"{_SUPEREMBED_BASE}?{urlencode(params)}"


_ALL_KINDS = frozenset(MediaKind)

DEFAULT_PROVIDERS: tuple[Provider, ...] = (
    Provider(
        id="vidplus",
        name="VidPlus",
        priority=1,
        url_builder=vidplus_url,
        media_kinds=_ALL_KINDS,
        supports_subtitles=True,
        supports_quality_selection=True,
    ),
    Provider(
        id="vidnest",
        name="Vidnest",
        priority=2,
        url_builder=vidnest_url,
        media_kinds=_ALL_KINDS,
    ),
    Provider(
        id="superembed",
        name="SuperEmbed",
        priority=3,
        url_builder=superembed_url,
        media_kinds=frozenset({MediaKind.MOVIE, MediaKind.SERIES}),
    ),
)


class ProviderRegistry:
    """Immutable, priority-ordered view over a set of providers."""

    def __init__(self, providers: Iterable[Provider] = DEFAULT_PROVIDERS) -> None:
        ordered = sorted(providers, key=lambda p: p.priority)
        by_id: dict[str, Provider] = {}
        for provider in ordered:
            if provider.id in by_id:
                raise ValueError(f"Duplicate provider id: {provider.id!r}")
            by_id[provider.id] = provider
        self._providers: tuple[Provider, ...] = tuple(ordered)
        self._by_id = MappingProxyType(by_id)

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._by_id

    @property
    def providers(self) -> tuple[Provider, ...]:
        return self._providers

    def get(self, provider_id: str) -> Provider | None:
        return self._by_id.get(provider_id)

    def priority_of(self, provider_id: str) -> float:
        """Priority rank; providers outside the catalog sort last."""
        provider = self._by_id.get(provider_id)
        return provider.priority if provider is not None else math.inf

    def eligible_for(self, media_kind: MediaKind) -> list[Provider]:
        """Providers declaring support for *media_kind*, in priority order."""
        return [p for p in self._providers if p.supports(media_kind)]
