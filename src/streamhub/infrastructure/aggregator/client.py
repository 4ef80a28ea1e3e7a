"""Primary aggregator client: async httpx implementation.

The aggregator answers with loosely shaped JSON. Everything is
normalized into ``VideoSource``/``SourceSubtitle`` here; raw payloads
never leave this module.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from streamhub.domain.entities.media import (
    DEFAULT_QUALITY,
    MediaKind,
    SourceRequest,
    SourceSubtitle,
    VideoSource,
)
from streamhub.domain.ports.aggregator import AggregatorResult

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://pstream.vercel.app"
AGGREGATOR_ID = "p-stream"
AGGREGATOR_NAME = "P-Stream"

_DUB_PLACEHOLDER = SourceSubtitle(
    language="English",
    url="",
    label="English Dub (No Subtitles)",
)


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_subtitles(raw: Any) -> list[SourceSubtitle]:
    if not isinstance(raw, list):
        return []
    subtitles: list[SourceSubtitle] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        language = _str_or_none(entry.get("language")) or _str_or_none(
            entry.get("lang")
        )
        subtitles.append(
            SourceSubtitle(
                language=language or "Unknown",
                url=_str_or_none(entry.get("url")) or "",
                label=_str_or_none(entry.get("label")) or language or "Unknown",
            )
        )
    return subtitles


def normalize_response(
    data: Any,
    *,
    provider_id: str = AGGREGATOR_ID,
    provider_name: str = AGGREGATOR_NAME,
    is_dubbed: bool = False,
) -> AggregatorResult:
    """Convert an aggregator JSON body into an ``AggregatorResult``.

    Recognised shapes:
        ``{"sources": [{"name"|"server", "quality", "url", "subtitles"}]}``
        ``{"url": ..., "quality": ...}`` (single direct stream)
        ``{"subtitles": [{"language"|"lang", "url", "label"}]}``

    Unrecognised bodies yield an empty, unsuccessful result.
    """
    if not isinstance(data, dict):
        return AggregatorResult(message="Unrecognised response body")

    top_subtitles = _normalize_subtitles(data.get("subtitles"))
    if is_dubbed and not top_subtitles:
        top_subtitles = [_DUB_PLACEHOLDER]

    sources: list[VideoSource] = []
    raw_sources = data.get("sources")
    if isinstance(raw_sources, list):
        for index, entry in enumerate(raw_sources):
            if not isinstance(entry, dict):
                continue
            url = _str_or_none(entry.get("url"))
            if url is None:
                log.debug("aggregator_source_without_url", index=index)
                continue
            own_subtitles = _normalize_subtitles(entry.get("subtitles"))
            sources.append(
                VideoSource(
                    id=f"{provider_id}-{index}",
                    name=_str_or_none(entry.get("name"))
                    or _str_or_none(entry.get("server"))
                    or f"Source {index + 1}",
                    quality=_str_or_none(entry.get("quality")) or DEFAULT_QUALITY,
                    url=url,
                    kind="embed",
                    provider=_str_or_none(entry.get("provider")) or provider_id,
                    subtitles=tuple(own_subtitles or top_subtitles),
                )
            )

    direct_url = _str_or_none(data.get("url"))
    if direct_url is not None:
        sources.append(
            VideoSource(
                id=f"{provider_id}-direct",
                name=f"{provider_name} Direct",
                quality=_str_or_none(data.get("quality")) or DEFAULT_QUALITY,
                url=direct_url,
                kind="direct",
                provider=provider_id,
                subtitles=tuple(top_subtitles),
            )
        )

    return AggregatorResult(
        sources=sources,
        subtitles=top_subtitles,
        success=bool(sources),
        message=None if sources else "No sources available",
    )


class HttpxAggregatorClient:
    """Async aggregator client using httpx.

    Implements ``AggregatorClientPort`` from domain.ports.aggregator.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        provider_id: str = AGGREGATOR_ID,
        provider_name: str = AGGREGATOR_NAME,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._provider_id = provider_id
        self._provider_name = provider_name

    @property
    def provider_id(self) -> str:
        return self._provider_id

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _route(request: SourceRequest) -> tuple[str, dict[str, str]] | None:
        """Build (path, query) for *request*, or None if identifiers are missing."""
        if request.missing_fields():
            return None
        if request.media_kind == MediaKind.MOVIE:
            return f"/movie/{request.movie_id}", {}
        if request.media_kind == MediaKind.SERIES:
            return (
                f"/tv/{request.series_id}/"
                f"{request.season_number}/{request.episode_number}",
                {},
            )
        audio = "dub" if request.is_dubbed else "sub"
        return (
            f"/anime/{request.series_id}/{request.episode_number}",
            {"type": audio},
        )

    async def _get(self, path: str, params: dict[str, str]) -> Any | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params=params or None)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            log.warning(
                "aggregator_http_error",
                path=path,
                status=exc.response.status_code,
            )
            return None
        except (httpx.HTTPError, httpx.InvalidURL):
            log.warning("aggregator_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("aggregator_invalid_json", path=path)
            return None

    # ------------------------------------------------------------------
    # Public API (AggregatorClientPort)
    # ------------------------------------------------------------------

    async def fetch(self, request: SourceRequest) -> AggregatorResult:
        """Fetch sources for *request* from the aggregator."""
        route = self._route(request)
        if route is None:
            log.debug(
                "aggregator_request_incomplete",
                media_kind=request.media_kind.value,
                missing=request.missing_fields(),
            )
            return AggregatorResult(message="Incomplete request")

        path, params = route
        data = await self._get(path, params)
        if data is None:
            return AggregatorResult(message="Aggregator unavailable")

        result = normalize_response(
            data,
            provider_id=self._provider_id,
            provider_name=self._provider_name,
            is_dubbed=request.is_dubbed and request.media_kind == MediaKind.ANIME,
        )
        log.debug(
            "aggregator_fetch_complete",
            path=path,
            source_count=len(result.sources),
            subtitle_count=len(result.subtitles),
        )
        return result
