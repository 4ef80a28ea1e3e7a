"""Subtitle track listing and caption download over httpx."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

import httpx
import structlog

from streamhub.domain.entities.errors import SubtitleFetchFailure
from streamhub.domain.entities.media import MediaKind, SubtitleCue, SubtitleTrack
from streamhub.infrastructure.subtitles.srt import parse_captions

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
LISTING_PROVIDER = "OpenSubtitles"
FALLBACK_PROVIDER = "Fallback"
DEFAULT_COUNTRY = "US"

LANGUAGE_COUNTRIES: MappingProxyType[str, str] = MappingProxyType(
    {
        "en": "US",
        "es": "ES",
        "fr": "FR",
        "de": "DE",
        "it": "IT",
        "pt": "PT",
        "ru": "RU",
        "ja": "JP",
        "ko": "KR",
        "zh": "CN",
        "ar": "SA",
        "hi": "IN",
        "th": "TH",
        "vi": "VN",
        "tr": "TR",
        "pl": "PL",
        "nl": "NL",
        "sv": "SE",
        "da": "DK",
        "no": "NO",
        "fi": "FI",
    }
)

FALLBACK_TRACKS: tuple[SubtitleTrack, ...] = (
    SubtitleTrack(id="1", language="English", country_code="US", url="", provider=FALLBACK_PROVIDER),
    SubtitleTrack(id="2", language="Spanish", country_code="ES", url="", provider=FALLBACK_PROVIDER),
    SubtitleTrack(id="3", language="French", country_code="FR", url="", provider=FALLBACK_PROVIDER),
    SubtitleTrack(id="4", language="German", country_code="DE", url="", provider=FALLBACK_PROVIDER),
    SubtitleTrack(id="5", language="Italian", country_code="IT", url="", provider=FALLBACK_PROVIDER),
)  # fmt: skip


def country_code(language: str) -> str:
    """Map a language code to a display country code (``US`` if unknown)."""
    return LANGUAGE_COUNTRIES.get(language.strip().lower(), DEFAULT_COUNTRY)


def _to_track(entry: Any) -> SubtitleTrack:
    if not isinstance(entry, dict):
        raise TypeError(f"subtitle entry must be an object, got {type(entry)!r}")
    language = str(entry["language"])
    return SubtitleTrack(
        id=str(entry["id"]),
        language=language,
        country_code=country_code(language),
        url=str(entry.get("url") or ""),
        provider=LISTING_PROVIDER,
    )


class HttpxSubtitleService:
    """Async subtitle service using httpx.

    Implements ``SubtitleServicePort`` from domain.ports.subtitles.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    @staticmethod
    def _listing_path(
        content_id: str,
        media_kind: MediaKind,
        season: int | None,
        episode: int | None,
    ) -> str:
        if media_kind == MediaKind.MOVIE:
            return f"/api/subtitles/movie/{content_id}"
        return f"/api/subtitles/tv/{content_id}/season/{season}/episode/{episode}"

    async def list_tracks(
        self,
        content_id: str,
        media_kind: MediaKind,
        season: int | None = None,
        episode: int | None = None,
    ) -> list[SubtitleTrack]:
        """List subtitle tracks, or the fixed fallback list on any failure."""
        path = self._listing_path(content_id, media_kind, season, episode)
        try:
            resp = await self._http.get(f"{self._base_url}{path}")
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                raise TypeError("subtitle listing must be a JSON array")
            tracks = [_to_track(entry) for entry in payload]
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, KeyError, TypeError):
            log.warning(
                "subtitle_listing_failed",
                path=path,
                fallback_count=len(FALLBACK_TRACKS),
                exc_info=True,
            )
            return list(FALLBACK_TRACKS)

        log.debug("subtitle_listing_complete", path=path, count=len(tracks))
        return tracks

    async def fetch_cues(self, track: SubtitleTrack) -> list[SubtitleCue]:
        """Download and parse the caption file behind *track*."""
        if not track.has_source:
            return []
        try:
            resp = await self._http.get(track.url)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SubtitleFetchFailure(
                f"Caption download failed for track {track.id}: {exc}"
            ) from exc
        cues = parse_captions(resp.text)
        log.debug("captions_loaded", track_id=track.id, cue_count=len(cues))
        return cues
