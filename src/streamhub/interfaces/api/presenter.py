"""JSON views of domain objects returned by the HTTP API."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from streamhub.domain.entities.media import (
    Provider,
    SubtitleCue,
    SubtitleTrack,
    VideoSource,
)
from streamhub.domain.entities.session import PlaybackSession
from streamhub.infrastructure.subtitles.srt import format_time


def source_to_dict(source: VideoSource) -> dict[str, Any]:
    return {
        "id": source.id,
        "name": source.name,
        "url": source.url,
        "provider": source.provider,
        "quality": source.quality,
        "kind": source.kind,
        "subtitles": [asdict(s) for s in source.subtitles],
    }


def provider_to_dict(provider: Provider) -> dict[str, Any]:
    return {
        "id": provider.id,
        "name": provider.name,
        "priority": provider.priority,
        "media_kinds": sorted(k.value for k in provider.media_kinds),
        "supports_subtitles": provider.supports_subtitles,
        "supports_quality_selection": provider.supports_quality_selection,
    }


def track_to_dict(track: SubtitleTrack) -> dict[str, Any]:
    return {
        "id": track.id,
        "language": track.language,
        "country_code": track.country_code,
        "url": track.url,
        "provider": track.provider,
    }


def cue_to_dict(cue: SubtitleCue) -> dict[str, Any]:
    return {
        "start_seconds": cue.start_seconds,
        "end_seconds": cue.end_seconds,
        "start": format_time(cue.start_seconds),
        "end": format_time(cue.end_seconds),
        "text": cue.text,
    }


def session_to_dict(session_id: str, session: PlaybackSession) -> dict[str, Any]:
    request = session.request
    return {
        "id": session_id,
        "state": session.state.value,
        "request": (
            {
                "media_kind": request.media_kind.value,
                "movie_id": request.movie_id,
                "series_id": request.series_id,
                "season_number": request.season_number,
                "episode_number": request.episode_number,
                "is_dubbed": request.is_dubbed,
            }
            if request is not None
            else None
        ),
        "candidates": [source_to_dict(s) for s in session.candidates],
        "active_source_id": (
            session.active_source.id if session.active_source is not None else None
        ),
        "subtitle_tracks": [track_to_dict(t) for t in session.subtitle_tracks],
        "active_subtitle_id": session.active_subtitle_id,
        "cue_count": len(session.active_cues),
        "retry_count": session.retry_count,
        "max_retries": session.max_retries,
        "can_retry": session.can_retry,
        "error": asdict(session.error) if session.error is not None else None,
        "open_menu": session.open_menu.value if session.open_menu else None,
        "controls_visible": session.controls_visible,
        "settings": asdict(session.settings),
    }
