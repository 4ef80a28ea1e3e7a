"""Port for subtitle track discovery and caption download."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamhub.domain.entities.media import MediaKind, SubtitleCue, SubtitleTrack


@runtime_checkable
class SubtitleServicePort(Protocol):
    async def list_tracks(
        self,
        content_id: str,
        media_kind: MediaKind,
        season: int | None = None,
        episode: int | None = None,
    ) -> list[SubtitleTrack]:
        """List subtitle tracks; returns a fixed fallback list on failure."""
        ...

    async def fetch_cues(self, track: SubtitleTrack) -> list[SubtitleCue]:
        """Download and parse the caption file of *track*.

        Returns ``[]`` for tracks without a url. Raises
        ``SubtitleFetchFailure`` when the download fails.
        """
        ...
