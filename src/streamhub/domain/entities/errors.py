"""Playback domain exceptions."""

from __future__ import annotations

from collections.abc import Sequence


class PlaybackError(Exception):
    """Base class for all playback-related errors."""


class NoSourcesAvailable(PlaybackError):
    """Raised when aggregator, registry and fallback produced no candidate."""


class SourceLoadFailure(PlaybackError):
    """Raised when the rendering surface cannot load the active source."""

    def __init__(self, source_id: str, reason: str = "") -> None:
        self.source_id = source_id
        self.reason = reason
        super().__init__(reason or f"Source {source_id} failed to load")


class SubtitleFetchFailure(PlaybackError):
    """Raised when a subtitle listing or caption file cannot be fetched."""


class SessionClosed(PlaybackError):
    """Raised when a closed session is asked to change."""


class InvalidRequestParameters(PlaybackError, ValueError):
    """Raised when required identifiers are missing for a media kind."""

    def __init__(
        self,
        media_kind: str,
        missing: Sequence[str],
        *,
        reason: str | None = None,
    ) -> None:
        self.media_kind = media_kind
        self.missing = list(missing)
        detail = reason or "missing " + ", ".join(self.missing)
        super().__init__(f"Invalid parameters for {media_kind}: {detail}")


class SelectionNotFound(PlaybackError, LookupError):
    """Raised when a source, track or session id is not known."""
