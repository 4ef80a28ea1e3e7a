"""Playback session state.

The controller is the only writer; everything else reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from streamhub.domain.entities.media import (
    SourceRequest,
    SubtitleCue,
    SubtitleTrack,
    VideoSource,
)

MAX_RETRIES = 3

PLAYBACK_SPEEDS: tuple[float, ...] = (0.5, 0.75, 1.0, 1.25, 1.5, 2.0)
QUALITY_OPTIONS: tuple[str, ...] = ("Auto", "1080p", "720p", "480p")
THEMES: tuple[str, ...] = ("dark", "light")


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    RETRYING = "retrying"
    CLOSED = "closed"


class Menu(str, Enum):
    SOURCES = "sources"
    SUBTITLES = "subtitles"
    SETTINGS = "settings"


@dataclass(frozen=True)
class SessionError:
    """Failure shown to the viewer."""

    kind: str  # "NoSourcesAvailable" | "SourceLoadFailure"
    message: str
    source_id: str | None = None


@dataclass(frozen=True)
class SubtitleAppearance:
    font_size: int = 18
    color: str = "#ffffff"
    delay_seconds: float = 0.0
    background_color: str = "#000000"
    background_opacity: float = 0.8

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError("font_size must be > 0")
        if not 0.0 <= self.background_opacity <= 1.0:
            raise ValueError("background_opacity must be within [0, 1]")


@dataclass(frozen=True)
class PlayerSettings:
    """Viewer-adjustable player settings."""

    playback_speed: float = 1.0
    quality: str = "Auto"
    theme: str = "dark"
    subtitles: SubtitleAppearance = field(default_factory=SubtitleAppearance)

    def __post_init__(self) -> None:
        if self.playback_speed not in PLAYBACK_SPEEDS:
            raise ValueError(
                f"playback_speed must be one of {PLAYBACK_SPEEDS}, "
                f"got {self.playback_speed}"
            )
        if self.quality not in QUALITY_OPTIONS:
            raise ValueError(f"quality must be one of {QUALITY_OPTIONS}")
        if self.theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}")


@dataclass
class PlaybackSession:
    """Mutable aggregate owned by one ``PlaybackSessionController``."""

    request: SourceRequest | None = None
    state: SessionState = SessionState.IDLE
    candidates: list[VideoSource] = field(default_factory=list)
    active_source: VideoSource | None = None
    subtitle_tracks: list[SubtitleTrack] = field(default_factory=list)
    active_subtitle_id: str | None = None
    active_cues: list[SubtitleCue] = field(default_factory=list)
    retry_count: int = 0
    max_retries: int = MAX_RETRIES
    error: SessionError | None = None
    open_menu: Menu | None = None
    controls_visible: bool = True
    settings: PlayerSettings = field(default_factory=PlayerSettings)

    @property
    def retries_exhausted(self) -> bool:
        return self.retry_count >= self.max_retries

    @property
    def can_retry(self) -> bool:
        return self.state == SessionState.ERROR and not self.retries_exhausted

    @property
    def is_closed(self) -> bool:
        return self.state == SessionState.CLOSED

    def find_candidate(self, source_id: str) -> VideoSource | None:
        return next((s for s in self.candidates if s.id == source_id), None)

    def find_track(self, track_id: str) -> SubtitleTrack | None:
        return next((t for t in self.subtitle_tracks if t.id == track_id), None)

    def cues_at(self, position_seconds: float) -> list[SubtitleCue]:
        """Cues visible at *position_seconds*, honouring the subtitle delay."""
        shifted = position_seconds - self.settings.subtitles.delay_seconds
        return [
            c for c in self.active_cues if c.start_seconds <= shifted < c.end_seconds
        ]
