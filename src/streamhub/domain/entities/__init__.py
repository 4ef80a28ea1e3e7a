from .errors import (
    InvalidRequestParameters,
    NoSourcesAvailable,
    PlaybackError,
    SelectionNotFound,
    SessionClosed,
    SourceLoadFailure,
    SubtitleFetchFailure,
)
from .media import (
    DEFAULT_QUALITY,
    MediaKind,
    Provider,
    SourceKind,
    SourceRequest,
    SourceSubtitle,
    SubtitleCue,
    SubtitleTrack,
    VideoSource,
)
from .session import (
    MAX_RETRIES,
    Menu,
    PlaybackSession,
    PlayerSettings,
    SessionError,
    SessionState,
    SubtitleAppearance,
)

__all__ = [
    "DEFAULT_QUALITY",
    "MAX_RETRIES",
    "InvalidRequestParameters",
    "MediaKind",
    "Menu",
    "NoSourcesAvailable",
    "PlaybackError",
    "PlaybackSession",
    "PlayerSettings",
    "Provider",
    "SelectionNotFound",
    "SessionClosed",
    "SessionError",
    "SessionState",
    "SourceKind",
    "SourceLoadFailure",
    "SourceRequest",
    "SourceSubtitle",
    "SubtitleAppearance",
    "SubtitleCue",
    "SubtitleFetchFailure",
    "SubtitleTrack",
    "VideoSource",
]
