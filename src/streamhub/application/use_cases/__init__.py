from .playback_session import EMBEDDED_TRACK, PlaybackSessionController
from .source_resolution import (
    SourceResolutionEngine,
    deduplicate,
    default_source,
    ensure_unique_ids,
    group_by_provider,
)

__all__ = [
    "EMBEDDED_TRACK",
    "PlaybackSessionController",
    "SourceResolutionEngine",
    "deduplicate",
    "default_source",
    "ensure_unique_ids",
    "group_by_provider",
]
