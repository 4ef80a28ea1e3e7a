from .service import FALLBACK_TRACKS, HttpxSubtitleService, country_code
from .srt import format_captions, format_time, parse_captions, parse_timestamp

__all__ = [
    "FALLBACK_TRACKS",
    "HttpxSubtitleService",
    "country_code",
    "format_captions",
    "format_time",
    "parse_captions",
    "parse_timestamp",
]
