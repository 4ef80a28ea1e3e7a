"""SubRip (``.srt``) caption parsing.

Blocks are separated by blank lines::

    1
    00:00:01,000 --> 00:00:04,500
    First line
    <i>second line</i>

Malformed blocks are skipped individually; one bad block never aborts
the parse. Cues are returned in file order without sorting or merging.
"""

from __future__ import annotations

import re

import structlog

from streamhub.domain.entities.media import SubtitleCue

log = structlog.get_logger(__name__)

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_TIMESTAMP_RE = re.compile(r"(\d{2}):(\d{2}):(\d{2}),(\d{3})")
_TIME_RANGE_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2}),(\d{3}) --> (\d{2}):(\d{2}):(\d{2}),(\d{3})"
)
_TAG_RE = re.compile(r"<[^>]*>")


def _to_seconds(hours: str, minutes: str, seconds: str, millis: str) -> float:
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + int(millis) / 1000


def parse_timestamp(value: str) -> float:
    """Convert ``HH:MM:SS,mmm`` into seconds.

    Raises:
        ValueError: if *value* is not a valid timestamp.
    """
    m = _TIMESTAMP_RE.fullmatch(value.strip())
    if m is None:
        raise ValueError(f"Invalid SRT timestamp: {value!r}")
    return _to_seconds(*m.groups())


def parse_captions(raw: str) -> list[SubtitleCue]:
    """Parse SRT text into cues, preserving block order."""
    text = raw.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return []

    cues: list[SubtitleCue] = []
    skipped = 0
    for block in _BLOCK_SPLIT_RE.split(text):
        lines = [line for line in block.strip().split("\n") if line.strip()]
        if len(lines) < 3:
            skipped += 1
            continue

        m = _TIME_RANGE_RE.match(lines[1].strip())
        if m is None:
            skipped += 1
            continue

        groups = m.groups()
        start = _to_seconds(*groups[:4])
        end = _to_seconds(*groups[4:])
        if end <= start:
            skipped += 1
            continue

        body = _TAG_RE.sub("", "\n".join(lines[2:])).strip()
        if not body:
            skipped += 1
            continue

        cues.append(SubtitleCue(start_seconds=start, end_seconds=end, text=body))

    if skipped:
        log.debug("captions_blocks_skipped", skipped=skipped, parsed=len(cues))
    return cues


def format_timestamp(seconds: float) -> str:
    """Inverse of ``parse_timestamp`` (millisecond precision)."""
    total_ms = max(0, round(seconds * 1000))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def format_captions(cues: list[SubtitleCue]) -> str:
    """Serialize cues back into SRT text."""
    blocks = [
        f"{index}\n"
        f"{format_timestamp(cue.start_seconds)} --> "
        f"{format_timestamp(cue.end_seconds)}\n"
        f"{cue.text}"
        for index, cue in enumerate(cues, start=1)
    ]
    return "\n\n".join(blocks) + ("\n" if blocks else "")


def format_time(seconds: float) -> str:
    """Human playback time: ``M:SS`` or ``H:MM:SS``."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
