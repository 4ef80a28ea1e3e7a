"""Subtitle listing and caption parsing endpoints."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from streamhub.domain.entities.media import MediaKind
from streamhub.infrastructure.subtitles.srt import parse_captions
from streamhub.interfaces.api.presenter import cue_to_dict, track_to_dict
from streamhub.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/subtitles", tags=["subtitles"])


@router.get("/{kind}/{content_id}")
async def list_tracks(
    request: Request,
    kind: MediaKind,
    content_id: str,
    season: int | None = Query(default=None, description="Season number (series)."),
    episode: int | None = Query(default=None, description="Episode number."),
) -> JSONResponse:
    """List subtitle tracks; falls back to common languages on failure."""
    state = cast(AppState, request.app.state)
    tracks = await state.subtitles.list_tracks(content_id, kind, season, episode)
    return JSONResponse(content={"tracks": [track_to_dict(t) for t in tracks]})


@router.post("/parse")
async def parse(request: Request) -> JSONResponse:
    """Parse a raw SubRip body (text/plain) into cues."""
    raw = (await request.body()).decode("utf-8", errors="replace")
    cues = parse_captions(raw)
    log.debug("captions_parsed", size=len(raw), cue_count=len(cues))
    return JSONResponse(content={"cues": [cue_to_dict(c) for c in cues]})
