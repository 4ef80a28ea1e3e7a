"""Playback session endpoints.

Every mutating call returns the full session view so the rendering
surface can re-render from a single payload.
"""

from __future__ import annotations

from typing import Any, Optional, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from streamhub.domain.entities.media import MediaKind, SourceRequest
from streamhub.domain.entities.session import Menu
from streamhub.interfaces.api.presenter import cue_to_dict, session_to_dict
from streamhub.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class SourceRequestBody(BaseModel):
    media_kind: MediaKind
    movie_id: Optional[str] = None
    series_id: Optional[str] = None
    season_number: Optional[int] = None
    episode_number: Optional[int] = None
    is_dubbed: bool = False

    def to_domain(self) -> SourceRequest:
        return SourceRequest(
            media_kind=self.media_kind,
            movie_id=self.movie_id,
            series_id=self.series_id,
            season_number=self.season_number,
            episode_number=self.episode_number,
            is_dubbed=self.is_dubbed,
        )


class SourceSelection(BaseModel):
    source_id: str


class SubtitleSelection(BaseModel):
    track_id: Optional[str] = Field(default=None, description="None turns captions off.")


class FailureReport(BaseModel):
    source_id: str
    reason: str = ""


class MenuToggle(BaseModel):
    menu: Menu


class SettingsPatch(BaseModel):
    playback_speed: Optional[float] = None
    quality: Optional[str] = None
    theme: Optional[str] = None
    subtitles: Optional[dict[str, Any]] = None


def _state(request: Request) -> AppState:
    return cast(AppState, request.app.state)


def _view(request: Request, session_id: str, **extra: Any) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    content = session_to_dict(session_id, controller.session)
    content.update(extra)
    return JSONResponse(content=content)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("")
async def open_session(request: Request, body: SourceRequestBody) -> JSONResponse:
    """Open a session and run its first loading phase."""
    session_id, controller = await _state(request).sessions.open(body.to_domain())
    return JSONResponse(
        status_code=201,
        content=session_to_dict(session_id, controller.session),
    )


@router.get("/{session_id}")
async def get_session(request: Request, session_id: str) -> JSONResponse:
    return _view(request, session_id)


@router.put("/{session_id}/request")
async def change_request(
    request: Request, session_id: str, body: SourceRequestBody
) -> JSONResponse:
    """Change the watch parameters; a different title/episode reloads."""
    controller = _state(request).sessions.get(session_id)
    await controller.start(body.to_domain())
    return _view(request, session_id)


@router.post("/{session_id}/source")
async def switch_source(
    request: Request, session_id: str, body: SourceSelection
) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    controller.switch_source(body.source_id)
    return _view(request, session_id)


@router.post("/{session_id}/subtitle")
async def switch_subtitle(
    request: Request, session_id: str, body: SubtitleSelection
) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    cues = await controller.switch_subtitle(body.track_id)
    return _view(request, session_id, cues=[cue_to_dict(c) for c in cues])


@router.get("/{session_id}/cues")
async def cues_at(request: Request, session_id: str, position: float) -> JSONResponse:
    """Cues visible at *position* seconds, after the subtitle delay."""
    controller = _state(request).sessions.get(session_id)
    cues = controller.active_cues_at(position)
    return JSONResponse(content={"cues": [cue_to_dict(c) for c in cues]})


@router.post("/{session_id}/failure")
async def report_failure(
    request: Request, session_id: str, body: FailureReport
) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    accepted = controller.report_source_failure(body.source_id, body.reason)
    return _view(request, session_id, accepted=accepted)


@router.post("/{session_id}/retry")
async def retry(request: Request, session_id: str) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    retried = await controller.retry()
    return _view(request, session_id, retried=retried)


@router.post("/{session_id}/pointer")
async def pointer_moved(request: Request, session_id: str) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    controller.show_controls()
    return _view(request, session_id)


@router.post("/{session_id}/keys/{key}")
async def press_key(request: Request, session_id: str, key: str) -> JSONResponse:
    """Deliver a key press to this session only.

    The close key removes the session; the returned view is its final state.
    """
    controller = _state(request).sessions.get(session_id)
    keyboard = controller.keyboard
    notified = keyboard.dispatch(key) if keyboard is not None else 0
    content = session_to_dict(session_id, controller.session)
    content.update(key=key, listeners=notified)
    return JSONResponse(content=content)


@router.post("/{session_id}/menu")
async def toggle_menu(
    request: Request, session_id: str, body: MenuToggle
) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    controller.toggle_menu(body.menu)
    return _view(request, session_id)


@router.patch("/{session_id}/settings")
async def update_settings(
    request: Request, session_id: str, body: SettingsPatch
) -> JSONResponse:
    controller = _state(request).sessions.get(session_id)
    controller.update_settings(**body.model_dump(exclude_none=True))
    return _view(request, session_id)


@router.delete("/{session_id}")
async def close_session(request: Request, session_id: str) -> JSONResponse:
    _state(request).sessions.close(session_id)
    return JSONResponse(content={"id": session_id, "state": "closed"})
