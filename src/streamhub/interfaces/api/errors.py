"""Domain exception -> HTTP status mapping."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from streamhub.domain.entities.errors import (
    InvalidRequestParameters,
    PlaybackError,
    SelectionNotFound,
    SessionClosed,
)

log = structlog.get_logger(__name__)


def _error(status_code: int, error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": str(exc)},
    )


async def _invalid_request(_: Request, exc: Exception) -> JSONResponse:
    return _error(422, "invalid_request_parameters", exc)


async def _not_found(_: Request, exc: Exception) -> JSONResponse:
    return _error(404, "not_found", exc)


async def _session_closed(_: Request, exc: Exception) -> JSONResponse:
    return _error(409, "session_closed", exc)


async def _invalid_value(_: Request, exc: Exception) -> JSONResponse:
    return _error(422, "invalid_value", exc)


async def _playback_error(request: Request, exc: Exception) -> JSONResponse:
    log.warning("playback_error", path=request.url.path, error=str(exc))
    return _error(409, "playback_error", exc)


def install_error_handlers(app: FastAPI) -> None:
    """Register handlers; the most specific exception class wins."""
    app.add_exception_handler(InvalidRequestParameters, _invalid_request)
    app.add_exception_handler(SelectionNotFound, _not_found)
    app.add_exception_handler(SessionClosed, _session_closed)
    app.add_exception_handler(PlaybackError, _playback_error)
    app.add_exception_handler(ValueError, _invalid_value)
