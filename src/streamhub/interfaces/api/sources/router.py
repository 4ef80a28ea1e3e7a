"""Source resolution endpoints."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from streamhub.application.use_cases.source_resolution import (
    default_source,
    group_by_provider,
)
from streamhub.domain.entities.media import MediaKind, SourceRequest
from streamhub.infrastructure.aggregator.probe import probe_source
from streamhub.interfaces.api.presenter import provider_to_dict, source_to_dict
from streamhub.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/sources", tags=["sources"])


def build_request(
    kind: MediaKind,
    content_id: str,
    season: int | None,
    episode: int | None,
    dub: bool,
) -> SourceRequest:
    """Map path/query parameters onto a validated ``SourceRequest``."""
    if kind == MediaKind.MOVIE:
        request = SourceRequest(media_kind=kind, movie_id=content_id, is_dubbed=dub)
    else:
        request = SourceRequest(
            media_kind=kind,
            series_id=content_id,
            season_number=season,
            episode_number=episode,
            is_dubbed=dub,
        )
    return request.validate()


@router.get("/providers")
async def list_providers(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    return JSONResponse(
        content={"providers": [provider_to_dict(p) for p in state.registry]}
    )


@router.get("/probe")
async def probe(
    request: Request,
    url: str = Query(description="Candidate URL to check."),
) -> JSONResponse:
    """Best-effort HEAD probe of a candidate URL."""
    state = cast(AppState, request.app.state)
    available = await probe_source(
        state.http_client,
        url,
        timeout=state.config.player.probe_timeout_seconds,
    )
    return JSONResponse(content={"url": url, "available": available})


@router.get("/{kind}/{content_id}")
async def resolve_sources(
    request: Request,
    kind: MediaKind,
    content_id: str,
    season: int | None = Query(default=None, description="Season number (series)."),
    episode: int | None = Query(default=None, description="Episode number."),
    dub: bool = Query(default=False, description="Prefer dubbed audio (anime)."),
) -> JSONResponse:
    """Resolve ordered, deduplicated candidates for one title."""
    state = cast(AppState, request.app.state)
    source_request = build_request(kind, content_id, season, episode, dub)

    sources = await state.resolver.resolve(source_request)
    first = default_source(sources)
    groups = group_by_provider(sources)

    return JSONResponse(
        content={
            "sources": [source_to_dict(s) for s in sources],
            "default_source_id": first.id if first is not None else None,
            "providers": {
                provider: [s.id for s in group] for provider, group in groups.items()
            },
        }
    )
