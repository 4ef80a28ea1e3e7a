"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streamhub.application.session_manager import PlaybackSessionManager
from streamhub.application.use_cases.playback_session import PlaybackSessionController
from streamhub.application.use_cases.source_resolution import SourceResolutionEngine
from streamhub.infrastructure.aggregator import HttpxAggregatorClient
from streamhub.infrastructure.keyboard import KeyEventBus
from streamhub.infrastructure.providers import FallbackGenerator, ProviderRegistry
from streamhub.infrastructure.subtitles import HttpxSubtitleService
from streamhub.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client (aggregator + subtitles)
        2. Provider registry + fallback generator
        3. Aggregator client (optional)
        4. Resolution engine
        5. Subtitle service
        6. Session manager (per-session key bus)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client (no transport-level retries: retry is a user action)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Provider catalog
    state.registry = ProviderRegistry()
    state.fallback = FallbackGenerator(state.registry)
    log.info(
        "provider_registry_initialized",
        providers=[p.id for p in state.registry],
    )

    # 3) Aggregator
    if config.aggregator.enabled:
        state.aggregator = HttpxAggregatorClient(
            http_client=state.http_client,
            base_url=config.aggregator.base_url,
        )
        log.info("aggregator_initialized", base_url=config.aggregator.base_url)
    else:
        state.aggregator = None
        log.info("aggregator_disabled")

    # 4) Resolution engine
    state.resolver = SourceResolutionEngine(
        registry=state.registry,
        fallback=state.fallback,
        aggregator=state.aggregator,
    )

    # 5) Subtitles
    state.subtitles = HttpxSubtitleService(
        http_client=state.http_client,
        base_url=config.subtitles.base_url,
    )

    # 6) Sessions (one key bus per session; keys never cross sessions)
    def new_controller() -> PlaybackSessionController:
        return PlaybackSessionController(
            resolver=state.resolver,
            subtitles=state.subtitles,
            fallback=state.fallback,
            config=config.player,
            keyboard=KeyEventBus(),
        )

    state.sessions = PlaybackSessionManager(new_controller)
    log.info("session_manager_initialized")

    try:
        yield
    finally:
        closed = state.sessions.close_all()
        await state.http_client.aclose()
        log.info("shutdown_complete", sessions_closed=closed)
