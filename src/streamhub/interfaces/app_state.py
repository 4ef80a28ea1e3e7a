"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streamhub.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streamhub.application.session_manager import PlaybackSessionManager
    from streamhub.application.use_cases.source_resolution import (
        SourceResolutionEngine,
    )
    from streamhub.domain.ports import AggregatorClientPort, SubtitleServicePort
    from streamhub.infrastructure.providers import FallbackGenerator, ProviderRegistry


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Providers (read-only, shared by all sessions)
    registry: ProviderRegistry
    fallback: FallbackGenerator

    # Domain ports
    aggregator: AggregatorClientPort | None
    subtitles: SubtitleServicePort

    # Application services
    resolver: SourceResolutionEngine
    sessions: PlaybackSessionManager
