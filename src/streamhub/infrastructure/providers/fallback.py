"""Offline fallback source generation.

Used when the aggregator fails or returns nothing. No network access;
output is a pure function of the request and the registry.
"""

from __future__ import annotations

import structlog

from streamhub.domain.entities.errors import InvalidRequestParameters
from streamhub.domain.entities.media import (
    DEFAULT_QUALITY,
    SourceRequest,
    VideoSource,
)
from streamhub.infrastructure.providers.registry import ProviderRegistry

log = structlog.get_logger(__name__)


class FallbackGenerator:
    """Synthesizes one embed candidate per provider able to serve a request."""

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    def generate(self, request: SourceRequest) -> list[VideoSource]:
        sources: list[VideoSource] = []
        for provider in self._registry.eligible_for(request.media_kind):
            try:
                url = provider.generate_url(request)
            except InvalidRequestParameters as exc:
                log.debug(
                    "fallback_provider_skipped",
                    provider=provider.id,
                    reason=str(exc),
                )
                continue
            sources.append(
                VideoSource(
                    id=f"{provider.id}-fallback",
                    name=f"{provider.name} (Fallback)",
                    url=url,
                    provider=provider.id,
                    quality=DEFAULT_QUALITY,
                    kind="embed",
                )
            )

        log.debug(
            "fallback_sources_generated",
            media_kind=request.media_kind.value,
            count=len(sources),
        )
        return sources
