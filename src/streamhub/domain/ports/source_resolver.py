"""Port for the source resolution engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamhub.domain.entities.media import SourceRequest, VideoSource


@runtime_checkable
class SourceResolverPort(Protocol):
    async def resolve(self, request: SourceRequest) -> list[VideoSource]:
        """Return deduplicated candidates sorted by provider priority.

        Never raises; an empty list means nothing could be resolved.
        """
        ...


@runtime_checkable
class FallbackGeneratorPort(Protocol):
    def generate(self, request: SourceRequest) -> list[VideoSource]:
        """Synthesize direct-embed candidates without network access."""
        ...
