"""Port for the primary multi-provider aggregation API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from streamhub.domain.entities.media import SourceRequest, SourceSubtitle, VideoSource


@dataclass(frozen=True)
class AggregatorResult:
    """Normalized aggregator response.

    ``success`` is False when the call failed or yielded no sources.
    """

    sources: list[VideoSource] = field(default_factory=list)
    subtitles: list[SourceSubtitle] = field(default_factory=list)
    success: bool = False
    message: str | None = None


@runtime_checkable
class AggregatorClientPort(Protocol):
    """Fetches candidate sources from an external aggregation service."""

    @property
    def provider_id(self) -> str:
        """Provider id tagged on sources that carry no provider of their own."""
        ...

    async def fetch(self, request: SourceRequest) -> AggregatorResult:
        """Fetch and normalize sources for *request*.

        Network and parse failures are reported via ``success=False``,
        never raised.
        """
        ...
