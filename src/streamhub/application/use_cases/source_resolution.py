"""Source resolution use case.

Aggregator -> fallback (if empty) -> registry extras
-> dedupe -> priority sort -> unique ids.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import replace
from typing import Protocol

import structlog

from streamhub.domain.entities.errors import InvalidRequestParameters
from streamhub.domain.entities.media import (
    DEFAULT_QUALITY,
    MediaKind,
    Provider,
    SourceRequest,
    VideoSource,
)
from streamhub.domain.ports.aggregator import AggregatorClientPort
from streamhub.domain.ports.source_resolver import FallbackGeneratorPort

log = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Protocols: what the engine needs from the provider catalog.
# ---------------------------------------------------------------------------


class _ProviderCatalog(Protocol):
    def priority_of(self, provider_id: str) -> float: ...

    def eligible_for(self, media_kind: MediaKind) -> list[Provider]: ...


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def deduplicate(sources: list[VideoSource]) -> list[VideoSource]:
    """Drop later entries sharing ``(provider, url)`` with an earlier one."""
    seen: set[tuple[str, str]] = set()
    unique: list[VideoSource] = []
    for source in sources:
        key = (source.provider, source.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(source)
    return unique


def ensure_unique_ids(sources: list[VideoSource]) -> list[VideoSource]:
    """Suffix repeated ids (``x``, ``x-2``, ``x-3``) so every id is distinct."""
    used: set[str] = set()
    result: list[VideoSource] = []
    for source in sources:
        candidate = source.id
        n = 2
        while candidate in used:
            candidate = f"{source.id}-{n}"
            n += 1
        used.add(candidate)
        if candidate != source.id:
            source = replace(source, id=candidate)
        result.append(source)
    return result


def default_source(sources: list[VideoSource]) -> VideoSource | None:
    """The candidate played first: the head of a resolved list."""
    return sources[0] if sources else None


def group_by_provider(sources: list[VideoSource]) -> OrderedDict[str, list[VideoSource]]:
    """Group candidates by provider id, keeping first-seen provider order."""
    groups: OrderedDict[str, list[VideoSource]] = OrderedDict()
    for source in sources:
        groups.setdefault(source.provider, []).append(source)
    return groups


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class SourceResolutionEngine:
    """Builds one ordered, deduplicated candidate list per request.

    Stateless between calls: every ``resolve`` recomputes from scratch.
    Implements ``SourceResolverPort``.
    """

    def __init__(
        self,
        *,
        registry: _ProviderCatalog,
        fallback: FallbackGeneratorPort,
        aggregator: AggregatorClientPort | None = None,
    ) -> None:
        self._registry = registry
        self._fallback = fallback
        self._aggregator = aggregator

    async def _from_aggregator(self, request: SourceRequest) -> list[VideoSource]:
        if self._aggregator is None:
            return []
        try:
            result = await self._aggregator.fetch(request)
        except Exception:  # noqa: BLE001
            log.warning(
                "aggregator_fetch_failed",
                media_kind=request.media_kind.value,
                content_id=request.content_id,
                exc_info=True,
            )
            return []
        if not result.success:
            log.info(
                "aggregator_no_sources",
                media_kind=request.media_kind.value,
                content_id=request.content_id,
                message=result.message,
            )
            return []
        return list(result.sources)

    def _registry_extras(
        self, request: SourceRequest, present: set[str]
    ) -> list[VideoSource]:
        extras: list[VideoSource] = []
        for provider in self._registry.eligible_for(request.media_kind):
            if provider.id in present:
                continue
            try:
                url = provider.generate_url(request)
            except InvalidRequestParameters as exc:
                log.debug(
                    "registry_provider_skipped",
                    provider=provider.id,
                    reason=str(exc),
                )
                continue
            extras.append(
                VideoSource(
                    id=f"{provider.id}-registry",
                    name=provider.name,
                    url=url,
                    provider=provider.id,
                    quality=DEFAULT_QUALITY,
                    kind="embed",
                )
            )
        return extras

    async def resolve(self, request: SourceRequest) -> list[VideoSource]:
        """Resolve *request* into candidates sorted by provider priority.

        Never raises. An empty list means no provider could serve the
        request.
        """
        candidates = await self._from_aggregator(request)
        used_fallback = False
        if not candidates:
            candidates = list(self._fallback.generate(request))
            used_fallback = True

        present = {source.provider for source in candidates}
        candidates.extend(self._registry_extras(request, present))

        unique = deduplicate(candidates)
        # sorted() is stable, so equal priorities keep discovery order.
        ordered = sorted(unique, key=lambda s: self._registry.priority_of(s.provider))
        result = ensure_unique_ids(ordered)

        log.info(
            "sources_resolved",
            media_kind=request.media_kind.value,
            content_id=request.content_id,
            count=len(result),
            fallback=used_fallback,
            dropped_duplicates=len(candidates) - len(unique),
        )
        return result
