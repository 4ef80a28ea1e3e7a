"""Tests for SourceResolutionEngine."""

from __future__ import annotations

import math
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from streamhub.application.use_cases.source_resolution import (
    SourceResolutionEngine,
    deduplicate,
    default_source,
    ensure_unique_ids,
    group_by_provider,
)
from streamhub.domain.entities.media import (
    MediaKind,
    Provider,
    SourceRequest,
    VideoSource,
)
from streamhub.domain.ports import AggregatorResult, SourceResolverPort
from streamhub.infrastructure.providers import FallbackGenerator, ProviderRegistry
from streamhub.infrastructure.providers.registry import DEFAULT_PROVIDERS


def _src(id_: str, provider: str, url: str) -> VideoSource:
    return VideoSource(id=id_, name=id_, url=url, provider=provider)


def _aggregator(*sources: VideoSource) -> AsyncMock:
    agg = AsyncMock()
    agg.fetch.return_value = AggregatorResult(
        sources=list(sources), success=bool(sources)
    )
    return agg


def _x_provider() -> Provider:
    return Provider(
        id="x",
        name="X",
        priority=1,
        url_builder=lambda r: f"https://x.example/{r.content_id}",
        media_kinds=frozenset({MediaKind.MOVIE}),
    )


def _engine(
    registry: ProviderRegistry,
    aggregator: AsyncMock | None = None,
) -> SourceResolutionEngine:
    return SourceResolutionEngine(
        registry=registry,
        fallback=FallbackGenerator(registry),
        aggregator=aggregator,
    )


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestResolveScenarios:
    @pytest.mark.asyncio()
    async def test_aggregator_plus_registry_provider(
        self, movie_request: SourceRequest
    ) -> None:
        registry = ProviderRegistry([_x_provider()])
        engine = _engine(registry, _aggregator(_src("p-stream-0", "p-stream", "http://a")))

        result = await engine.resolve(movie_request)

        assert [s.provider for s in result] == ["x", "p-stream"]
        assert result[0].url == "https://x.example/550"
        assert result[1].url == "http://a"

    @pytest.mark.asyncio()
    async def test_network_error_falls_back_to_single_provider(
        self, anime_request: SourceRequest
    ) -> None:
        registry = ProviderRegistry([DEFAULT_PROVIDERS[0]])
        aggregator = AsyncMock()
        aggregator.fetch.side_effect = httpx.ConnectError("unreachable")
        engine = _engine(registry, aggregator)

        result = await engine.resolve(anime_request)

        assert len(result) == 1
        assert result[0].id == "vidplus-fallback"
        assert "dub=false" in result[0].url

    @pytest.mark.asyncio()
    async def test_unsuccessful_aggregator_uses_fallback(
        self, registry: ProviderRegistry, movie_request: SourceRequest
    ) -> None:
        engine = _engine(registry, _aggregator())
        result = await engine.resolve(movie_request)
        assert [s.id for s in result] == [
            "vidplus-fallback",
            "vidnest-fallback",
            "superembed-fallback",
        ]

    @pytest.mark.asyncio()
    async def test_without_aggregator(
        self, registry: ProviderRegistry, series_request: SourceRequest
    ) -> None:
        result = await _engine(registry).resolve(series_request)
        assert [s.provider for s in result] == ["vidplus", "vidnest", "superembed"]

    @pytest.mark.asyncio()
    async def test_registry_extras_fill_missing_providers(
        self, registry: ProviderRegistry, movie_request: SourceRequest
    ) -> None:
        engine = _engine(
            registry, _aggregator(_src("p-stream-0", "vidnest", "http://nest"))
        )
        result = await engine.resolve(movie_request)
        assert [s.id for s in result] == [
            "vidplus-registry",
            "p-stream-0",
            "superembed-registry",
        ]

    @pytest.mark.asyncio()
    async def test_incomplete_request_resolves_empty(
        self, registry: ProviderRegistry
    ) -> None:
        req = SourceRequest(media_kind=MediaKind.SERIES, series_id="1399")
        assert await _engine(registry, _aggregator()).resolve(req) == []

    @pytest.mark.asyncio()
    async def test_stateless_between_calls(
        self, registry: ProviderRegistry, movie_request: SourceRequest
    ) -> None:
        aggregator = _aggregator(_src("p-stream-0", "p-stream", "http://a"))
        engine = _engine(registry, aggregator)
        first = await engine.resolve(movie_request)
        second = await engine.resolve(movie_request)
        assert first == second
        assert aggregator.fetch.await_count == 2


class TestResolveInvariants:
    @pytest.mark.asyncio()
    async def test_no_duplicate_provider_url(
        self, registry: ProviderRegistry, movie_request: SourceRequest
    ) -> None:
        engine = _engine(
            registry,
            _aggregator(
                _src("p-stream-0", "p-stream", "http://a"),
                _src("p-stream-1", "p-stream", "http://a"),
                _src("p-stream-2", "other", "http://a"),
            ),
        )
        result = await engine.resolve(movie_request)
        keys = [(s.provider, s.url) for s in result]
        assert len(keys) == len(set(keys))
        assert [s.id for s in result if s.url == "http://a"] == [
            "p-stream-0",
            "p-stream-2",
        ]

    @pytest.mark.asyncio()
    async def test_sorted_by_priority_ties_keep_order(
        self, registry: ProviderRegistry, movie_request: SourceRequest
    ) -> None:
        engine = _engine(
            registry,
            _aggregator(
                _src("a", "unknown", "http://u"),
                _src("b", "vidnest", "http://n1"),
                _src("c", "vidplus", "http://p"),
                _src("d", "vidnest", "http://n2"),
            ),
        )
        result = await engine.resolve(movie_request)
        priorities = [registry.priority_of(s.provider) for s in result]
        assert priorities == sorted(priorities)
        assert [s.id for s in result] == ["c", "b", "d", "superembed-registry", "a"]
        assert priorities[-1] == math.inf

    @pytest.mark.asyncio()
    async def test_ids_unique_within_result(
        self, registry: ProviderRegistry, movie_request: SourceRequest
    ) -> None:
        engine = _engine(
            registry,
            _aggregator(
                _src("dup", "p-stream", "http://1"),
                _src("dup", "p-stream", "http://2"),
            ),
        )
        result = await engine.resolve(movie_request)
        ids = [s.id for s in result]
        assert len(ids) == len(set(ids))
        assert "dup-2" in ids


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_default_source(self, sample_sources: list[VideoSource]) -> None:
        assert default_source(sample_sources) is sample_sources[0]
        assert default_source([]) is None

    def test_group_by_provider_keeps_order(self) -> None:
        sources = [
            _src("1", "b", "u1"),
            _src("2", "a", "u2"),
            _src("3", "b", "u3"),
        ]
        groups = group_by_provider(sources)
        assert list(groups) == ["b", "a"]
        assert [s.id for s in groups["b"]] == ["1", "3"]

    def test_deduplicate_keeps_first(self) -> None:
        sources = [_src("1", "p", "u"), _src("2", "p", "u")]
        assert [s.id for s in deduplicate(sources)] == ["1"]

    def test_ensure_unique_ids(self) -> None:
        sources = [_src("x", "p", "1"), _src("x", "p", "2"), _src("x", "p", "3")]
        assert [s.id for s in ensure_unique_ids(sources)] == ["x", "x-2", "x-3"]

    def test_engine_satisfies_port(self, registry: ProviderRegistry) -> None:
        engine = SourceResolutionEngine(registry=registry, fallback=MagicMock())
        assert isinstance(engine, SourceResolverPort)
