"""
Tests for the pagination cache gateway.

Tests key derivation, TTL handling, the cache bypass switch and metrics.
"""

from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY

from docpager.exceptions import InvalidArgument
from docpager.schemas.request import PaginationConfig
from docpager.storage.memory import InMemoryCacheStore
from docpager.utils.pagination_cache import (
    DEFAULT_CACHE_TTL,
    CacheGateway,
    get_cache_gateway,
)
from tests.mocks.store_mocks import create_mock_cache_store


def lookups(namespace, result):
    return (
        REGISTRY.get_sample_value(
            "pagination_cache_lookups_total",
            {"namespace": namespace, "result": result},
        )
        or 0.0
    )


def writes(namespace):
    return (
        REGISTRY.get_sample_value(
            "pagination_cache_writes_total", {"namespace": namespace}
        )
        or 0.0
    )


class TestCacheGateway:
    """Tests for CacheGateway get/put."""

    def test_default_ttl(self):
        assert CacheGateway(InMemoryCacheStore()).ttl == DEFAULT_CACHE_TTL == 60

    @pytest.mark.parametrize("ttl", [0, -5, 1.5, "60", True])
    def test_invalid_ttl(self, ttl):
        """Test TTL must be a positive integer."""
        with pytest.raises(InvalidArgument):
            CacheGateway(InMemoryCacheStore(), ttl=ttl)

    def test_from_config(self):
        config = PaginationConfig(allow_cache=False, cache_ttl_seconds=30)

        gateway = CacheGateway.from_config(InMemoryCacheStore(), config)

        assert gateway.allow_cache is False
        assert gateway.ttl == 30

    @pytest.mark.asyncio
    async def test_put_then_get(self, gateway):
        """Test a stored value is returned before expiry."""
        key = gateway.make_key("Article", {"status": "live"})

        await gateway.put("total", key, 42)

        assert await gateway.get("total", key) == 42

    @pytest.mark.asyncio
    async def test_namespaces_are_separate(self, gateway):
        """Test the same key in different namespaces does not collide."""
        key = gateway.make_key("Article", {})

        await gateway.put("total", key, 42)

        assert await gateway.get("pagination", key) is None

    @pytest.mark.asyncio
    async def test_entries_expire_after_ttl(self, gateway, clock):
        key = gateway.make_key("Article", {})
        await gateway.put("total", key, 42)

        clock.advance(59)
        assert await gateway.get("total", key) == 42

        clock.advance(1)
        assert await gateway.get("total", key) is None

    @pytest.mark.asyncio
    async def test_put_uses_gateway_ttl(self):
        store = create_mock_cache_store()
        gateway = CacheGateway(store, ttl=45)

        await gateway.put("total", "Article:abc", 3)

        store.put.assert_awaited_once_with("total", "Article:abc", 3, 45)

    @pytest.mark.asyncio
    async def test_put_ttl_override(self):
        store = create_mock_cache_store()
        gateway = CacheGateway(store, ttl=45)

        await gateway.put("total", "Article:abc", 3, ttl=5)

        store.put.assert_awaited_once_with("total", "Article:abc", 3, 5)

    @pytest.mark.asyncio
    async def test_falsy_values_are_hits(self, gateway):
        """Test zero and empty containers are cached values, not misses."""
        await gateway.put("total", "k0", 0)
        await gateway.put("pagination", "k1", {})

        assert await gateway.get("total", "k0") == 0
        assert await gateway.get("pagination", "k1") == {}


class TestCacheBypass:
    """Tests for allow_cache=False."""

    @pytest.mark.asyncio
    async def test_bypass_never_reads_or_writes(self):
        store = create_mock_cache_store()
        gateway = CacheGateway(store, allow_cache=False)

        await gateway.put("total", "Article:abc", 3)
        result = await gateway.get("total", "Article:abc")

        assert result is None
        store.get.assert_not_awaited()
        store.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bypass_ignores_existing_entries(self, cache_store):
        """Test entries written earlier are not served while bypassed."""
        await cache_store.put("total", "Article:abc", 3, 60)
        gateway = CacheGateway(cache_store, allow_cache=False)

        assert await gateway.get("total", "Article:abc") is None


class TestCacheMetrics:
    """Tests for cache lookup and write counters."""

    @pytest.mark.asyncio
    async def test_hit_miss_and_write_counted(self, gateway):
        misses = lookups("total", "miss")
        hits = lookups("total", "hit")
        written = writes("total")

        await gateway.get("total", "Article:metrics")
        await gateway.put("total", "Article:metrics", 1)
        await gateway.get("total", "Article:metrics")

        assert lookups("total", "miss") == misses + 1
        assert lookups("total", "hit") == hits + 1
        assert writes("total") == written + 1

    @pytest.mark.asyncio
    async def test_bypass_counted(self, bypass_gateway):
        bypassed = lookups("pagination", "bypass")

        await bypass_gateway.get("pagination", "Article:metrics")

        assert lookups("pagination", "bypass") == bypassed + 1


class TestGetCacheGateway:
    """Tests for the default Redis-backed gateway."""

    def test_built_from_settings_once(self):
        get_cache_gateway.cache_clear()
        try:
            with patch(
                "docpager.utils.pagination_cache.PaginationConfig.from_settings",
                return_value=PaginationConfig(cache_ttl_seconds=15),
            ) as from_settings:
                first = get_cache_gateway()
                second = get_cache_gateway()

            assert first is second
            assert first.ttl == 15
            from_settings.assert_called_once()
            assert type(first.store).__name__ == "RedisCacheStore"
        finally:
            get_cache_gateway.cache_clear()
