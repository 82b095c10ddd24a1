"""
Cache gateway for pagination results.

Wraps a cache store with the caching policy used by both paginators:
deterministic key derivation, a fixed TTL, a bypass switch, and graceful
degradation when the cache store fails. Expiry itself is enforced by the
cache store; entries are never invalidated explicitly, so a cached total or
cursor page may be stale for up to one TTL window.
"""

from functools import lru_cache
from typing import Any

from docpager.exceptions import InvalidArgument
from docpager.logging import logger
from docpager.protocols import CacheStore
from docpager.schemas.request import PaginationConfig
from docpager.utils.cache_keys import CacheKeyFactory
from docpager.utils.cache_safe import cache_safe
from docpager.utils.metrics import (
    pagination_cache_lookups_total,
    pagination_cache_writes_total,
)

# Default TTL for pagination caches (1 minute)
DEFAULT_CACHE_TTL = 60


class CacheGateway:
    """
    Policy layer between the paginators and a cache store.

    With ``allow_cache=False`` every lookup reports a miss and every write
    is dropped, so paginators run the same code path with or without a
    cache.

    Example:
        >>> gateway = CacheGateway(InMemoryCacheStore(), ttl=60)
        >>> key = gateway.make_key("Article", {"status": "live"})
        >>> await gateway.put("total", key, 42)
        >>> await gateway.get("total", key)
        42
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        allow_cache: bool = True,
        ttl: int = DEFAULT_CACHE_TTL,
    ) -> None:
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 1:
            raise InvalidArgument(f"Cache TTL must be a positive integer, got {ttl!r}")
        self.store = store
        self.allow_cache = allow_cache
        self.ttl = ttl

    @classmethod
    def from_config(
        cls, store: CacheStore, config: PaginationConfig
    ) -> "CacheGateway":
        return cls(
            store,
            allow_cache=config.allow_cache,
            ttl=config.cache_ttl_seconds,
        )

    @staticmethod
    def make_key(identity: str, *inputs: Any) -> str:
        """Derive the cache key for a model identity and logical inputs."""
        return CacheKeyFactory.compound(identity, *inputs)

    async def get(self, namespace: str, key: str) -> Any | None:
        """
        Look up a cached value.

        Args:
            namespace: Cache namespace (e.g. "total", "pagination").
            key: Key from make_key().

        Returns:
            Cached value, or None on a miss, when caching is disabled, or
            when the cache store fails.
        """
        if not self.allow_cache:
            pagination_cache_lookups_total.labels(
                namespace=namespace, result="bypass"
            ).inc()
            return None

        value = await self._read(namespace, key)
        if value is None:
            pagination_cache_lookups_total.labels(
                namespace=namespace, result="miss"
            ).inc()
            logger.debug(f"Cache miss in {namespace}: {key}")
            return None

        pagination_cache_lookups_total.labels(
            namespace=namespace, result="hit"
        ).inc()
        logger.debug(f"Cache hit in {namespace}: {key}")
        return value

    async def put(
        self, namespace: str, key: str, value: Any, ttl: int | None = None
    ) -> None:
        """
        Store a value under the gateway's TTL.

        Args:
            namespace: Cache namespace.
            key: Key from make_key().
            value: JSON-compatible value.
            ttl: Override for the TTL in seconds (default: gateway TTL).
        """
        if not self.allow_cache:
            return

        ttl = ttl or self.ttl
        if await self._write(namespace, key, value, ttl):
            pagination_cache_writes_total.labels(namespace=namespace).inc()
            logger.debug(f"Cached {namespace}: {key} (TTL: {ttl}s)")

    @cache_safe(fail_value=None, operation_name="cache_get")
    async def _read(self, namespace: str, key: str) -> Any | None:
        return await self.store.get(namespace, key)

    @cache_safe(fail_value=False, operation_name="cache_put")
    async def _write(
        self, namespace: str, key: str, value: Any, ttl: int
    ) -> bool:
        await self.store.put(namespace, key, value, ttl)
        return True


@lru_cache(maxsize=1)
def get_cache_gateway() -> CacheGateway:
    """
    Get the process-wide default gateway backed by Redis.

    Configured from app_settings on first use. The Redis connection itself
    is opened lazily on the first cache operation.
    """
    from docpager.storage.redis import RedisCacheStore

    return CacheGateway.from_config(
        RedisCacheStore(), PaginationConfig.from_settings()
    )
