"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for document stores, cache stores and
cache gateways.
"""

import os

import pytest

# Keep test runs independent of a developer's environment
os.environ.setdefault("ALLOW_CACHE", "true")
os.environ.setdefault("CACHE_TTL_SECONDS", "60")

from docpager.storage.memory import InMemoryCacheStore  # noqa: E402
from docpager.utils.pagination_cache import CacheGateway  # noqa: E402
from tests.mocks.store_mocks import (  # noqa: E402
    CountingDocumentStore,
    FakeClock,
    make_documents,
)


@pytest.fixture
def clock():
    """
    Provides a controllable clock.

    Returns:
        FakeClock: Clock starting at a fixed reading
    """
    return FakeClock()


@pytest.fixture
def cache_store(clock):
    """
    Provides an in-memory cache store driven by the fake clock.

    Returns:
        InMemoryCacheStore: Empty cache store
    """
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def gateway(cache_store):
    """
    Provides a cache gateway with the default 60 second TTL.

    Returns:
        CacheGateway: Gateway over the in-memory cache store
    """
    return CacheGateway(cache_store, ttl=60)


@pytest.fixture
def bypass_gateway(cache_store):
    """
    Provides a cache gateway with caching disabled.

    Returns:
        CacheGateway: Gateway that never hits and never writes
    """
    return CacheGateway(cache_store, allow_cache=False)


@pytest.fixture
def article_store():
    """
    Provides a store with articles 1..10 (ids 1-10).

    Returns:
        CountingDocumentStore: Store that records count/find calls
    """
    return CountingDocumentStore(
        make_documents(*range(1, 11), status="live"), name="Article"
    )


@pytest.fixture
def small_store():
    """
    Provides a store with identifiers [10, 9, 8, 7, 6, 5].

    Returns:
        CountingDocumentStore: Store that records count/find calls
    """
    return CountingDocumentStore(
        make_documents(10, 9, 8, 7, 6, 5), name="Article"
    )
