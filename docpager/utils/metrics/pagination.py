"""
Prometheus metrics for pagination cache and document store activity.

Metrics are looked up in the default registry before being created, so
reloading this module (test runners, code reloaders) reuses the existing
collectors instead of failing on duplicate registration.
"""

from collections.abc import Sequence

from prometheus_client import REGISTRY, Counter, Histogram


def _registered(name: str):
    # Counters register under both the base name and the _total sample name
    return REGISTRY._names_to_collectors.get(name)


def _counter(name: str, doc: str, labels: list[str]) -> Counter:
    return _registered(name) or Counter(name, doc, labels)


def _histogram(
    name: str, doc: str, labels: list[str], buckets: Sequence[float]
) -> Histogram:
    return _registered(name) or Histogram(name, doc, labels, buckets=buckets)


# Cache Metrics
pagination_cache_lookups_total = _counter(
    "pagination_cache_lookups_total",
    "Total pagination cache lookups",
    ["namespace", "result"],  # result: hit, miss, bypass
)

pagination_cache_writes_total = _counter(
    "pagination_cache_writes_total",
    "Total pagination cache writes",
    ["namespace"],
)

pagination_cache_errors_total = _counter(
    "pagination_cache_errors_total",
    "Total cache store failures degraded to a miss",
    ["operation"],
)

# Document Store Metrics
pagination_store_queries_total = _counter(
    "pagination_store_queries_total",
    "Total document store queries issued by paginators",
    ["operation", "status"],  # operation: count, find; status: success, error
)

pagination_store_query_duration_seconds = _histogram(
    "pagination_store_query_duration_seconds",
    "Document store query duration in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

__all__ = [
    "pagination_cache_lookups_total",
    "pagination_cache_writes_total",
    "pagination_cache_errors_total",
    "pagination_store_queries_total",
    "pagination_store_query_duration_seconds",
]
