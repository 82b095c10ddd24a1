"""
Prometheus metrics for the pagination library.

Metrics are grouped by concern; import them from this package.
"""

from docpager.utils.metrics.pagination import (
    pagination_cache_errors_total,
    pagination_cache_lookups_total,
    pagination_cache_writes_total,
    pagination_store_queries_total,
    pagination_store_query_duration_seconds,
)

__all__ = [
    "pagination_cache_errors_total",
    "pagination_cache_lookups_total",
    "pagination_cache_writes_total",
    "pagination_store_queries_total",
    "pagination_store_query_duration_seconds",
]
