"""
Shared store-query utilities for pagination strategies.

Wraps document store calls with timing, metrics and the error mapping that
is common to both strategies.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from docpager.exceptions import PaginationError, StoreUnavailable
from docpager.logging import logger
from docpager.protocols import DocumentStore, SortSpec
from docpager.schemas.request import OffsetPageRequest, SortDirection
from docpager.utils.metrics import (
    pagination_store_queries_total,
    pagination_store_query_duration_seconds,
)

R = TypeVar("R")


async def run_store_query(
    store: DocumentStore,
    operation: str,
    call: Callable[[], Awaitable[R]],
) -> R:
    """
    Run one document store call.

    Args:
        store: The store being queried (used for logging).
        operation: Operation label, "count" or "find".
        call: Zero-argument coroutine function performing the query.

    Returns:
        Whatever the store call returned.

    Raises:
        StoreUnavailable: If the store raised anything other than a
            PaginationError; the original exception is chained.
        PaginationError: Re-raised unchanged when the store raised one.
    """
    start = time.perf_counter()
    try:
        result = await call()
    except PaginationError:
        pagination_store_queries_total.labels(
            operation=operation, status="error"
        ).inc()
        raise
    except Exception as ex:
        pagination_store_queries_total.labels(
            operation=operation, status="error"
        ).inc()
        logger.error(f"Store {operation} failed for {store.name}: {ex}")
        raise StoreUnavailable(
            f"Store {operation} failed for {store.name}: {ex}"
        ) from ex
    finally:
        pagination_store_query_duration_seconds.labels(
            operation=operation
        ).observe(time.perf_counter() - start)

    pagination_store_queries_total.labels(
        operation=operation, status="success"
    ).inc()
    return result


def build_offset_sort(
    request: OffsetPageRequest, id_field: str
) -> SortSpec | None:
    """
    Build the sort for an offset page.

    The identifier is appended as a tie-breaker in the same direction, so
    pages stay disjoint when the sort field has duplicate values.

    Example:
        >>> build_offset_sort(OffsetPageRequest(sort_field="title"), "id")
        [('title', <SortDirection.ASC: 'asc'>), ('id', <SortDirection.ASC: 'asc'>)]
    """
    if not request.sort_field:
        return None

    sort = [(request.sort_field, request.sort_direction)]
    if request.sort_field != id_field:
        sort.append((id_field, request.sort_direction))
    return sort


def build_cursor_sort(id_field: str) -> SortSpec:
    """Cursor traversal is always newest-first by identifier."""
    return [(id_field, SortDirection.DESC)]


def describe_filter(filter: dict[str, Any]) -> str:
    return ", ".join(sorted(filter)) or "all"
