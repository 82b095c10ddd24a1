"""
Facade functions for paginating a document store.

These are the entry points used by request handlers. Both build a fresh,
stateless strategy per call; the cache gateway defaults to the process-wide
Redis-backed gateway and can be substituted (for example, with an in-memory
gateway or one created with ``allow_cache=False``).
"""

from collections.abc import Mapping
from typing import Any

from docpager.protocols import DocumentStore
from docpager.schemas.filters import Filter
from docpager.schemas.request import OffsetPageRequest, PaginationConfig
from docpager.schemas.response import CursorPageResult, OffsetPageResult
from docpager.storage.pagination.cursor import CursorPaginationStrategy
from docpager.storage.pagination.identifiers import IdentifierCodec
from docpager.storage.pagination.offset import OffsetPaginationStrategy
from docpager.utils.pagination_cache import CacheGateway, get_cache_gateway


async def paginate_with_offset(
    store: DocumentStore,
    filter: Filter = None,
    options: OffsetPageRequest | Mapping[str, Any] | None = None,
    *,
    cache: CacheGateway | None = None,
) -> OffsetPageResult[Any]:
    """
    Offset pagination over a document store.

    Args:
        store: Document store to query.
        filter: Filter passed through to the store.
        options: page, per_page, sort_field, sort_direction (camelCase keys
            are accepted too). Defaults: page 1, per_page from settings,
            ascending.
        cache: Cache gateway. Defaults to get_cache_gateway().

    Returns:
        OffsetPageResult.

    Example:
        >>> page = await paginate_with_offset(store, {}, {"page": 1, "per_page": 2})
        >>> page.total_pages, page.pagination.model_dump()
        (3, {'next': {'page': 2, 'size': 2}})
    """
    strategy = OffsetPaginationStrategy(
        cache or get_cache_gateway(), PaginationConfig.from_settings()
    )
    return await strategy.paginate(store, filter, options)


async def paginate_with_cursor(
    store: DocumentStore,
    filter: Filter = None,
    cursor: str | None = None,
    page_size: int | None = None,
    *,
    cache: CacheGateway | None = None,
    codec: IdentifierCodec | None = None,
) -> CursorPageResult[Any]:
    """
    Cursor pagination over a document store, newest first.

    Args:
        store: Document store to query.
        filter: Filter passed through to the store.
        cursor: ``next`` from the previous page; None for the first page.
        page_size: Documents per page. Defaults to the configured size.
        cache: Cache gateway. Defaults to get_cache_gateway().
        codec: Cursor codec. Defaults to IntegerIdCodec.

    Returns:
        CursorPageResult.

    Example:
        >>> page = await paginate_with_cursor(store, {}, None, 2)
        >>> [d["id"] for d in page.results], page.next, page.has_next
        ([10, 9], '9', True)
    """
    strategy = CursorPaginationStrategy(
        cache or get_cache_gateway(), codec, PaginationConfig.from_settings()
    )
    return await strategy.paginate(store, filter, cursor, page_size)
