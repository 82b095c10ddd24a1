"""
Offset-based pagination strategy (traditional page numbers).

Implements page/per_page pagination with skip/limit. Best for user-facing
interfaces where users expect "Page 1, 2, 3..." navigation and a total.
"""

import math
from collections.abc import Mapping
from typing import Any

from docpager.constants import COUNT_CACHE_NAMESPACE
from docpager.exceptions import InvalidArgument
from docpager.logging import logger
from docpager.protocols import DocumentStore
from docpager.schemas.filters import Filter, convert_filters
from docpager.schemas.request import (
    OffsetPageRequest,
    PaginationConfig,
    validate_request,
)
from docpager.schemas.response import OffsetPageResult, PageLink, PaginationLinks
from docpager.storage.pagination.query_builder import (
    build_offset_sort,
    describe_filter,
    run_store_query,
)
from docpager.utils.pagination_cache import CacheGateway


def build_pagination_links(
    page: int, per_page: int, total_pages: int
) -> PaginationLinks:
    """
    Build next/prev links for an offset page.

    ``next`` is always present; its page is None once ``page`` reaches
    ``total_pages``. ``prev`` is None on the first page.

    Example:
        >>> build_pagination_links(1, 2, 3).model_dump()
        {'next': {'page': 2, 'size': 2}}
    """
    return PaginationLinks(
        next=PageLink(
            page=page + 1 if page < total_pages else None, size=per_page
        ),
        prev=PageLink(page=page - 1, size=per_page) if page > 1 else None,
    )


class OffsetPaginationStrategy:
    """
    Traditional offset-based pagination (page 1, 2, 3...).

    Pros:
    - User-friendly (page numbers)
    - Shows total pages
    - Allows jumping to any page
    - Count queries cached per (model, filter)

    Cons:
    - O(n) performance for large offsets (store must skip all rows)
    - Inconsistent results with concurrent inserts/deletes (duplicates/gaps)
    - Cached totals may be stale for up to one TTL window

    Only the total is cached; page data is fetched fresh on every call.

    Example:
        ```python
        strategy = OffsetPaginationStrategy(CacheGateway(InMemoryCacheStore()))
        page = await strategy.paginate(
            store, {"status": "live"}, {"page": 2, "per_page": 20}
        )
        print(f"Page {page.page} of {page.total_pages}")
        ```
    """

    def __init__(
        self,
        cache: CacheGateway,
        config: PaginationConfig | None = None,
    ):
        """
        Initialize offset pagination strategy.

        Args:
            cache: Gateway used for the total count cache.
            config: Pagination defaults. Defaults to PaginationConfig().
        """
        self.cache = cache
        self.config = config or PaginationConfig()

    def build_request(
        self, options: OffsetPageRequest | Mapping[str, Any] | None
    ) -> OffsetPageRequest:
        """
        Validate page options, filling in the configured per_page default.

        Raises:
            InvalidArgument: If page or per_page is not a positive integer
                or the options are of an unsupported type.
        """
        if isinstance(options, OffsetPageRequest):
            return options
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise InvalidArgument(
                f"Offset options must be a mapping, got {type(options).__name__}"
            )

        data = dict(options)
        if "per_page" not in data and "perPage" not in data:
            data["per_page"] = self.config.default_per_page
        return validate_request(OffsetPageRequest, data)

    async def paginate(
        self,
        store: DocumentStore,
        filter: Filter = None,
        options: OffsetPageRequest | Mapping[str, Any] | None = None,
    ) -> OffsetPageResult[Any]:
        """
        Fetch one offset page.

        Args:
            store: Document store to query.
            filter: Filter passed through to the store.
            options: Page request or mapping with page, per_page,
                sort_field and sort_direction.

        Returns:
            OffsetPageResult with results, totals and next/prev links.

        Raises:
            InvalidArgument: If options or filter are invalid (before I/O).
            StoreUnavailable: If the count or find query fails.
        """
        request = self.build_request(options)
        filter_dict = convert_filters(filter)
        cache_key = self.cache.make_key(store.name, filter_dict)

        total = await self._get_total(store, filter_dict, cache_key)

        results = await run_store_query(
            store,
            "find",
            lambda: store.find(
                filter_dict,
                sort=build_offset_sort(request, store.id_field),
                skip=request.skip,
                limit=request.per_page,
            ),
        )

        total_pages = math.ceil(total / request.per_page)

        return OffsetPageResult(
            results=list(results),
            page=request.page,
            per_page=request.per_page,
            total=total,
            total_pages=total_pages,
            pagination=build_pagination_links(
                request.page, request.per_page, total_pages
            ),
        )

    async def _get_total(
        self,
        store: DocumentStore,
        filter_dict: dict[str, Any],
        cache_key: str,
    ) -> int:
        cached_total = await self.cache.get(COUNT_CACHE_NAMESPACE, cache_key)
        if (
            isinstance(cached_total, int)
            and not isinstance(cached_total, bool)
            and cached_total >= 0
        ):
            return cached_total

        if cached_total is not None:
            logger.warning(
                f"Ignoring invalid cached total for {store.name}: {cached_total!r}"
            )

        total = await run_store_query(
            store, "count", lambda: store.count(filter_dict)
        )
        logger.debug(
            f"Counted {total} {store.name} documents "
            f"(filters: {describe_filter(filter_dict)})"
        )

        await self.cache.put(COUNT_CACHE_NAMESPACE, cache_key, total)
        return total
