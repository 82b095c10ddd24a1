"""
Cursor-based pagination strategy (stable, high-performance).

Implements newest-first traversal using the last seen identifier as the
cursor. Best for feeds and infinite scroll where skip cost and stable
continuation matter more than showing total pages.
"""

from typing import Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from docpager.constants import CURSOR_CACHE_NAMESPACE
from docpager.exceptions import InvalidCursor
from docpager.logging import logger
from docpager.protocols import DocumentStore
from docpager.schemas.filters import Filter, add_cursor_condition, convert_filters
from docpager.schemas.request import (
    CursorPageRequest,
    PaginationConfig,
    validate_request,
)
from docpager.schemas.response import CursorPageResult
from docpager.storage.pagination.identifiers import IdentifierCodec, IntegerIdCodec
from docpager.storage.pagination.query_builder import (
    build_cursor_sort,
    run_store_query,
)
from docpager.utils.documents import get_field
from docpager.utils.pagination_cache import CacheGateway


class CursorPaginationStrategy:
    """
    Cursor-based pagination using the last item identifier.

    Pros:
    - No skip cost, regardless of dataset size
    - No duplicates/skips when documents are inserted during traversal
    - Identical requests (e.g. client retries) served from cache

    Cons:
    - Cannot jump to arbitrary pages (only forward)
    - No total count
    - Requires a unique, strictly-ordered identifier field
    - A cached page may point ``next`` at documents deleted since it was
      cached, for up to one TTL window

    The whole page response, including derived cursors, is cached as one
    unit keyed by (model, filter, cursor, page_size).

    Example:
        ```python
        strategy = CursorPaginationStrategy(CacheGateway(InMemoryCacheStore()))

        # First page
        page = await strategy.paginate(store, {}, None, 20)

        # Next page using cursor from first page
        if page.has_next:
            page2 = await strategy.paginate(store, {}, page.next, 20)
        ```
    """

    def __init__(
        self,
        cache: CacheGateway,
        codec: IdentifierCodec | None = None,
        config: PaginationConfig | None = None,
    ):
        """
        Initialize cursor pagination strategy.

        Args:
            cache: Gateway used for whole-page caching.
            codec: Cursor codec. Defaults to IntegerIdCodec.
            config: Pagination defaults. Defaults to PaginationConfig().
        """
        self.cache = cache
        self.codec = codec or IntegerIdCodec()
        self.config = config or PaginationConfig()

    def build_request(
        self, cursor: str | None, page_size: int | None
    ) -> CursorPageRequest:
        """
        Validate cursor request fields.

        Raises:
            InvalidCursor: If the cursor is not a string.
            InvalidArgument: If page_size is not a positive integer.
        """
        if cursor is not None and not isinstance(cursor, str):
            raise InvalidCursor(repr(cursor), "cursor must be a string")
        if page_size is None:
            page_size = self.config.default_page_size
        return validate_request(
            CursorPageRequest, {"cursor": cursor, "page_size": page_size}
        )

    async def paginate(
        self,
        store: DocumentStore,
        filter: Filter = None,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> CursorPageResult[Any]:
        """
        Fetch the page of documents below the cursor.

        Args:
            store: Document store to query.
            filter: Filter passed through to the store.
            cursor: Identifier of the last document on the previous page.
                None or "" starts from the newest document.
            page_size: Number of documents per page.

        Returns:
            CursorPageResult. An empty page with ``has_next=False`` marks
            the end of the traversal.

        Raises:
            InvalidCursor: If the cursor does not decode (before I/O).
            InvalidArgument: If page_size or filter is invalid (before I/O).
            StoreUnavailable: If the find query fails.
        """
        request = self.build_request(cursor, page_size)
        cursor_id = (
            self.codec.decode(request.cursor) if request.cursor else None
        )
        filter_dict = convert_filters(filter)
        cache_key = self.cache.make_key(
            store.name, filter_dict, request.cursor, request.page_size
        )

        cached = await self.cache.get(CURSOR_CACHE_NAMESPACE, cache_key)
        if cached is not None:
            restored = self._restore(store, cached)
            if restored is not None:
                return restored

        query_filter = filter_dict
        if cursor_id is not None:
            query_filter = add_cursor_condition(
                filter_dict, store.id_field, cursor_id
            )

        # Fetch page_size + 1 to detect if there are more results
        documents = list(
            await run_store_query(
                store,
                "find",
                lambda: store.find(
                    query_filter,
                    sort=build_cursor_sort(store.id_field),
                    limit=request.page_size + 1,
                ),
            )
        )

        has_next = len(documents) > request.page_size
        if has_next:
            documents = documents[: request.page_size]

        next_cursor = None
        if has_next and documents:
            next_cursor = self.codec.encode(
                get_field(documents[-1], store.id_field)
            )

        result = CursorPageResult(
            results=documents,
            next=next_cursor,
            previous=request.cursor,
            has_next=has_next,
        )

        await self._store(cache_key, result)
        return result

    async def _store(
        self, cache_key: str, result: CursorPageResult[Any]
    ) -> None:
        try:
            payload = result.model_dump(mode="json")
        except PydanticSerializationError as ex:
            logger.warning(f"Cursor page not cacheable: {ex}")
            return
        await self.cache.put(CURSOR_CACHE_NAMESPACE, cache_key, payload)

    def _restore(
        self, store: DocumentStore, cached: Any
    ) -> CursorPageResult[Any] | None:
        """Rebuild a cached page, or return None to treat it as a miss."""
        try:
            page = CursorPageResult.model_validate(cached)
            document_type = getattr(store, "document_type", None)
            if document_type is not None:
                page.results = [
                    document_type.model_validate(d)
                    if hasattr(document_type, "model_validate")
                    else document_type(**d)
                    for d in page.results
                ]
            return page
        except (ValidationError, TypeError) as ex:
            logger.warning(f"Ignoring invalid cached page for {store.name}: {ex}")
            return None
