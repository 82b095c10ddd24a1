"""
docpager: offset and cursor pagination for ordered document stores.

Both strategies share one cache gateway: offset pagination caches the total
count, cursor pagination caches whole pages.
"""

from docpager.exceptions import (
    CacheUnavailable,
    InvalidArgument,
    InvalidCursor,
    PaginationError,
    StoreUnavailable,
)
from docpager.schemas.request import (
    CursorPageRequest,
    OffsetPageRequest,
    PaginationConfig,
    SortDirection,
)
from docpager.schemas.response import (
    CursorPageResult,
    OffsetPageResult,
    PageLink,
    PaginationLinks,
)
from docpager.storage.pagination import (
    CursorPaginationStrategy,
    IntegerIdCodec,
    ObjectIdCodec,
    OffsetPaginationStrategy,
    paginate_with_cursor,
    paginate_with_offset,
)
from docpager.utils.pagination_cache import CacheGateway, get_cache_gateway

__all__ = [
    "CacheGateway",
    "CacheUnavailable",
    "CursorPageRequest",
    "CursorPageResult",
    "CursorPaginationStrategy",
    "IntegerIdCodec",
    "InvalidArgument",
    "InvalidCursor",
    "ObjectIdCodec",
    "OffsetPageRequest",
    "OffsetPageResult",
    "OffsetPaginationStrategy",
    "PageLink",
    "PaginationConfig",
    "PaginationError",
    "PaginationLinks",
    "SortDirection",
    "StoreUnavailable",
    "get_cache_gateway",
    "paginate_with_cursor",
    "paginate_with_offset",
]
