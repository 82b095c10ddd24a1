"""
Pagination strategies for ordered document stores.

This package separates the two pagination algorithms (offset-based,
cursor-based) into distinct, testable classes that share one cache gateway.

Example:
    Using the facade functions:
    ```python
    from docpager.storage.pagination import (
        paginate_with_cursor,
        paginate_with_offset,
    )

    # Offset pagination
    page = await paginate_with_offset(store, {"status": "live"}, {"page": 2})

    # Cursor pagination
    page = await paginate_with_cursor(store, {"status": "live"}, "9", 20)
    ```

    Using strategies directly:
    ```python
    from docpager.storage.pagination import OffsetPaginationStrategy
    from docpager.utils.pagination_cache import CacheGateway

    strategy = OffsetPaginationStrategy(CacheGateway(cache_store))
    page = await strategy.paginate(store, {}, {"page": 1, "per_page": 20})
    ```
"""

from docpager.storage.pagination.api import (
    paginate_with_cursor,
    paginate_with_offset,
)
from docpager.storage.pagination.cursor import CursorPaginationStrategy
from docpager.storage.pagination.identifiers import (
    IdentifierCodec,
    IntegerIdCodec,
    ObjectIdCodec,
)
from docpager.storage.pagination.offset import OffsetPaginationStrategy

__all__ = [
    "CursorPaginationStrategy",
    "IdentifierCodec",
    "IntegerIdCodec",
    "ObjectIdCodec",
    "OffsetPaginationStrategy",
    "paginate_with_cursor",
    "paginate_with_offset",
]
