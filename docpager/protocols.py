"""
Protocol classes for the collaborators the paginators depend on.

Protocols define interfaces without requiring explicit inheritance. Any
document store or cache store that implements these methods can be passed
to the paginators, whether it talks to SQL, Redis or plain memory.

Example:
    ```python
    from docpager import paginate_with_cursor
    from docpager.storage.memory import InMemoryDocumentStore

    store = InMemoryDocumentStore([{"id": 1}, {"id": 2}], name="Article")
    page = await paginate_with_cursor(store, {}, None, 20)
    ```
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from docpager.schemas.request import SortDirection

SortSpec = list[tuple[str, SortDirection]]


@runtime_checkable
class DocumentStore(Protocol):
    """
    Protocol for an ordered document store.

    Attributes:
        name: Model or collection identity, used in cache keys.
        id_field: Name of the strictly-ordered unique identifier field.
        document_type: Optional type used to rebuild documents from cached
            JSON data. ``None`` leaves cached documents as mappings.
    """

    name: str
    id_field: str
    document_type: type | None

    async def count(self, filter: dict[str, Any]) -> int:
        """
        Count documents matching the filter.

        Args:
            filter: Normalized filter mapping.

        Returns:
            Non-negative number of matching documents.
        """
        ...

    async def find(
        self,
        filter: dict[str, Any],
        sort: SortSpec | None = None,
        skip: int | None = None,
        limit: int | None = None,
    ) -> Sequence[Any]:
        """
        Fetch documents matching the filter.

        Args:
            filter: Normalized filter mapping.
            sort: Ordered list of (field, direction) pairs, or None for
                the store's natural order.
            skip: Number of leading documents to skip.
            limit: Maximum number of documents to return.

        Returns:
            Ordered sequence of documents.
        """
        ...


@runtime_checkable
class CacheStore(Protocol):
    """
    Protocol for a namespaced key-value store with TTL expiry.

    Expiry is the store's responsibility; callers never delete entries.
    Implementations signal failures by raising ``CacheUnavailable``.
    """

    async def get(self, namespace: str, key: str) -> Any | None:
        """
        Get a cached value.

        Args:
            namespace: Cache namespace.
            key: Cache key within the namespace.

        Returns:
            The cached value, or None if absent or expired.
        """
        ...

    async def put(
        self, namespace: str, key: str, value: Any, ttl_seconds: int
    ) -> None:
        """
        Store a value with a time-to-live.

        Args:
            namespace: Cache namespace.
            key: Cache key within the namespace.
            value: JSON-compatible value to store.
            ttl_seconds: Time-to-live in seconds.
        """
        ...
