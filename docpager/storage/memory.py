"""
In-memory implementations of the cache store and document store protocols.

Useful for single-process deployments, local development and tests. The
cache store keeps values per namespace with per-entry expiry and LRU
eviction; the document store evaluates the same filter language as the SQL
adapter against a list of documents.
"""

import asyncio
import copy
import operator
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from docpager.exceptions import InvalidArgument
from docpager.logging import logger
from docpager.protocols import SortSpec
from docpager.schemas.request import SortDirection
from docpager.utils.documents import get_field


class CacheEntry:
    """
    Cache entry with value and expiration time.

    Attributes:
        value: Cached value.
        expires_at: Clock reading after which the entry is expired.
    """

    __slots__ = ("value", "expires_at")

    def __init__(self, value: Any, expires_at: float) -> None:
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryCacheStore:
    """
    Namespaced in-memory cache with TTL expiry and LRU eviction.

    Values are deep-copied on write and on read, so callers never share
    state with a cache entry. Expired entries are dropped lazily on read.
    The clock is injectable so expiry can be tested without sleeping.

    Example:
        >>> store = InMemoryCacheStore(max_entries=1000)
        >>> await store.put("total", "Article:abc", 42, 60)
        >>> await store.get("total", "Article:abc")
        42
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[tuple[str, str], CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, namespace: str, key: str) -> Any | None:
        async with self._lock:
            entry = self._entries.get((namespace, key))
            if entry is None:
                return None

            if entry.is_expired(self._clock()):
                del self._entries[(namespace, key)]
                return None

            self._entries.move_to_end((namespace, key))
            return copy.deepcopy(entry.value)

    async def put(
        self, namespace: str, key: str, value: Any, ttl_seconds: int
    ) -> None:
        async with self._lock:
            self._entries[(namespace, key)] = CacheEntry(
                copy.deepcopy(value), self._clock() + ttl_seconds
            )
            self._entries.move_to_end((namespace, key))

            # Evict least recently used entry if cache is full
            if len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted memory cache entry: {evicted}")

    def __len__(self) -> int:
        return len(self._entries)


def _ilike(actual: Any, expected: str) -> bool:
    return isinstance(actual, str) and expected.lower() in actual.lower()


FILTER_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": operator.eq,
    "$ne": operator.ne,
    "$lt": operator.lt,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$in": lambda actual, options: actual in options,
}


def matches(document: Any, filter: dict[str, Any]) -> bool:
    """
    Check a document against a filter.

    String values match case-insensitively as substrings, lists and tuples
    match by membership, operator mappings apply every operator, and any
    other value matches by equality. Incomparable values never match.

    Raises:
        InvalidArgument: If an operator mapping uses an unknown operator.
    """
    for field, expected in filter.items():
        actual = get_field(document, field)

        if isinstance(expected, dict):
            for op_name, operand in expected.items():
                op = FILTER_OPERATORS.get(op_name)
                if op is None:
                    raise InvalidArgument(
                        f"Unsupported filter operator {op_name!r} on {field}"
                    )
                try:
                    if not op(actual, operand):
                        return False
                except TypeError:
                    return False
        elif isinstance(expected, (list, tuple)):
            if actual not in expected:
                return False
        elif isinstance(expected, str):
            if not _ilike(actual, expected):
                return False
        elif actual != expected:
            return False

    return True


class InMemoryDocumentStore:
    """
    Ordered document store over an in-memory list.

    Documents may be mappings or attribute objects. The collection can be
    mutated between calls with insert() and delete() to exercise
    concurrent-mutation behavior.

    Example:
        >>> store = InMemoryDocumentStore(
        ...     [{"id": i, "status": "live"} for i in range(1, 6)],
        ...     name="Article",
        ... )
        >>> await store.count({"status": "live"})
        5
    """

    def __init__(
        self,
        documents: Iterable[Any] = (),
        name: str = "Document",
        id_field: str = "id",
        document_type: type | None = None,
    ) -> None:
        self.name = name
        self.id_field = id_field
        self.document_type = document_type
        self._documents: list[Any] = list(documents)

    def insert(self, document: Any) -> None:
        self._documents.append(document)

    def delete(self, identifier: Any) -> bool:
        before = len(self._documents)
        self._documents = [
            d
            for d in self._documents
            if get_field(d, self.id_field) != identifier
        ]
        return len(self._documents) < before

    async def count(self, filter: dict[str, Any]) -> int:
        return sum(1 for d in self._documents if matches(d, filter))

    async def find(
        self,
        filter: dict[str, Any],
        sort: SortSpec | None = None,
        skip: int | None = None,
        limit: int | None = None,
    ) -> Sequence[Any]:
        results = [d for d in self._documents if matches(d, filter)]

        # Stable multi-key sort: apply keys from least to most significant
        for field, direction in reversed(sort or []):
            results.sort(
                key=lambda d: get_field(d, field),
                reverse=direction == SortDirection.DESC,
            )

        start = skip or 0
        end = start + limit if limit is not None else None
        return results[start:end]
