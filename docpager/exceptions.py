"""
Exception classes for pagination failures.

Every failure surfaces from the paginator call itself; callers decide how
to present it (for example, mapping it to an HTTP status).
"""


class PaginationError(Exception):
    """Base class for all pagination errors."""

    pass


class InvalidArgument(PaginationError, ValueError):
    """
    A pagination argument failed validation.

    Raised for non-positive or non-integer page, per_page or page_size
    values and for filters that cannot be serialized deterministically.
    Always raised before any store or cache access.
    """

    pass


class InvalidCursor(InvalidArgument):
    """
    Cursor does not decode to a valid identifier.

    Raised before any store or cache access, instead of silently restarting
    from the first page.
    """

    def __init__(self, cursor: str, reason: str | None = None) -> None:
        self.cursor = cursor
        message = f"Invalid cursor: {cursor!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class StoreUnavailable(PaginationError):
    """
    Document store operation failed.

    Raised when a count or find call fails. The original exception is
    chained as ``__cause__``. No retry is attempted and no partial result
    is returned.
    """

    pass


class CacheUnavailable(PaginationError):
    """
    Cache store operation failed.

    Raised by cache store adapters. The cache gateway treats it as a cache
    miss, so it never reaches paginator callers.
    """

    pass
