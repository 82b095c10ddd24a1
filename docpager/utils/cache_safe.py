"""
Decorator for consistent cache-store error handling.

Wraps async methods that talk to the cache store so that failures are
caught, logged uniformly, counted, and replaced by a safe fallback value.
A failing cache therefore behaves like an empty cache and never fails a
pagination call.

Usage::

    from docpager.utils.cache_safe import cache_safe


    class Gateway:
        @cache_safe(fail_value=None, operation_name="cache_get")
        async def get(self, namespace: str, key: str) -> Any | None:
            return await self.store.get(namespace, key)
"""

import functools
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from redis.exceptions import RedisError

from docpager.exceptions import CacheUnavailable
from docpager.logging import logger
from docpager.utils.metrics import pagination_cache_errors_total

F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, Any]])

_LOG_METHODS: dict[str, Callable[..., None]] = {
    "debug": logger.debug,
    "info": logger.info,
    "warning": logger.warning,
    "error": logger.error,
}

_CACHE_ERRORS = (
    CacheUnavailable,
    RedisError,
    ConnectionError,
    TimeoutError,
)


def cache_safe(
    *,
    fail_value: Any = None,
    log_level: str = "error",
    operation_name: str | None = None,
) -> Callable[[F], F]:
    """
    Decorator that catches cache-store errors and returns a fallback value.

    Args:
        fail_value: Value returned when the cache store fails. Defaults to
            ``None`` (reported as a miss).
        log_level: Logging level for error messages (``"debug"``,
            ``"info"``, ``"warning"``, or ``"error"``).
        operation_name: Label used in log messages and the
            ``pagination_cache_errors_total`` metric. Defaults to the
            decorated function's name.

    Returns:
        Decorator that wraps an async function with cache error handling.
    """
    log_fn = _LOG_METHODS.get(log_level, logger.error)

    def decorator(func: F) -> F:
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except _CACHE_ERRORS as exc:
                log_fn(f"Cache error in {op_name}: {exc}")
                pagination_cache_errors_total.labels(operation=op_name).inc()
                return fail_value
            except Exception as exc:  # noqa: BLE001
                log_fn(f"Unexpected error in {op_name}: {exc}")
                pagination_cache_errors_total.labels(operation=op_name).inc()
                return fail_value

        return wrapper  # type: ignore[return-value]

    return decorator
