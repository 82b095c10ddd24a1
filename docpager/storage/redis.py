import json
from typing import Any

from pydantic_core import to_jsonable_python
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from docpager.constants import CACHE_KEY_SEPARATOR
from docpager.exceptions import CacheUnavailable
from docpager.logging import logger
from docpager.settings import app_settings


class RedisPool:
    """
    Redis connection pool manager.

    Manages Redis connection instances per database index with connection
    pooling. Each database gets its own connection pool with configurable
    settings.
    """

    __instances: dict[int, Redis] = {}
    __pools: dict[int, ConnectionPool] = {}

    @classmethod
    async def get_instance(cls, db: int = app_settings.PAGINATION_REDIS_DB) -> Redis:
        """
        Get or create a Redis instance for the specified database.

        Args:
            db: Redis database index.

        Returns:
            Redis: Redis instance connected to the specified database
        """
        if db not in cls.__instances:
            cls.__instances[db] = await cls._create_instance(db)
        return cls.__instances[db]

    @classmethod
    async def _create_instance(cls, db: int) -> Redis:
        pool = ConnectionPool.from_url(
            f"redis://{app_settings.REDIS_IP}:{app_settings.REDIS_PORT}",
            db=db,
            encoding="utf-8",
            decode_responses=True,
            max_connections=app_settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=app_settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=app_settings.REDIS_CONNECT_TIMEOUT,
            health_check_interval=app_settings.REDIS_HEALTH_CHECK_INTERVAL,
            retry_on_timeout=app_settings.REDIS_RETRY_ON_TIMEOUT,
        )

        # Store pool for shutdown
        cls.__pools[db] = pool

        logger.info(
            f"Created Redis pool for database {db} "
            f"({app_settings.REDIS_IP}:{app_settings.REDIS_PORT})"
        )
        return Redis.from_pool(pool)

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all Redis connection pools gracefully.

        This should be called during application shutdown to ensure
        all connections are properly closed.
        """
        logger.info("Closing all Redis connection pools...")
        for db, pool in cls.__pools.items():
            try:
                await pool.disconnect()
                logger.info(f"Closed Redis pool for database {db}")
            except (RedisError, OSError) as ex:
                logger.error(f"Error closing Redis pool for database {db}: {ex}")

        cls.__pools.clear()
        cls.__instances.clear()
        logger.info("All Redis connection pools closed")


class RedisCacheStore:
    """
    Cache store backed by Redis.

    Values are stored as JSON under ``"{namespace}:{key}"`` with SETEX, so
    expiry is enforced by Redis. Any Redis, connection or decoding failure
    is raised as CacheUnavailable.

    Example:
        >>> store = RedisCacheStore()
        >>> await store.put("total", "Article:abc", 42, 60)
        >>> await store.get("total", "Article:abc")
        42
    """

    def __init__(self, db: int | None = None) -> None:
        self.db = app_settings.PAGINATION_REDIS_DB if db is None else db

    @staticmethod
    def redis_key(namespace: str, key: str) -> str:
        return f"{namespace}{CACHE_KEY_SEPARATOR}{key}"

    async def _redis(self) -> Redis:
        try:
            return await RedisPool.get_instance(self.db)
        except (RedisError, ConnectionError, TimeoutError, OSError) as ex:
            raise CacheUnavailable(f"Redis connection failed: {ex}") from ex

    async def get(self, namespace: str, key: str) -> Any | None:
        redis = await self._redis()
        try:
            cached = await redis.get(self.redis_key(namespace, key))
        except (RedisError, ConnectionError, TimeoutError) as ex:
            raise CacheUnavailable(f"Redis GET failed: {ex}") from ex

        if cached is None:
            return None

        try:
            return json.loads(cached)
        except json.JSONDecodeError as ex:
            raise CacheUnavailable(f"Invalid cached data format: {ex}") from ex

    async def put(
        self, namespace: str, key: str, value: Any, ttl_seconds: int
    ) -> None:
        serialized = json.dumps(to_jsonable_python(value))
        redis = await self._redis()
        try:
            await redis.setex(
                self.redis_key(namespace, key), ttl_seconds, serialized
            )
        except (RedisError, ConnectionError, TimeoutError) as ex:
            raise CacheUnavailable(f"Redis SETEX failed: {ex}") from ex
