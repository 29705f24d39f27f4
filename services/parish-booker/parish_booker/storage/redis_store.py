"""
Persistent key-value store using Redis.

Values are kept as UTF-8 JSON strings under their logical keys, so the
stored layout can be inspected with any Redis client.
"""

from typing import Optional

import redis.asyncio as redis
import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..domain.exceptions import StorageBackendException
from .base import IKeyValueStore

logger = structlog.get_logger(__name__)


class RedisKeyValueStore(IKeyValueStore):
    """
    Key-value store backed by Redis.

    Supports:
    - Lazy connection on first use
    - Connection pooling
    - Backend errors surfaced as StorageBackendException
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        max_connections: int = 10,
        socket_timeout: int = 5,
        socket_connect_timeout: int = 5,
        client: Optional[Redis] = None,
    ):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL
            max_connections: Maximum connections in pool
            socket_timeout: Socket read/write timeout
            socket_connect_timeout: Socket connection timeout
            client: Pre-built client to use instead of connecting by URL
        """
        self.redis_url = redis_url
        self.max_connections = max_connections
        self.socket_timeout = socket_timeout
        self.socket_connect_timeout = socket_connect_timeout
        self.client: Optional[Redis] = client

    async def connect(self) -> None:
        """Establish Redis connection with connection pooling."""
        if self.client is not None:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                max_connections=self.max_connections,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_connect_timeout,
                decode_responses=True,
                encoding="utf-8",
            )
            await self.client.ping()

            logger.info(
                "redis_store_connected",
                redis_url=self.redis_url.split("@")[-1],
                max_connections=self.max_connections,
            )
        except RedisError as e:
            logger.error("redis_store_connect_failed", error=str(e))
            self.client = None
            raise StorageBackendException("connect", str(e)) from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("redis_store_disconnected")

    async def _get_client(self) -> Redis:
        if self.client is None:
            await self.connect()
        return self.client

    async def get(self, key: str) -> Optional[str]:
        client = await self._get_client()
        try:
            value = await client.get(key)
        except RedisError as e:
            logger.error("redis_store_get_failed", key=key, error=str(e))
            raise StorageBackendException("get", str(e)) from e

        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        client = await self._get_client()
        try:
            await client.set(key, value)
        except RedisError as e:
            logger.error("redis_store_set_failed", key=key, error=str(e))
            raise StorageBackendException("set", str(e)) from e

    async def remove(self, key: str) -> None:
        client = await self._get_client()
        try:
            await client.delete(key)
        except RedisError as e:
            logger.error("redis_store_remove_failed", key=key, error=str(e))
            raise StorageBackendException("remove", str(e)) from e

    async def exists(self, key: str) -> bool:
        client = await self._get_client()
        try:
            return await client.exists(key) > 0
        except RedisError as e:
            logger.error("redis_store_exists_failed", key=key, error=str(e))
            raise StorageBackendException("exists", str(e)) from e

    async def ping(self) -> bool:
        """
        Check Redis health.

        Returns:
            True if healthy, False otherwise
        """
        try:
            client = await self._get_client()
            await client.ping()
            return True
        except (RedisError, StorageBackendException) as e:
            logger.error("redis_store_health_check_failed", error=str(e))
            return False
