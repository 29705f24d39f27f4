"""Key-value storage backends and the factory that selects one."""

from ..config import Settings
from .base import IKeyValueStore
from .memory_store import MemoryKeyValueStore
from .redis_store import RedisKeyValueStore


def create_store(settings: Settings) -> IKeyValueStore:
    """
    Build the key-value store named by STORAGE_BACKEND.

    Args:
        settings: Application settings

    Returns:
        Unconnected store instance (Redis connects on first use)
    """
    if settings.STORAGE_BACKEND == "redis":
        return RedisKeyValueStore(
            redis_url=settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        )
    return MemoryKeyValueStore()


__all__ = [
    "IKeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "create_store",
]
