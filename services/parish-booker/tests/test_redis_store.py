"""
Tests for the Redis key-value store.

The Redis client is mocked; no server is needed.
"""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from parish_booker.domain.exceptions import StorageBackendException
from parish_booker.storage.redis_store import RedisKeyValueStore


@pytest.fixture
def mock_redis():
    """Create mock Redis client."""
    return AsyncMock()


@pytest.fixture
def redis_store(mock_redis):
    """Create Redis store with mock client."""
    return RedisKeyValueStore(client=mock_redis)


class TestRedisStore:
    """Test Redis store operations."""

    def test_initialization(self):
        """Test store keeps its connection parameters."""
        store = RedisKeyValueStore(redis_url="redis://localhost:6379/1", max_connections=5)
        assert store.redis_url == "redis://localhost:6379/1"
        assert store.max_connections == 5
        assert store.client is None

    @pytest.mark.asyncio
    async def test_get_hit(self, redis_store, mock_redis):
        """Test get returns the stored string."""
        mock_redis.get.return_value = "[]"

        assert await redis_store.get("app_rooms") == "[]"
        mock_redis.get.assert_called_once_with("app_rooms")

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, redis_store, mock_redis):
        """Test byte responses are decoded as UTF-8."""
        mock_redis.get.return_value = '["Salón"]'.encode("utf-8")

        assert await redis_store.get("k") == '["Salón"]'

    @pytest.mark.asyncio
    async def test_get_miss(self, redis_store, mock_redis):
        """Test missing key reads as None."""
        mock_redis.get.return_value = None

        assert await redis_store.get("missing") is None

    @pytest.mark.asyncio
    async def test_set(self, redis_store, mock_redis):
        """Test set stores without expiry."""
        await redis_store.set("app_config", "{}")

        mock_redis.set.assert_called_once_with("app_config", "{}")

    @pytest.mark.asyncio
    async def test_remove(self, redis_store, mock_redis):
        """Test remove deletes the key."""
        await redis_store.remove("app_current_user")

        mock_redis.delete.assert_called_once_with("app_current_user")

    @pytest.mark.asyncio
    async def test_exists(self, redis_store, mock_redis):
        """Test exists maps the integer reply to bool."""
        mock_redis.exists.return_value = 1
        assert await redis_store.exists("k") is True

        mock_redis.exists.return_value = 0
        assert await redis_store.exists("k") is False


class TestRedisStoreErrors:
    """Test backend failures are surfaced."""

    @pytest.mark.asyncio
    async def test_get_error(self, redis_store, mock_redis):
        """Test Redis errors on get raise StorageBackendException."""
        mock_redis.get.side_effect = RedisConnectionError("down")

        with pytest.raises(StorageBackendException) as exc_info:
            await redis_store.get("k")
        assert exc_info.value.details["operation"] == "get"
        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_set_error(self, redis_store, mock_redis):
        """Test Redis errors on set raise StorageBackendException."""
        mock_redis.set.side_effect = RedisConnectionError("down")

        with pytest.raises(StorageBackendException):
            await redis_store.set("k", "v")

    @pytest.mark.asyncio
    async def test_remove_error(self, redis_store, mock_redis):
        """Test Redis errors on remove raise StorageBackendException."""
        mock_redis.delete.side_effect = RedisConnectionError("down")

        with pytest.raises(StorageBackendException):
            await redis_store.remove("k")

    @pytest.mark.asyncio
    async def test_ping_failure(self, redis_store, mock_redis):
        """Test health check reports False on error."""
        mock_redis.ping.side_effect = RedisConnectionError("down")

        assert await redis_store.ping() is False


class TestRedisStoreLifecycle:
    """Test connection lifecycle."""

    @pytest.mark.asyncio
    async def test_connect_lazily(self, mock_redis):
        """Test first use connects via from_url."""
        store = RedisKeyValueStore(redis_url="redis://localhost:6379/0")
        mock_redis.get.return_value = None

        with patch(
            "parish_booker.storage.redis_store.redis.from_url", return_value=mock_redis
        ) as from_url:
            assert await store.get("k") is None

        from_url.assert_called_once()
        assert from_url.call_args.kwargs["decode_responses"] is True
        mock_redis.ping.assert_awaited_once()
        assert store.client is mock_redis

    @pytest.mark.asyncio
    async def test_connect_failure(self, mock_redis):
        """Test failed ping on connect raises and leaves no client."""
        store = RedisKeyValueStore()
        mock_redis.ping.side_effect = RedisConnectionError("refused")

        with patch(
            "parish_booker.storage.redis_store.redis.from_url", return_value=mock_redis
        ):
            with pytest.raises(StorageBackendException):
                await store.connect()

        assert store.client is None

    @pytest.mark.asyncio
    async def test_close(self, redis_store, mock_redis):
        """Test close releases the client."""
        await redis_store.close()

        mock_redis.aclose.assert_awaited_once()
        assert redis_store.client is None
