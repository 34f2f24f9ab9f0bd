from unittest.mock import AsyncMock, patch

import pytest
import redis

from redisbank.core.exceptions import StoreError
from redisbank.storage import RedisPrimitiveStore


class TestRedisPrimitiveStore:
    """Tests for the Redis command mapping, against a mocked client."""

    def setup_method(self):
        self.client = AsyncMock()
        self.client.ping.return_value = True
        self.store = RedisPrimitiveStore(client=self.client)

    @pytest.mark.asyncio
    async def test_connect_pings(self):
        await self.store.connect()
        self.client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_builds_client_from_params(self):
        store = RedisPrimitiveStore(host="db.local", port=6380, database=2)
        with patch("redisbank.storage.redis_store.aioredis.Redis") as redis_cls:
            redis_cls.return_value = self.client
            await store.connect()
        redis_cls.assert_called_once_with(
            host="db.local", port=6380, db=2, decode_responses=True)

    @pytest.mark.asyncio
    async def test_connect_failure_wraps_error(self):
        self.client.ping.side_effect = redis.ConnectionError("refused")
        with pytest.raises(StoreError, match="Cannot connect"):
            await self.store.connect()

    @pytest.mark.asyncio
    async def test_retry_after_failed_connect_keeps_given_client(self):
        self.client.ping.side_effect = [redis.ConnectionError("refused"), True]
        with patch("redisbank.storage.redis_store.aioredis.Redis") as redis_cls:
            with pytest.raises(StoreError):
                await self.store.connect()
            await self.store.connect()

        redis_cls.assert_not_called()
        assert self.client.ping.await_count == 2
        assert "disconnected" not in str(self.store)

    @pytest.mark.asyncio
    async def test_reconnect_after_close_keeps_given_client(self):
        await self.store.connect()
        await self.store.close()
        await self.store.connect()
        assert self.client.ping.await_count == 2

    @pytest.mark.asyncio
    async def test_close(self):
        await self.store.close()
        self.client.aclose.assert_awaited_once()
        assert "disconnected" in str(self.store)

    @pytest.mark.asyncio
    async def test_command_without_client(self):
        store = RedisPrimitiveStore()
        with pytest.raises(StoreError, match="without a redis connection"):
            await store.get("k")

    @pytest.mark.asyncio
    async def test_get_and_set(self):
        self.client.get.return_value = '{"a":1}'
        assert await self.store.get("widget:w1") == '{"a":1}'
        self.client.get.assert_awaited_once_with("widget:w1")

        await self.store.set("widget:w1", "{}")
        self.client.set.assert_awaited_once_with("widget:w1", "{}")

    @pytest.mark.asyncio
    async def test_set_if_absent_uses_nx(self):
        self.client.set.return_value = True
        assert await self.store.set_if_absent("widget:w1", "{}") is True
        self.client.set.assert_awaited_once_with("widget:w1", "{}", nx=True)

        self.client.set.return_value = None
        assert await self.store.set_if_absent("widget:w1", "{}") is False

    @pytest.mark.asyncio
    async def test_delete_returns_count(self):
        self.client.delete.return_value = 0
        assert await self.store.delete("widget:w1") == 0

    @pytest.mark.asyncio
    async def test_multi_get(self):
        self.client.mget.return_value = ["1", None]
        assert await self.store.multi_get(["a", "b"]) == ["1", None]
        self.client.mget.assert_awaited_once_with(["a", "b"])

    @pytest.mark.asyncio
    async def test_multi_get_empty_skips_round_trip(self):
        assert await self.store.multi_get([]) == []
        self.client.mget.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_set_commands(self):
        self.client.sinter.return_value = {"widget:b", "widget:a"}
        self.client.smembers.return_value = {"widget:a"}

        await self.store.set_add("idx", "widget:a")
        await self.store.set_remove("idx", "widget:a")
        assert await self.store.set_intersect(["i1", "i2"]) == ["widget:a", "widget:b"]
        assert await self.store.set_members("idx") == ["widget:a"]

        self.client.sadd.assert_awaited_once_with("idx", "widget:a")
        self.client.srem.assert_awaited_once_with("idx", "widget:a")
        self.client.sinter.assert_awaited_once_with(["i1", "i2"])

    @pytest.mark.asyncio
    async def test_keys_and_counters(self):
        self.client.keys.return_value = ["widget:1"]
        self.client.incr.return_value = 1
        self.client.decr.return_value = 0

        assert await self.store.keys_matching("widget:*") == ["widget:1"]
        assert await self.store.increment("counter:hits") == 1
        assert await self.store.decrement("counter:hits") == 0

    @pytest.mark.asyncio
    async def test_redis_error_is_wrapped_with_key(self):
        self.client.get.side_effect = redis.TimeoutError("slow")
        with pytest.raises(StoreError) as exc_info:
            await self.store.get("widget:w1")
        assert exc_info.value.key == "widget:w1"
        assert isinstance(exc_info.value.__cause__, redis.TimeoutError)
