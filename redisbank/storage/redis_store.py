"""
Redis-backed primitive store.

Talks to one Redis database through redis-py's asyncio client and maps
the databank primitives one-to-one onto Redis commands.
"""

import logging
from typing import Any, Optional, Sequence

import redis
import redis.asyncio as aioredis

from ..core.exceptions import StoreError
from .interfaces import PrimitiveStore

logger = logging.getLogger(__name__)


class RedisPrimitiveStore(PrimitiveStore):
    """Primitive store over a single Redis connection pool."""

    def __init__(self, host: str = "127.0.0.1", port: int = 6379, database: int = 0,
                 client: Optional[aioredis.Redis] = None):
        """
        Args:
            host: Redis host
            port: Redis port
            database: Redis logical database number
            client: Pre-built client, used instead of creating one on connect
        """
        self.host = host
        self.port = port
        self.database = database
        self._injected = client
        self._client: Optional[aioredis.Redis] = client

    async def connect(self) -> None:
        if self._client is None:
            self._client = self._injected
        if self._client is None:
            self._client = aioredis.Redis(
                host=self.host,
                port=self.port,
                db=self.database,
                decode_responses=True,
            )
        try:
            await self._client.ping()
        except redis.RedisError as e:
            self._client = None
            raise StoreError(
                f"Cannot connect to redis://{self.host}:{self.port}/{self.database}: {e}") from e
        logger.info("Connected to redis://%s:%s/%s", self.host, self.port, self.database)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            await client.aclose()
        except redis.RedisError as e:
            raise StoreError(f"Error closing redis connection: {e}") from e
        logger.info("Disconnected from redis://%s:%s/%s", self.host, self.port, self.database)

    async def _run(self, command: str, key: Optional[str], *args: Any, **kwargs: Any) -> Any:
        if self._client is None:
            raise StoreError(f"{command.upper()} issued without a redis connection", key=key)
        try:
            return await getattr(self._client, command)(*args, **kwargs)
        except redis.RedisError as e:
            logger.warning("Redis %s failed on %s: %s", command.upper(), key, e)
            raise StoreError(f"Redis {command.upper()} failed: {e}", key=key) from e

    async def get(self, key: str) -> Optional[str]:
        return await self._run("get", key, key)

    async def set(self, key: str, value: str) -> None:
        await self._run("set", key, key, value)

    async def set_if_absent(self, key: str, value: str) -> bool:
        # SET NX replies None when the key already exists
        result = await self._run("set", key, key, value, nx=True)
        return bool(result)

    async def delete(self, key: str) -> int:
        return int(await self._run("delete", key, key))

    async def multi_get(self, keys: Sequence[str]) -> list[Optional[str]]:
        if not keys:
            return []
        return list(await self._run("mget", None, list(keys)))

    async def set_add(self, set_key: str, member: str) -> None:
        await self._run("sadd", set_key, set_key, member)

    async def set_remove(self, set_key: str, member: str) -> None:
        await self._run("srem", set_key, set_key, member)

    async def set_intersect(self, set_keys: Sequence[str]) -> list[str]:
        if not set_keys:
            return []
        return sorted(await self._run("sinter", set_keys[0], list(set_keys)))

    async def set_members(self, set_key: str) -> list[str]:
        return sorted(await self._run("smembers", set_key, set_key))

    async def keys_matching(self, pattern: str) -> list[str]:
        return list(await self._run("keys", pattern, pattern))

    async def increment(self, key: str) -> int:
        return int(await self._run("incr", key, key))

    async def decrement(self, key: str) -> int:
        return int(await self._run("decr", key, key))

    def __str__(self) -> str:
        state = "connected" if self._client is not None else "disconnected"
        return f"RedisPrimitiveStore(redis://{self.host}:{self.port}/{self.database}, {state})"
