import asyncio
import logging
import re
from typing import Optional, Sequence, Union

from cachetools import LRUCache, cached

from ..core.exceptions import StoreError
from .interfaces import PrimitiveStore

logger = logging.getLogger(__name__)


@cached(cache=LRUCache(maxsize=256))
def compile_glob(pattern: str) -> re.Pattern:
    """
    Translate a Redis KEYS glob into a regular expression.

    Supports `*`, `?`, `[...]` (with `^` negation and ranges) and
    backslash escapes, the same subset Redis implements.
    """
    out = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(ch))
            else:
                body = pattern[i + 1:end]
                negate = body.startswith("^")
                if negate:
                    body = body[1:]
                body = body.replace("\\", "\\\\")
                out.append(f"[{'^' if negate else ''}{body}]")
                i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


class MemoryPrimitiveStore(PrimitiveStore):
    """
    In-process primitive store with Redis semantics.

    Holds strings and sets in dictionaries and yields to the event loop
    on every call, so concurrent callers interleave at the same points
    they would against a real server. Data survives close()/connect()
    cycles of the same instance.
    """

    def __init__(self):
        self._data: dict[str, Union[str, set[str]]] = {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        logger.info("Connected to in-memory store")

    async def close(self) -> None:
        self._connected = False
        logger.info("Disconnected from in-memory store")

    def flush(self) -> None:
        """Drop every key."""
        self._data.clear()

    async def _enter(self, command: str, key: Optional[str]) -> None:
        await asyncio.sleep(0)
        if not self._connected:
            raise StoreError(f"{command} issued without a connection", key=key)

    def _string(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        if value is not None and not isinstance(value, str):
            raise StoreError("WRONGTYPE Operation against a key holding a set", key=key)
        return value

    def _set(self, key: str) -> set[str]:
        value = self._data.get(key)
        if value is None:
            return set()
        if not isinstance(value, set):
            raise StoreError("WRONGTYPE Operation against a key holding a string", key=key)
        return value

    async def get(self, key: str) -> Optional[str]:
        await self._enter("GET", key)
        return self._string(key)

    async def set(self, key: str, value: str) -> None:
        await self._enter("SET", key)
        self._data[key] = str(value)

    async def set_if_absent(self, key: str, value: str) -> bool:
        await self._enter("SETNX", key)
        if key in self._data:
            return False
        self._data[key] = str(value)
        return True

    async def delete(self, key: str) -> int:
        await self._enter("DEL", key)
        return 1 if self._data.pop(key, None) is not None else 0

    async def multi_get(self, keys: Sequence[str]) -> list[Optional[str]]:
        await self._enter("MGET", None)
        results = []
        for key in keys:
            value = self._data.get(key)
            # MGET reports non-string keys as missing rather than failing
            results.append(value if isinstance(value, str) else None)
        return results

    async def set_add(self, set_key: str, member: str) -> None:
        await self._enter("SADD", set_key)
        members = self._set(set_key)
        members.add(str(member))
        self._data[set_key] = members

    async def set_remove(self, set_key: str, member: str) -> None:
        await self._enter("SREM", set_key)
        members = self._set(set_key)
        members.discard(str(member))
        if members:
            self._data[set_key] = members
        else:
            self._data.pop(set_key, None)

    async def set_intersect(self, set_keys: Sequence[str]) -> list[str]:
        await self._enter("SINTER", set_keys[0] if set_keys else None)
        if not set_keys:
            return []
        result = set(self._set(set_keys[0]))
        for set_key in set_keys[1:]:
            result &= self._set(set_key)
        return sorted(result)

    async def set_members(self, set_key: str) -> list[str]:
        await self._enter("SMEMBERS", set_key)
        return sorted(self._set(set_key))

    async def keys_matching(self, pattern: str) -> list[str]:
        await self._enter("KEYS", pattern)
        regex = compile_glob(pattern)
        return sorted(key for key in self._data if regex.fullmatch(key))

    def _add(self, key: str, amount: int) -> int:
        current = self._string(key)
        try:
            number = int(current) if current is not None else 0
        except ValueError:
            raise StoreError("ERR value is not an integer or out of range", key=key)
        number += amount
        self._data[key] = str(number)
        return number

    async def increment(self, key: str) -> int:
        await self._enter("INCR", key)
        return self._add(key, 1)

    async def decrement(self, key: str) -> int:
        await self._enter("DECR", key)
        return self._add(key, -1)

    def key_count(self) -> int:
        """Number of keys currently held."""
        return len(self._data)

    def __str__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"MemoryPrimitiveStore({len(self._data)} keys, {state})"
