"""Shared fixtures: an instrumented in-memory store and connected databanks."""

import asyncio
from typing import Optional

import pytest
import pytest_asyncio

from redisbank import BankSettings, Databank, MemoryPrimitiveStore, StoreError


class RecordingStore(MemoryPrimitiveStore):
    """
    In-memory store that records every command and can be told to fail
    or to stall a command on one key.

    Failures are keyed by command name (GET, SET, SETNX, DEL, MGET, SADD,
    SREM, SINTER, SMEMBERS, KEYS, INCR, DECR) and optionally by key.
    """

    def __init__(self):
        super().__init__()
        self.calls: list[tuple[str, Optional[str]]] = []
        self._failures: dict[str, tuple[Optional[str], Exception]] = {}
        self._delays: dict[tuple[str, str], float] = {}

    def fail(self, command: str, key: Optional[str] = None,
             error: Optional[Exception] = None) -> None:
        self._failures[command] = (key, error or StoreError(f"injected {command} failure", key=key))

    def delay(self, command: str, key: str, seconds: float) -> None:
        self._delays[(command, key)] = seconds

    def heal(self) -> None:
        self._failures.clear()

    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]

    async def _enter(self, command: str, key: Optional[str]) -> None:
        self.calls.append((command, key))
        await super()._enter(command, key)
        pause = self._delays.get((command, key))
        if pause:
            await asyncio.sleep(pause)
        rule = self._failures.get(command)
        if rule is not None and (rule[0] is None or rule[0] == key):
            raise rule[1]


WIDGET_SCHEMA = {
    "widget": {"indices": ["color", "shape.sides"]},
    "person": {"indices": ["profile.email"]},
}


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def settings() -> BankSettings:
    return BankSettings(host="localhost", port=6379, database=0)


@pytest_asyncio.fixture
async def bank(store, settings):
    databank = Databank(WIDGET_SCHEMA, store=store, settings=settings)
    await databank.connect()
    yield databank
    if databank.is_connected:
        await databank.disconnect()


@pytest_asyncio.fixture
async def locked_bank(store):
    databank = Databank(WIDGET_SCHEMA, store=store,
                        settings=BankSettings(serialize_mutations=True))
    await databank.connect()
    yield databank
    if databank.is_connected:
        await databank.disconnect()
