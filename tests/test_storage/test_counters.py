import pytest

from redisbank.core.exceptions import StoreError


class TestCounters:
    """Tests for incr/decr through the databank."""

    @pytest.mark.asyncio
    async def test_missing_counter_starts_at_zero(self, bank):
        assert await bank.incr("counter", "hits") == 1
        assert await bank.decr("counter", "hits") == 0
        assert await bank.decr("counter", "misses") == -1

    @pytest.mark.asyncio
    async def test_counter_uses_primary_key(self, bank, store):
        await bank.incr("counter", "hits")
        assert store.calls == [("INCR", "counter:hits")]
        assert await store.get("counter:hits") == "1"

    @pytest.mark.asyncio
    async def test_counters_are_never_indexed(self, bank, store):
        await bank.incr("widget", "w1")
        assert "SADD" not in store.commands()

    @pytest.mark.asyncio
    async def test_non_integer_value(self, bank):
        await bank.create("counter", "label", "not a number")
        with pytest.raises(StoreError):
            await bank.incr("counter", "label")

    @pytest.mark.asyncio
    async def test_store_failure(self, bank, store):
        store.fail("DECR")
        with pytest.raises(StoreError, match="injected DECR failure"):
            await bank.decr("counter", "hits")
