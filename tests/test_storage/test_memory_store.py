import pytest

from redisbank.core.exceptions import StoreError
from redisbank.storage import MemoryPrimitiveStore
from redisbank.storage.memory_store import compile_glob


class TestCompileGlob:
    """Tests for Redis glob translation."""

    def test_star(self):
        assert compile_glob("widget:*").fullmatch("widget:w1")
        assert not compile_glob("widget:*").fullmatch("widgets:w1")

    def test_question_mark(self):
        assert compile_glob("w?").fullmatch("w1")
        assert not compile_glob("w?").fullmatch("w12")

    def test_character_class(self):
        assert compile_glob("w[ab]").fullmatch("wa")
        assert not compile_glob("w[ab]").fullmatch("wc")
        assert compile_glob("w[^ab]").fullmatch("wc")

    def test_escaped_metacharacters(self):
        regex = compile_glob("w\\*:*")
        assert regex.fullmatch("w*:1")
        assert not regex.fullmatch("wx:1")

    def test_regex_characters_are_literal(self):
        assert compile_glob("a.b").fullmatch("a.b")
        assert not compile_glob("a.b").fullmatch("axb")


class TestMemoryPrimitiveStore:
    """Tests for the in-process primitive store."""

    def setup_method(self):
        self.store = MemoryPrimitiveStore()

    @pytest.mark.asyncio
    async def test_requires_connection(self):
        with pytest.raises(StoreError, match="without a connection"):
            await self.store.get("k")

    @pytest.mark.asyncio
    async def test_strings(self):
        await self.store.connect()
        assert await self.store.get("k") is None
        await self.store.set("k", "v")
        assert await self.store.get("k") == "v"
        assert await self.store.delete("k") == 1
        assert await self.store.delete("k") == 0

    @pytest.mark.asyncio
    async def test_set_if_absent(self):
        await self.store.connect()
        assert await self.store.set_if_absent("k", "first") is True
        assert await self.store.set_if_absent("k", "second") is False
        assert await self.store.get("k") == "first"

    @pytest.mark.asyncio
    async def test_multi_get_preserves_order(self):
        await self.store.connect()
        await self.store.set("a", "1")
        await self.store.set("c", "3")
        assert await self.store.multi_get(["c", "b", "a"]) == ["3", None, "1"]

    @pytest.mark.asyncio
    async def test_sets(self):
        await self.store.connect()
        await self.store.set_add("s1", "x")
        await self.store.set_add("s1", "y")
        await self.store.set_add("s2", "y")
        await self.store.set_add("s2", "z")

        assert await self.store.set_members("s1") == ["x", "y"]
        assert await self.store.set_intersect(["s1", "s2"]) == ["y"]
        assert await self.store.set_intersect(["s1"]) == ["x", "y"]
        assert await self.store.set_intersect(["s1", "missing"]) == []

    @pytest.mark.asyncio
    async def test_empty_set_disappears(self):
        await self.store.connect()
        await self.store.set_add("s", "x")
        await self.store.set_remove("s", "x")
        assert await self.store.keys_matching("*") == []

    @pytest.mark.asyncio
    async def test_wrong_type(self):
        await self.store.connect()
        await self.store.set("k", "v")
        with pytest.raises(StoreError, match="WRONGTYPE"):
            await self.store.set_add("k", "x")

    @pytest.mark.asyncio
    async def test_keys_matching(self):
        await self.store.connect()
        await self.store.set("widget:1", "{}")
        await self.store.set("widget:2", "{}")
        await self.store.set("gadget:1", "{}")
        assert await self.store.keys_matching("widget:*") == ["widget:1", "widget:2"]

    @pytest.mark.asyncio
    async def test_counters(self):
        await self.store.connect()
        assert await self.store.increment("c") == 1
        assert await self.store.increment("c") == 2
        assert await self.store.decrement("c") == 1
        assert await self.store.decrement("fresh") == -1

    @pytest.mark.asyncio
    async def test_increment_non_integer(self):
        await self.store.connect()
        await self.store.set("c", "abc")
        with pytest.raises(StoreError, match="not an integer"):
            await self.store.increment("c")

    @pytest.mark.asyncio
    async def test_data_survives_reconnect(self):
        await self.store.connect()
        await self.store.set("k", "v")
        await self.store.close()
        await self.store.connect()
        assert await self.store.get("k") == "v"
        assert self.store.key_count() == 1

    @pytest.mark.asyncio
    async def test_flush(self):
        await self.store.connect()
        await self.store.set("k", "v")
        self.store.flush()
        assert self.store.key_count() == 0
