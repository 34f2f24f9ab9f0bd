import logging
from typing import Any, Callable, Optional

from ..catalog import Schema
from ..codec import decode, deep_get
from ..concurrency import FanIn
from ..core.exceptions import NoSuchThingError, StoreError
from ..primitives import IndexKey, RecordKey, type_pattern
from ..storage.interfaces import PrimitiveStore

logger = logging.getLogger(__name__)


class IndexMaintainer:
    """
    Keeps per-property index sets consistent with record mutations.

    Responsibilities:
    1. Add a record's primary key to the index set of every indexed
       property after a write
    2. Remove it from those sets before an overwrite or delete
    3. Derive index keys for the query engine (read-only)

    The store cannot tell us what a record used to look like, so
    removal re-reads the record first. Per-property set operations are
    issued concurrently and joined through a FanIn; the first error is
    reported and nothing is rolled back.
    """

    def __init__(self, store_provider: Callable[[], PrimitiveStore], schema: Schema):
        """
        Args:
            store_provider: Returns the live primitive store
            schema: Index configuration
        """
        self._store_provider = store_provider
        self.schema = schema

    @property
    def store(self) -> PrimitiveStore:
        return self._store_provider()

    def index_key(self, type_name: str, property_path: str, value: Any) -> str:
        """Index-set key for one (type, property, value)."""
        return IndexKey(type_name, property_path, value).key

    def index_keys_for(self, type_name: str, value: Any) -> list[str]:
        """Index-set keys a record value belongs to, one per indexed property."""
        return [
            self.index_key(type_name, path, deep_get(value, path))
            for path in self.schema.indices_for(type_name)
        ]

    async def add_to_indices(self, type_name: str, record_id: str, value: Any) -> None:
        """
        Add a record to the index set of every indexed property.

        A property missing from the value is indexed under the
        "undefined" marker.

        Raises:
            StoreError: The first failure reported by any set-add
        """
        index_keys = self.index_keys_for(type_name, value)
        if not index_keys:
            return

        member = RecordKey(type_name, record_id).primary_key
        fan_in = FanIn(f"index {member}")
        for ikey in index_keys:
            fan_in.spawn(self.store.set_add(ikey, member))
        await fan_in.join()

        logger.debug("Indexed %s under %d index sets", member, len(index_keys))

    async def remove_from_indices(self, type_name: str, record_id: str) -> None:
        """
        Remove a record from the index sets of its current value.

        Raises:
            NoSuchThingError: If the record cannot be re-read
            StoreError: The first failure reported by the read or any set-remove
        """
        if not self.schema.indices_for(type_name):
            return

        # The only way to learn which sets hold the key is to read the old value
        current = await self._read_current(type_name, record_id)
        index_keys = self.index_keys_for(type_name, current)

        member = RecordKey(type_name, record_id).primary_key
        fan_in = FanIn(f"deindex {member}")
        for ikey in index_keys:
            fan_in.spawn(self.store.set_remove(ikey, member))
        await fan_in.join()

        logger.debug("Deindexed %s from %d index sets", member, len(index_keys))

    async def _read_current(self, type_name: str, record_id: str) -> Any:
        key = RecordKey(type_name, record_id).primary_key
        raw = await self.store.get(key)
        if raw is None:
            raise NoSuchThingError(type_name, record_id)
        return self._decode(key, raw)

    @staticmethod
    def _decode(primary_key: str, raw: str) -> Any:
        try:
            return decode(raw)
        except StoreError as e:
            key = RecordKey.parse(primary_key)
            raise StoreError(str(e), key=primary_key,
                             type_name=key.type_name, record_id=key.record_id) from e

    async def rebuild(self, type_name: str, property_path: Optional[str] = None) -> int:
        """
        Re-add every record of a type to its index sets.

        Used after an index path is added to the schema for a type that
        already holds records. Stale memberships are not removed.

        Args:
            type_name: Type to reindex
            property_path: Only rebuild this path (default: all indexed paths)

        Returns:
            Number of records reindexed
        """
        paths = self.schema.indices_for(type_name)
        if property_path is not None:
            if property_path not in paths:
                raise ValueError(f"No index on {type_name}.{property_path}")
            paths = (property_path,)
        if not paths:
            return 0

        keys = await self.store.keys_matching(type_pattern(type_name))
        if not keys:
            return 0
        raw_values = await self.store.multi_get(keys)

        fan_in = FanIn(f"rebuild {type_name}")
        reindexed = 0
        for key, raw in zip(keys, raw_values):
            if raw is None:
                continue
            value = self._decode(key, raw)
            for path in paths:
                fan_in.spawn(self.store.set_add(
                    self.index_key(type_name, path, deep_get(value, path)), key))
            reindexed += 1
        await fan_in.join()

        logger.info("Rebuilt %d index path(s) for %d %s record(s)",
                    len(paths), reindexed, type_name)
        return reindexed

    def __str__(self) -> str:
        return f"IndexMaintainer({self.schema})"

    def __repr__(self) -> str:
        return self.__str__()
