import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, Optional

from ..catalog import Schema
from ..codec import decode, encode
from ..concurrency import RecordLockManager
from ..core.exceptions import AlreadyExistsError, NoSuchThingError, StoreError
from ..index import IndexMaintainer
from ..primitives import RecordKey
from .connection import StoreConnection

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Create/read/update/delete of typed, identified records.

    Each record lives under its primary key as encoded JSON. Mutations
    keep the type's index sets in step:

    ------------------------------------------------------------
    create:  SET NX key            -> add to indices
    update:  remove from indices   -> SET key   -> add to indices
    delete:  remove from indices   -> DEL key
    ------------------------------------------------------------

    None of these sequences is atomic. Another caller touching the same
    record between steps can observe, or leave behind, index sets that
    match neither the old nor the new value. Passing a RecordLockManager
    serializes mutations of one record within this process; without it
    the window is left open.

    The store owns no cache: every read goes to the primitive store.
    """

    def __init__(self, connection: StoreConnection, schema: Schema,
                 indexer: Optional[IndexMaintainer] = None,
                 locks: Optional[RecordLockManager] = None):
        """
        Args:
            connection: Shared store connection
            schema: Index configuration
            indexer: Index maintainer (built from connection and schema if omitted)
            locks: Per-record lock manager; None leaves mutations unserialized
        """
        self.connection = connection
        self.schema = schema
        self.indexer = indexer or IndexMaintainer(connection.require, schema)
        self.locks = locks

    @asynccontextmanager
    async def _mutating(self, key: RecordKey) -> AsyncIterator[None]:
        if self.locks is None:
            yield
            return
        async with self.locks.hold(key.primary_key):
            yield

    async def create(self, type_name: str, record_id: str, value: Any) -> Any:
        """
        Store a new record.

        Returns:
            The stored value

        Raises:
            NotConnectedError: Before any I/O if not connected
            AlreadyExistsError: If the id is taken; nothing is indexed
            StoreError: If the write or any index update fails
        """
        store = self.connection.require()
        key = RecordKey(type_name, record_id)
        encoded = self._encode(key, value)

        async with self._mutating(key):
            written = await store.set_if_absent(key.primary_key, encoded)
            if not written:
                raise AlreadyExistsError(type_name, key.record_id)
            await self.indexer.add_to_indices(type_name, key.record_id, value)

        logger.debug("Created %s", key)
        return value

    async def read(self, type_name: str, record_id: str) -> Any:
        """
        Fetch one record.

        Raises:
            NotConnectedError: Before any I/O if not connected
            NoSuchThingError: If the record does not exist
            StoreError: If the fetch fails or the stored value is corrupt
        """
        store = self.connection.require()
        key = RecordKey(type_name, record_id)

        raw = await store.get(key.primary_key)
        if raw is None:
            raise NoSuchThingError(type_name, key.record_id)
        return self._decode(key, raw)

    async def update(self, type_name: str, record_id: str, value: Any) -> Any:
        """
        Replace a record's value.

        There is no existence check. For a type without indices, updating
        a missing record simply creates it. For an indexed type, the
        deindex step must re-read the old value and fails first with
        NoSuchThingError.

        Returns:
            The stored value

        Raises:
            NotConnectedError: Before any I/O if not connected
            NoSuchThingError: If the type is indexed and the record is missing
            StoreError: If any step fails
        """
        store = self.connection.require()
        key = RecordKey(type_name, record_id)
        encoded = self._encode(key, value)

        async with self._mutating(key):
            await self.indexer.remove_from_indices(type_name, key.record_id)
            await store.set(key.primary_key, encoded)
            await self.indexer.add_to_indices(type_name, key.record_id, value)

        logger.debug("Updated %s", key)
        return value

    async def delete(self, type_name: str, record_id: str) -> None:
        """
        Remove a record and its index memberships.

        Raises:
            NotConnectedError: Before any I/O if not connected
            NoSuchThingError: If the record does not exist
            StoreError: If any step fails
        """
        store = self.connection.require()
        key = RecordKey(type_name, record_id)

        async with self._mutating(key):
            await self.indexer.remove_from_indices(type_name, key.record_id)
            removed = await store.delete(key.primary_key)
            if removed == 0:
                raise NoSuchThingError(type_name, key.record_id)

        logger.debug("Deleted %s", key)

    async def save(self, type_name: str, record_id: str, value: Any) -> Any:
        """
        Create the record, or update it if the id is already taken.

        Returns:
            The stored value
        """
        try:
            return await self.create(type_name, record_id, value)
        except AlreadyExistsError:
            return await self.update(type_name, record_id, value)

    async def read_all(self, type_name: str, record_ids: Iterable[str]) -> dict[str, Any]:
        """
        Fetch many records of one type in a single round trip.

        Returns:
            Map of id -> value; ids with no record map to None

        Raises:
            NotConnectedError: Before any I/O if not connected
            StoreError: If the fetch fails or a stored value is corrupt
        """
        store = self.connection.require()
        keys = [RecordKey(type_name, record_id) for record_id in record_ids]
        if not keys:
            return {}

        raw_values = await store.multi_get([key.primary_key for key in keys])

        results: dict[str, Any] = {}
        for key, raw in zip(keys, raw_values):
            results[key.record_id] = None if raw is None else self._decode(key, raw)
        return results

    def _encode(self, key: RecordKey, value: Any) -> str:
        try:
            return encode(value)
        except StoreError as e:
            raise StoreError(str(e), key=key.primary_key,
                             type_name=key.type_name, record_id=key.record_id) from e

    def _decode(self, key: RecordKey, raw: str) -> Any:
        try:
            return decode(raw)
        except StoreError as e:
            raise StoreError(str(e), key=key.primary_key,
                             type_name=key.type_name, record_id=key.record_id) from e

    def __str__(self) -> str:
        return f"RecordStore({self.connection}, {self.schema})"
