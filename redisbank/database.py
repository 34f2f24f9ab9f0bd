import logging
from typing import Any, Iterable, Mapping, Optional, Union

from .catalog import Schema
from .concurrency import RecordLockManager
from .config import BankSettings
from .index import IndexMaintainer
from .query import QueryEngine
from .query.query_engine import DoneCallback, ResultCallback
from .storage import PrimitiveStore, RedisPrimitiveStore, StoreConnection
from .storage.counters import Counters
from .storage.record_store import RecordStore

logger = logging.getLogger(__name__)


class Databank:
    """
    Typed record storage with secondary indices over a key-value store.

    This class wires the core components around one store connection:

    1. **RecordStore**: create/read/update/delete/read_all/save
    2. **IndexMaintainer**: index sets kept in step with mutations
    3. **QueryEngine**: index-accelerated search and full-type scan
    4. **Counters**: atomic incr/decr

    Architecture:
    ```
    Databank
    ├── StoreConnection (PrimitiveStore: Redis or in-memory)
    ├── IndexMaintainer (Schema)
    ├── RecordStore     (+ optional RecordLockManager)
    ├── QueryEngine
    └── Counters
    ```

    Every operation fails with NotConnectedError, without any I/O,
    until connect() has succeeded.
    """

    def __init__(self, schema: Union[Schema, Mapping[str, Any], None] = None,
                 store: Optional[PrimitiveStore] = None,
                 settings: Optional[BankSettings] = None):
        """
        Args:
            schema: Index configuration, a Schema or {"type": {"indices": [...]}}
            store: Primitive store; a RedisPrimitiveStore from settings if omitted
            settings: Connection and behaviour settings (defaults if omitted)
        """
        self.settings = settings or BankSettings()
        self.schema = schema if isinstance(schema, Schema) else Schema(schema)

        if store is None:
            store = RedisPrimitiveStore(
                host=self.settings.host,
                port=self.settings.port,
                database=self.settings.database,
            )

        self._connection = StoreConnection(store)
        self._locks = RecordLockManager() if self.settings.serialize_mutations else None

        self._indexer = IndexMaintainer(self._connection.require, self.schema)
        self._records = RecordStore(self._connection, self.schema, self._indexer, self._locks)
        self._queries = QueryEngine(self._connection, self.schema, self._indexer)
        self._counters = Counters(self._connection)

    @classmethod
    def from_settings(cls, settings: BankSettings,
                      schema: Union[Schema, Mapping[str, Any], None] = None) -> 'Databank':
        """Build a Redis-backed databank from settings."""
        return cls(schema=schema, settings=settings)

    # =================== LIFECYCLE ===================

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def store(self) -> PrimitiveStore:
        return self._connection.store

    @property
    def indexer(self) -> IndexMaintainer:
        return self._indexer

    @property
    def locks(self) -> Optional[RecordLockManager]:
        return self._locks

    async def connect(self) -> None:
        """
        Raises:
            AlreadyConnectedError: If already connected
            StoreError: If the backend cannot be reached
        """
        await self._connection.connect()
        logger.info("Databank connected (%s, %s)", self.store, self.schema)

    async def disconnect(self) -> None:
        """
        Raises:
            NotConnectedError: If not connected
        """
        await self._connection.disconnect()
        logger.info("Databank disconnected")

    async def __aenter__(self) -> 'Databank':
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.is_connected:
            await self.disconnect()

    # =================== RECORDS ===================

    async def create(self, type_name: str, record_id: str, value: Any) -> Any:
        return await self._records.create(type_name, record_id, value)

    async def read(self, type_name: str, record_id: str) -> Any:
        return await self._records.read(type_name, record_id)

    async def update(self, type_name: str, record_id: str, value: Any) -> Any:
        return await self._records.update(type_name, record_id, value)

    async def delete(self, type_name: str, record_id: str) -> None:
        await self._records.delete(type_name, record_id)

    async def save(self, type_name: str, record_id: str, value: Any) -> Any:
        return await self._records.save(type_name, record_id, value)

    async def read_all(self, type_name: str, record_ids: Iterable[str]) -> dict[str, Any]:
        return await self._records.read_all(type_name, record_ids)

    # =================== QUERIES ===================

    async def search(self, type_name: str, criteria: Mapping[str, Any],
                     on_result: ResultCallback,
                     on_done: Optional[DoneCallback] = None) -> None:
        await self._queries.search(type_name, criteria, on_result, on_done)

    async def scan(self, type_name: str, on_result: ResultCallback,
                   on_done: Optional[DoneCallback] = None) -> None:
        await self._queries.scan(type_name, on_result, on_done)

    async def find(self, type_name: str, criteria: Mapping[str, Any]) -> list[Any]:
        return await self._queries.find(type_name, criteria)

    async def rebuild_index(self, type_name: str, property_path: Optional[str] = None) -> int:
        """Re-add every record of a type to its index sets."""
        self._connection.require()
        return await self._indexer.rebuild(type_name, property_path)

    # =================== COUNTERS ===================

    async def incr(self, type_name: str, record_id: str) -> int:
        return await self._counters.incr(type_name, record_id)

    async def decr(self, type_name: str, record_id: str) -> int:
        return await self._counters.decr(type_name, record_id)

    def get_system_info(self) -> dict:
        """
        Snapshot of the databank's configuration and state.

        Returns:
            Dictionary describing connection, schema and locking
        """
        return {
            "status": "connected" if self.is_connected else "disconnected",
            "store": str(self.store),
            "schema": self.schema.to_dict(),
            "serialize_mutations": self._locks is not None,
            "locks": self._locks.get_statistics() if self._locks else None,
        }

    def __str__(self) -> str:
        state = "connected" if self.is_connected else "disconnected"
        return f"Databank({self.store}, {self.schema}, {state})"

    def __repr__(self) -> str:
        return self.__str__()
