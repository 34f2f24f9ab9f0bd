import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from ..catalog import Schema
from ..codec import decode, matches_criteria
from ..concurrency import FanIn
from ..core.exceptions import StoreError
from ..index import IndexMaintainer
from ..primitives import RecordKey, type_pattern
from ..storage import PrimitiveStore, StoreConnection

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Any], Any]
DoneCallback = Callable[[Optional[BaseException]], Any]


class QueryEngine:
    """
    Criteria search and full-type scans over stored records.

    How a search runs:
    ------------------------------------------------------------
    1. Split criteria into indexed / unindexed paths (per schema)
    2. Candidates:
       ├─ indexed criteria  => SINTER of their index sets
       └─ none indexed      => KEYS "<type>:*"
    3. Fetch every candidate concurrently
    4. Keep values matching the unindexed criteria exactly
    5. on_result(value) for each match, in completion order
    ------------------------------------------------------------

    Completion is reported once: by returning / raising the first
    error, or through on_done(None | error) when a callback is given.
    Matches fetched after the first error are dropped, and cancellation
    is reported to on_done before it propagates.
    Full scans are O(records of the type) with no pagination.
    """

    def __init__(self, connection: StoreConnection, schema: Schema,
                 indexer: Optional[IndexMaintainer] = None):
        self.connection = connection
        self.schema = schema
        self.indexer = indexer or IndexMaintainer(connection.require, schema)

    def partition_criteria(self, type_name: str,
                           criteria: Mapping[str, Any]) -> tuple[dict, dict]:
        """
        Split criteria into (indexed, unindexed) by the type's schema.
        """
        indexed: dict[str, Any] = {}
        unindexed: dict[str, Any] = {}
        for path, expected in criteria.items():
            if self.schema.is_indexed(type_name, path):
                indexed[path] = expected
            else:
                unindexed[path] = expected
        return indexed, unindexed

    async def search(self, type_name: str, criteria: Mapping[str, Any],
                     on_result: ResultCallback,
                     on_done: Optional[DoneCallback] = None) -> None:
        """
        Emit every record of a type whose properties equal the criteria.

        Args:
            type_name: Record type to search
            criteria: Map of dotted property path -> required value
            on_result: Called with each matching value
            on_done: Called exactly once with None or the first error;
                     when given, errors are not raised

        Raises:
            NotConnectedError: Before any I/O if not connected
            StoreError: First failure from the lookup or any fetch
        """
        await self._report(self._search(type_name, dict(criteria), on_result), on_done)

    async def scan(self, type_name: str, on_result: ResultCallback,
                   on_done: Optional[DoneCallback] = None) -> None:
        """
        Emit every record of a type.

        Same completion contract as search().
        """
        await self._report(self._scan(type_name, on_result), on_done)

    async def find(self, type_name: str, criteria: Mapping[str, Any]) -> list[Any]:
        """Collect the results of search() into a list."""
        results: list[Any] = []
        await self.search(type_name, criteria, results.append)
        return results

    async def _report(self, work: Awaitable[None], on_done: Optional[DoneCallback]) -> None:
        if on_done is None:
            await work
            return
        try:
            await work
        except BaseException as e:
            on_done(e)
            # cancellation still propagates after being reported
            if not isinstance(e, Exception):
                raise
        else:
            on_done(None)

    async def _search(self, type_name: str, criteria: dict,
                      on_result: ResultCallback) -> None:
        store = self.connection.require()
        indexed, unindexed = self.partition_criteria(type_name, criteria)

        if indexed:
            index_keys = [
                self.indexer.index_key(type_name, path, expected)
                for path, expected in indexed.items()
            ]
            candidates = await store.set_intersect(index_keys)
        else:
            candidates = await store.keys_matching(type_pattern(type_name))

        logger.debug("search %s: %d indexed, %d unindexed criteria, %d candidates",
                     type_name, len(indexed), len(unindexed), len(candidates))

        await self._fetch_and_emit(store, candidates, unindexed, on_result,
                                   f"search {type_name}")

    async def _scan(self, type_name: str, on_result: ResultCallback) -> None:
        store = self.connection.require()
        candidates = await store.keys_matching(type_pattern(type_name))

        logger.debug("scan %s: %d candidates", type_name, len(candidates))

        await self._fetch_and_emit(store, candidates, {}, on_result, f"scan {type_name}")

    async def _fetch_and_emit(self, store: PrimitiveStore, candidates: list[str],
                              unindexed: Mapping[str, Any], on_result: ResultCallback,
                              label: str) -> None:
        if not candidates:
            # not an error, just no results
            return

        async def fetch_one(primary_key: str) -> None:
            raw = await store.get(primary_key)
            if raw is None:
                # deleted between enumeration and fetch
                return
            try:
                value = decode(raw)
            except StoreError as e:
                key = RecordKey.parse(primary_key)
                raise StoreError(str(e), key=primary_key,
                                 type_name=key.type_name, record_id=key.record_id) from e
            # once the join has failed, stragglers are absorbed silently
            if fan_in.first_error is None and matches_criteria(value, unindexed):
                on_result(value)

        fan_in = FanIn(label)
        for primary_key in candidates:
            fan_in.spawn(fetch_one(primary_key))
        await fan_in.join()

    def __str__(self) -> str:
        return f"QueryEngine({self.schema})"
