import logging

from ..primitives import RecordKey
from .connection import StoreConnection

logger = logging.getLogger(__name__)


class Counters:
    """Atomic integer counters addressed like records, never indexed."""

    def __init__(self, connection: StoreConnection):
        self.connection = connection

    async def incr(self, type_name: str, record_id: str) -> int:
        """Add one; a counter that does not exist yet starts from 0."""
        store = self.connection.require()
        value = await store.increment(RecordKey(type_name, record_id).primary_key)
        logger.debug("incr %s:%s -> %d", type_name, record_id, value)
        return value

    async def decr(self, type_name: str, record_id: str) -> int:
        """Subtract one; a counter that does not exist yet starts from 0."""
        store = self.connection.require()
        value = await store.decrement(RecordKey(type_name, record_id).primary_key)
        logger.debug("decr %s:%s -> %d", type_name, record_id, value)
        return value
