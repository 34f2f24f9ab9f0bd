import logging

from ..core.exceptions import AlreadyConnectedError, NotConnectedError
from .interfaces import PrimitiveStore

logger = logging.getLogger(__name__)


class StoreConnection:
    """
    Process-wide handle on the single primitive store connection.

    Only one connect may succeed before a disconnect. Every record,
    query and counter operation goes through require(), which fails
    fast with NotConnectedError before any I/O.
    """

    def __init__(self, store: PrimitiveStore):
        self._store = store
        self._connected = False
        self._connecting = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def store(self) -> PrimitiveStore:
        """The underlying store, regardless of connection state."""
        return self._store

    def require(self) -> PrimitiveStore:
        """
        Return the store if connected.

        Raises:
            NotConnectedError: If connect() has not succeeded
        """
        if not self._connected:
            raise NotConnectedError()
        return self._store

    async def connect(self) -> None:
        """
        Raises:
            AlreadyConnectedError: If connected, or a connect is in flight
            StoreError: If the backend cannot be reached
        """
        if self._connected or self._connecting:
            raise AlreadyConnectedError()

        self._connecting = True
        try:
            await self._store.connect()
            self._connected = True
        finally:
            self._connecting = False

    async def disconnect(self) -> None:
        """
        Raises:
            NotConnectedError: If not connected
        """
        if not self._connected:
            raise NotConnectedError()

        # Fail fast for new operations even if close() is slow
        self._connected = False
        await self._store.close()

    def __str__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"StoreConnection({self._store}, {state})"
