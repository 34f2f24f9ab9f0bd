from abc import ABC, abstractmethod
from typing import Optional, Sequence


class PrimitiveStore(ABC):
    """
    Abstract interface for the remote key-value store. 🗄️

    These are the only primitives the databank builds on: single-key
    strings, sets, key-pattern enumeration and atomic counters. No call
    is atomic with any other call. 🔓

    Key Concepts:
    - Every method is a coroutine and a suspension point ⏸️
    - Failures surface as StoreError, never as backend exceptions 🚨
    - Absent keys are None (strings) or empty (sets), not errors 📭
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the connection to the backend. 🔌

        Raises:
            StoreError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the backend. 🔌"""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a string value. 📖

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Write a string value, replacing any previous one. ✍️"""
        pass

    @abstractmethod
    async def set_if_absent(self, key: str, value: str) -> bool:
        """
        Write a string value only if the key does not exist. 🆕

        Returns:
            True if the value was written, False if the key already existed
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        """
        Remove a key. 🗑️

        Returns:
            Number of keys removed (0 or 1)
        """
        pass

    @abstractmethod
    async def multi_get(self, keys: Sequence[str]) -> list[Optional[str]]:
        """
        Read many string values in one round trip. 📚

        Returns:
            Values in the same order as keys, None for absent keys
        """
        pass

    @abstractmethod
    async def set_add(self, set_key: str, member: str) -> None:
        """Add a member to a set. ➕"""
        pass

    @abstractmethod
    async def set_remove(self, set_key: str, member: str) -> None:
        """Remove a member from a set. ➖"""
        pass

    @abstractmethod
    async def set_intersect(self, set_keys: Sequence[str]) -> list[str]:
        """
        Intersect sets. 🔀

        A single key returns that set's full membership.

        Returns:
            Members present in every one of the sets
        """
        pass

    @abstractmethod
    async def set_members(self, set_key: str) -> list[str]:
        """Return all members of a set. 📋"""
        pass

    @abstractmethod
    async def keys_matching(self, pattern: str) -> list[str]:
        """
        Enumerate keys matching a Redis glob pattern. 🔍

        This is O(total keys) on the backend.
        """
        pass

    @abstractmethod
    async def increment(self, key: str) -> int:
        """
        Atomically add one to an integer value. ⬆️

        A missing key counts as 0.

        Returns:
            The value after incrementing
        """
        pass

    @abstractmethod
    async def decrement(self, key: str) -> int:
        """
        Atomically subtract one from an integer value. ⬇️

        Returns:
            The value after decrementing
        """
        pass
