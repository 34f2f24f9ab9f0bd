"""
Storage layer: primitive stores and the connection that guards them.

RecordStore and Counters live in their own modules
(`redisbank.storage.record_store`, `redisbank.storage.counters`) since
they sit above the index maintainer.
"""

from .interfaces import PrimitiveStore
from .memory_store import MemoryPrimitiveStore
from .redis_store import RedisPrimitiveStore
from .connection import StoreConnection

__all__ = [
    "PrimitiveStore",
    "MemoryPrimitiveStore",
    "RedisPrimitiveStore",
    "StoreConnection",
]
