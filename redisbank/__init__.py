"""
redisbank: typed record storage with secondary indices on a key-value store.
"""

from .catalog import Schema, TypeSchema
from .config import BankSettings, get_settings, configure_logging
from .core.exceptions import (
    BankException,
    NotConnectedError,
    AlreadyConnectedError,
    AlreadyExistsError,
    NoSuchThingError,
    StoreError,
    SchemaError,
)
from .database import Databank
from .storage import MemoryPrimitiveStore, PrimitiveStore, RedisPrimitiveStore

__version__ = "0.1.0"

__all__ = [
    "Databank",
    "Schema",
    "TypeSchema",
    "BankSettings",
    "get_settings",
    "configure_logging",
    "PrimitiveStore",
    "MemoryPrimitiveStore",
    "RedisPrimitiveStore",
    "BankException",
    "NotConnectedError",
    "AlreadyConnectedError",
    "AlreadyExistsError",
    "NoSuchThingError",
    "StoreError",
    "SchemaError",
]
