from .exceptions import (
    BankException,
    NotConnectedError,
    AlreadyConnectedError,
    AlreadyExistsError,
    NoSuchThingError,
    StoreError,
    SchemaError,
)

__all__ = [
    "BankException",
    "NotConnectedError",
    "AlreadyConnectedError",
    "AlreadyExistsError",
    "NoSuchThingError",
    "StoreError",
    "SchemaError",
]
