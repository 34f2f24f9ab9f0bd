"""Custom exceptions for the databank system."""

from typing import Optional


class BankException(Exception):
    """Base exception for databank-related errors."""
    pass


class NotConnectedError(BankException):
    """Raised when an operation is attempted before connect()."""

    def __init__(self, message: str = "Not connected to the store"):
        super().__init__(message)


class AlreadyConnectedError(BankException):
    """Raised when connect() is called on a bank that is already connected."""

    def __init__(self, message: str = "Already connected to the store"):
        super().__init__(message)


class AlreadyExistsError(BankException):
    """Raised by create when the primary key is already taken."""

    def __init__(self, type_name: str, record_id: str):
        super().__init__(f"Already have a {type_name} with id '{record_id}'")
        self.type_name = type_name
        self.record_id = record_id


class NoSuchThingError(BankException):
    """Raised when a record does not exist."""

    def __init__(self, type_name: str, record_id: str):
        super().__init__(f"No {type_name} with id '{record_id}'")
        self.type_name = type_name
        self.record_id = record_id


class StoreError(BankException):
    """
    Raised when a primitive store operation fails.

    Wraps network, protocol and serialization failures. Carries whatever
    context was available at the point of failure.
    """

    def __init__(self, message: str, key: Optional[str] = None,
                 type_name: Optional[str] = None, record_id: Optional[str] = None):
        super().__init__(message)
        self.key = key
        self.type_name = type_name
        self.record_id = record_id

    def __str__(self) -> str:
        base = super().__str__()
        if self.type_name is not None and self.record_id is not None:
            return f"{base} ({self.type_name} '{self.record_id}')"
        if self.key is not None:
            return f"{base} (key '{self.key}')"
        return base


class SchemaError(BankException):
    """Raised when an index schema configuration is invalid."""
    pass
