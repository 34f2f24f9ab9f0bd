from .schema_validator import SchemaValidator
from .schema import Schema, TypeSchema

__all__ = [
    "SchemaValidator",
    "Schema",
    "TypeSchema",
]
