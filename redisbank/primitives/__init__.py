"""
Key codec: identifiers used throughout the databank.

Maps (type, id) to primary keys and (type, property, value) to index-set
keys. Pure functions of their inputs with no I/O.
"""

from .record_key import RecordKey, primary_key, type_pattern, escape_glob, KEY_SEPARATOR
from .index_key import IndexKey, index_key, INDEX_NAMESPACE

__all__ = [
    "RecordKey",
    "IndexKey",
    "primary_key",
    "index_key",
    "type_pattern",
    "escape_glob",
    "KEY_SEPARATOR",
    "INDEX_NAMESPACE",
]
