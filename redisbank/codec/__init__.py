"""
Record serialization and property extraction.

Records are stored as JSON text; indexing and filtering read nested
properties out of the decoded value by dotted path.
"""

from .record_codec import (
    MISSING,
    UNDEFINED_MARKER,
    encode,
    decode,
    deep_get,
    split_path,
    index_value,
    matches_criteria,
    strict_equal,
)

__all__ = [
    "MISSING",
    "UNDEFINED_MARKER",
    "encode",
    "decode",
    "deep_get",
    "split_path",
    "index_value",
    "matches_criteria",
    "strict_equal",
]
