from typing import Any

from ..codec import index_value
from .record_key import KEY_SEPARATOR

INDEX_NAMESPACE = "databank:index"


class IndexKey:
    """
    Identifier for one index set.

    An index set holds the primary keys of every record of `type_name`
    whose `property_path` currently stringifies to `value`. The value is
    canonicalized on construction, so IndexKey("w", "size", 3) and
    IndexKey("w", "size", "3") name the same set.
    """

    def __init__(self, type_name: str, property_path: str, value: Any):
        self.type_name = type_name
        self.property_path = property_path
        self.value = index_value(value)

    @property
    def key(self) -> str:
        """Return the storage key of the index set."""
        return KEY_SEPARATOR.join(
            (INDEX_NAMESPACE, self.type_name, self.property_path, self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexKey):
            return False
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key

    def __repr__(self) -> str:
        return (f"IndexKey(type={self.type_name!r}, "
                f"property={self.property_path!r}, value={self.value!r})")


def index_key(type_name: str, property_path: str, value: Any) -> str:
    """Shorthand for IndexKey(...).key."""
    return IndexKey(type_name, property_path, value).key
