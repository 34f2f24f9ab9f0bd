import json
from typing import Any, Mapping, Optional

from cachetools import LRUCache, cached

from ..core.exceptions import StoreError


class _Missing:
    """Marker for a property path that does not resolve in a record."""

    _instance: Optional['_Missing'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

# Index keys spell a missing property the same way for every record.
UNDEFINED_MARKER = "undefined"


def encode(value: Any) -> str:
    """
    Serialize a record value to the store's string representation.

    Raises:
        StoreError: If the value is not JSON-serializable
    """
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise StoreError(f"Cannot encode value: {e}")


def decode(text: Optional[str]) -> Any:
    """
    Deserialize a stored string back into a record value.

    An absent value (None) decodes to None.

    Raises:
        StoreError: If the text is not valid JSON
    """
    if text is None:
        return None
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise StoreError(f"Cannot decode stored value: {e}")


@cached(cache=LRUCache(maxsize=1024))
def split_path(path: str) -> tuple[str, ...]:
    """Split a dotted property path into its segments."""
    return tuple(path.split("."))


def deep_get(value: Any, path: str) -> Any:
    """
    Extract a nested property from a decoded record.

    Segments walk through mappings by key and through lists by integer
    position, so ``profile.emails.0`` is the first address in the list.

    Returns:
        The property value, or MISSING if any segment does not resolve
    """
    current = value
    for segment in split_path(path):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, list):
            try:
                position = int(segment)
            except ValueError:
                return MISSING
            if position < 0 or position >= len(current):
                return MISSING
            current = current[position]
        else:
            return MISSING
    return current


def index_value(value: Any) -> str:
    """
    Canonical stringification of a property value for index keys.

    Different runtime types that print the same share an index set,
    e.g. 3, 3.0 and "3" all become "3".
    """
    if value is MISSING:
        return UNDEFINED_MARKER
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    except (TypeError, ValueError):
        return str(value)


def matches_criteria(value: Any, criteria: Mapping[str, Any]) -> bool:
    """
    Check a decoded record against exact-match criteria.

    Every criterion path must resolve and compare equal; a path missing
    from the record never matches, not even a criterion of None.
    """
    for path, expected in criteria.items():
        actual = deep_get(value, path)
        if actual is MISSING or not strict_equal(actual, expected):
            return False
    return True


def strict_equal(actual: Any, expected: Any) -> bool:
    """
    Deep equality that keeps booleans apart from numbers at every level.

    bool is an int subclass, so plain == lets True satisfy 1 inside
    nested mappings and lists.
    """
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(actual, Mapping) and isinstance(expected, Mapping):
        if actual.keys() != expected.keys():
            return False
        return all(strict_equal(actual[k], expected[k]) for k in actual)
    if isinstance(actual, list) and isinstance(expected, list):
        if len(actual) != len(expected):
            return False
        return all(strict_equal(a, e) for a, e in zip(actual, expected))
    return actual == expected
