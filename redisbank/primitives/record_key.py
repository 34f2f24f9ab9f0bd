KEY_SEPARATOR = ":"

# Characters with special meaning in a Redis KEYS glob.
_GLOB_SPECIAL = set("*?[]\\")


class RecordKey:
    """
    Unique identifier for a record within the store.

    A RecordKey consists of:
    1. type_name: the kind of record (e.g. "widget")
    2. record_id: the caller-chosen id within that type

    Its primary key is "<type>:<id>". The encoding is only collision-free
    if callers keep the separator out of type names; ids may contain it
    since parsing splits on the first separator.
    """

    def __init__(self, type_name: str, record_id: str):
        if not type_name:
            raise ValueError("Type name must be non-empty")

        self.type_name = type_name
        self.record_id = str(record_id)

    @property
    def primary_key(self) -> str:
        """Return the storage key for this record."""
        return f"{self.type_name}{KEY_SEPARATOR}{self.record_id}"

    @classmethod
    def parse(cls, primary_key: str) -> 'RecordKey':
        """Rebuild a RecordKey from a primary key string."""
        type_name, sep, record_id = primary_key.partition(KEY_SEPARATOR)
        if not sep:
            raise ValueError(f"Not a primary key: '{primary_key}'")
        return cls(type_name, record_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordKey):
            return False
        return (self.type_name == other.type_name and
                self.record_id == other.record_id)

    def __hash__(self) -> int:
        return hash((self.type_name, self.record_id))

    def __str__(self) -> str:
        return self.primary_key

    def __repr__(self) -> str:
        return f"RecordKey(type={self.type_name!r}, id={self.record_id!r})"


def primary_key(type_name: str, record_id: str) -> str:
    """Shorthand for RecordKey(type_name, record_id).primary_key."""
    return RecordKey(type_name, record_id).primary_key


def escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so text matches literally."""
    return "".join("\\" + ch if ch in _GLOB_SPECIAL else ch for ch in text)


def type_pattern(type_name: str) -> str:
    """Key pattern enumerating every primary key of a type."""
    return f"{escape_glob(type_name)}{KEY_SEPARATOR}*"
