from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from ..core.exceptions import SchemaError
from .schema_validator import SchemaValidator


@dataclass(frozen=True)
class TypeSchema:
    """
    Indexing metadata for one record type.

    🏷️ Names the dotted property paths whose values are kept in index
    sets for every record of the type.
    """

    """📋 Name of the record type"""
    type_name: str

    """🔑 Dotted property paths that are indexed"""
    indices: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """
        🎬 Freeze whatever sequence of paths was passed in.
        """
        object.__setattr__(self, "indices", tuple(self.indices))

    def is_indexed(self, property_path: str) -> bool:
        """Check whether a property path has an index."""
        return property_path in self.indices

    def to_dict(self) -> dict:
        """
        📦 Convert to the plain params shape: {"indices": [...]}.
        """
        return {"indices": list(self.indices)}

    @classmethod
    def from_dict(cls, type_name: str, data: Mapping[str, Any]) -> 'TypeSchema':
        """
        📥 Build from the plain params shape.

        Args:
            type_name: Record type this entry describes
            data: Mapping with an optional "indices" list
        """
        return cls(type_name=type_name, indices=tuple(data.get("indices") or ()))


SchemaSource = Union[Mapping[str, Mapping[str, Any]], Iterable[TypeSchema], None]


class Schema:
    """
    Immutable, process-wide index configuration.

    📚 Maps record type -> TypeSchema. Types that are absent, or present
    with an empty index list, are simply not indexed. The schema is
    validated once at construction and injected into the components that
    need it; nothing mutates it afterwards.
    """

    def __init__(self, source: SchemaSource = None):
        """
        Args:
            source: Either {"type": {"indices": [...]}} or TypeSchema objects

        Raises:
            SchemaError: If the configuration fails validation
        """
        entries: dict[str, TypeSchema] = {}

        if source is None:
            pass
        elif isinstance(source, Mapping):
            for type_name, data in source.items():
                entries[type_name] = TypeSchema.from_dict(type_name, data or {})
        else:
            for type_schema in source:
                entries[type_schema.type_name] = type_schema

        validator = SchemaValidator()
        if not validator.validate_schema(entries):
            raise SchemaError(
                f"Invalid schema: {'; '.join(validator.get_validation_errors())}")

        self._types: Mapping[str, TypeSchema] = MappingProxyType(entries)

    def indices_for(self, type_name: str) -> tuple[str, ...]:
        """Return the indexed property paths of a type (empty if none)."""
        type_schema = self._types.get(type_name)
        if type_schema is None:
            return ()
        return type_schema.indices

    def is_indexed(self, type_name: str, property_path: str) -> bool:
        """Check whether a type indexes a given property path."""
        return property_path in self.indices_for(type_name)

    def get(self, type_name: str) -> Optional[TypeSchema]:
        """Get the TypeSchema of a type, if configured."""
        return self._types.get(type_name)

    def types(self) -> list[str]:
        """List all configured type names."""
        return list(self._types.keys())

    def to_dict(self) -> dict:
        return {name: ts.to_dict() for name, ts in self._types.items()}

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __iter__(self) -> Iterator[TypeSchema]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __str__(self) -> str:
        indexed = sum(len(ts.indices) for ts in self._types.values())
        return f"Schema({indexed} indices on {len(self._types)} types)"

    def __repr__(self) -> str:
        return self.__str__()
