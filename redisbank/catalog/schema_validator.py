from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from .schema import TypeSchema


class SchemaValidator:
    """🔍 Validates index schema configuration.

    🏗️ Ensures type names are usable in primary keys
    ✅ Validates index property paths
    🔑 Rejects duplicate index paths

    Record values themselves are never validated.
    """

    def __init__(self):
        """
        🎬 Initialize validator with empty error list.
        """
        self.validation_errors: list[str] = []

    def validate_schema(self, types: Mapping[str, 'TypeSchema']) -> bool:
        """
        🔍 Validate every type entry of a schema.

        Args:
            types: Map of type name -> TypeSchema

        Returns:
            True if valid, False otherwise
        """
        self.validation_errors.clear()

        for type_name, type_schema in types.items():
            self._validate_type(type_name, type_schema)

        return len(self.validation_errors) == 0

    def _validate_type(self, type_name: str, type_schema: 'TypeSchema') -> None:
        if not isinstance(type_name, str) or not type_name:
            self.validation_errors.append(
                f"Type name must be a non-empty string, got {type_name!r}")
            return

        if type_name == "databank":
            self.validation_errors.append(
                "Type name 'databank' is reserved for index keys")

        if ":" in type_name:
            self.validation_errors.append(
                f"Type '{type_name}' contains the key separator ':'")

        if type_schema.type_name != type_name:
            self.validation_errors.append(
                f"Type '{type_name}' registered under mismatched name "
                f"'{type_schema.type_name}'")

        seen: set[str] = set()
        for path in type_schema.indices:
            if not isinstance(path, str) or not path:
                self.validation_errors.append(
                    f"Index path on '{type_name}' must be a non-empty string, got {path!r}")
                continue
            if any(segment == "" for segment in path.split(".")):
                self.validation_errors.append(
                    f"Index path '{path}' on '{type_name}' has an empty segment")
            if path in seen:
                self.validation_errors.append(
                    f"Duplicate index path '{path}' on '{type_name}'")
            seen.add(path)

    def get_validation_errors(self) -> list[str]:
        """Get list of validation errors from last validation."""
        return self.validation_errors.copy()
