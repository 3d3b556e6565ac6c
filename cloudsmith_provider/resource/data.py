"""
Mutable resource state handed to resource operations.

ResourceData holds the resource ID and attribute values for one resource
instance. Operations read declared values from it and write what the API
reports back into it, in the same object.
"""

from typing import Any

from cloudsmith_provider.resource.schema import FieldType, Schema, validate_config


class ResourceData:
    """
    Declared/observed state of one resource instance.

    An empty ID means "does not exist"; reads that find nothing clear it.
    """

    def __init__(self, schema: Schema, values: dict[str, Any] | None = None, id: str = ""):
        self._schema = schema
        self._values: dict[str, Any] = {}
        self._id = id or ""
        for key, value in (values or {}).items():
            self.set(key, value)

    @classmethod
    def from_config(
        cls,
        resource: str,
        schema: Schema,
        raw: dict[str, Any],
        id: str = "",
    ) -> "ResourceData":
        """
        Validate declared configuration and build state with defaults applied.

        Raises:
            SchemaValidationError: If the configuration is invalid
        """
        validate_config(resource, schema, raw)
        values = {}
        for key, field in schema.items():
            if key in raw and raw[key] is not None:
                values[key] = raw[key]
            elif field.default is not None:
                values[key] = field.default
        return cls(schema, values, id=id)

    @classmethod
    def from_state(cls, schema: Schema, state: dict[str, Any]) -> "ResourceData":
        """Rebuild from a dict produced by to_state()."""
        return cls(schema, state.get("attributes", {}), id=state.get("id", ""))

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value or ""

    def get(self, key: str) -> Any:
        """Return the value for key, or None when unset."""
        self._check_key(key)
        return self._values.get(key)

    def get_ok(self, key: str) -> tuple[Any, bool]:
        """Return (value, True) if key holds a non-empty value, else (None, False)."""
        value = self.get(key)
        if value is None or value == "" or value == set():
            return None, False
        return value, True

    def set(self, key: str, value: Any) -> None:
        """Store a value, normalizing set fields to a set of strings."""
        self._check_key(key)
        if value is None:
            self._values.pop(key, None)
            return
        if self._schema[key].type is FieldType.SET:
            value = {str(v) for v in value}
        else:
            value = str(value)
        self._values[key] = value

    def to_state(self) -> dict[str, Any]:
        """Serialize with sets sorted so state files are stable."""
        attributes = {}
        for key in self._schema:
            if key not in self._values:
                continue
            value = self._values[key]
            attributes[key] = sorted(value) if isinstance(value, set) else value
        return {"id": self._id, "attributes": attributes}

    def copy(self) -> "ResourceData":
        return ResourceData(self._schema, dict(self._values), id=self._id)

    def _check_key(self, key: str) -> None:
        if key not in self._schema:
            raise KeyError(f"Unknown attribute: {key}")

    def __repr__(self) -> str:
        return f"ResourceData(id={self._id!r}, values={self.to_state()['attributes']!r})"
