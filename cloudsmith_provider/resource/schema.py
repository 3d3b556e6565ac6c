"""Schema helpers for declared resource configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from cloudsmith_provider.errors import SchemaValidationError

# A validator returns an error message, or None when the value is acceptable.
Validator = Callable[[str], str | None]


class FieldType(Enum):
    STRING = "string"
    SET = "set"  # unordered set of strings


@dataclass(frozen=True)
class Field:
    """
    Declaration of one resource attribute.

    Attributes:
        type: STRING or SET (of strings)
        required: Must be present in declared configuration
        optional: May be present; `default` is used when absent
        computed: Set by the server; never declared, never diffed
        force_new: A change replaces the resource instead of updating it
        default: Value applied when an optional field is absent
        validate: Applied to a string value or to every element of a set
        description: Human-readable description
    """
    type: FieldType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    validate: Validator | None = None
    description: str = ""


Schema = dict[str, Field]


def string_is_not_empty(value: str) -> str | None:
    if not value:
        return "expected a non-empty string"
    return None


def string_in_slice(valid: Iterable[str]) -> Validator:
    choices = tuple(valid)

    def _validate(value: str) -> str | None:
        if value not in choices:
            return f"expected one of {', '.join(choices)}, got {value!r}"
        return None

    return _validate


def validate_config(resource: str, schema: Schema, raw: dict[str, Any]) -> None:
    """
    Validate declared configuration against a schema.

    Every problem is collected so the caller sees them all at once.

    Raises:
        SchemaValidationError: If any field is unknown, missing, computed-only,
            of the wrong type, or rejected by its validator
    """
    problems: list[str] = []

    for key in raw:
        if key not in schema:
            problems.append(f"{key}: unsupported argument")

    for key, field in schema.items():
        value = raw.get(key)

        if field.computed and not field.optional and not field.required:
            if value is not None:
                problems.append(f"{key}: computed attribute cannot be set")
            continue

        if value is None:
            if field.required:
                problems.append(f"{key}: required argument is missing")
            continue

        if field.type is FieldType.STRING:
            if not isinstance(value, str):
                problems.append(f"{key}: expected a string, got {type(value).__name__}")
                continue
            values = [value]
        else:
            if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
                problems.append(f"{key}: expected a list of strings, got {type(value).__name__}")
                continue
            bad = [v for v in value if not isinstance(v, str)]
            if bad:
                problems.append(f"{key}: expected a list of strings, got element {bad[0]!r}")
                continue
            values = list(value)

        if field.validate is not None:
            for item in values:
                message = field.validate(item)
                if message:
                    problems.append(f"{key}: {message}")
                    break

    if problems:
        raise SchemaValidationError(resource, problems)


def force_new_fields(schema: Schema) -> list[str]:
    """Attributes whose change replaces the remote object instead of updating it."""
    return [key for key, field in schema.items() if field.force_new]
