"""Field helpers for moving values between ResourceData and API payloads."""

from typing import Iterable

from cloudsmith_provider.resource.data import ResourceData


def required_string(d: ResourceData, key: str) -> str:
    """Return a required string attribute. Schema validation guarantees presence."""
    value = d.get(key)
    if value is None:
        raise KeyError(f"Required attribute {key!r} is not set")
    return str(value)


def optional_string(d: ResourceData, key: str) -> str | None:
    value, ok = d.get_ok(key)
    if not ok:
        return None
    return str(value)


def expand_strings(d: ResourceData, key: str) -> list[str]:
    """Set attribute -> sorted list for an API payload. Unset reads as []."""
    value = d.get(key)
    if not value:
        return []
    return sorted(str(v) for v in value)


def flatten_strings(values: Iterable[str] | None) -> list[str]:
    """API list -> list of strings for state. None reads as []."""
    if values is None:
        return []
    return [str(v) for v in values]
