"""
Plan and apply resource changes.

Compares stored state with declared configuration, picks the action a
provider framework would take (create, update in place, replace, delete),
and runs it against a resource adapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from cloudsmith_provider.logger import get_logger
from cloudsmith_provider.resource.base import ImportableResource, Resource
from cloudsmith_provider.resource.data import ResourceData
from cloudsmith_provider.resource.schema import force_new_fields

if TYPE_CHECKING:
    from cloudsmith_provider.config import ProviderConfig

logger = get_logger("lifecycle")


class PlanAction(Enum):
    NOOP = "no-op"
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"


@dataclass
class Plan:
    """
    Planned change for one resource instance.

    Attributes:
        action: What apply will do
        prior: Stored state, None when the resource is not yet tracked
        desired: Declared state, None when the resource is being removed
        changed: Attributes whose declared value differs from stored state
        replace_reasons: Changed attributes that force replacement
    """
    action: PlanAction
    prior: ResourceData | None = None
    desired: ResourceData | None = None
    changed: list[str] = field(default_factory=list)
    replace_reasons: list[str] = field(default_factory=list)

    def summary(self) -> str:
        if self.action is PlanAction.REPLACE:
            return f"{self.action.value} (forced by {', '.join(self.replace_reasons)})"
        if self.action is PlanAction.UPDATE:
            return f"{self.action.value} ({', '.join(self.changed)})"
        return self.action.value


def diff(prior: ResourceData, desired: ResourceData) -> list[str]:
    """Return declared attributes that differ. Computed attributes never diff."""
    changed = []
    for key, attr in desired.schema.items():
        if attr.computed and not attr.optional and not attr.required:
            continue
        if _normalize(prior.get(key)) != _normalize(desired.get(key)):
            changed.append(key)
    return changed


def _normalize(value: Any) -> Any:
    # Unset and empty compare equal, matching how the API reports "no rule"
    if value is None:
        return None
    if isinstance(value, set):
        return frozenset(value) or None
    return value or None


def plan(
    resource: Resource,
    prior_state: dict[str, Any] | None,
    desired_config: dict[str, Any] | None,
) -> Plan:
    """
    Work out the action needed to move from prior_state to desired_config.

    Raises:
        SchemaValidationError: If desired_config is invalid
    """
    prior = None
    if prior_state and prior_state.get("id"):
        prior = ResourceData.from_state(resource.schema, prior_state)

    if desired_config is None:
        if prior is None:
            return Plan(PlanAction.NOOP)
        return Plan(PlanAction.DELETE, prior=prior)

    desired = ResourceData.from_config(resource.name, resource.schema, desired_config)

    if prior is None:
        return Plan(PlanAction.CREATE, desired=desired, changed=list(desired_config))

    changed = diff(prior, desired)
    force_new = force_new_fields(resource.schema)
    replace_reasons = [key for key in changed if key in force_new]

    if replace_reasons:
        return Plan(PlanAction.REPLACE, prior, desired, changed, replace_reasons)

    # Carry identity and computed attributes forward for in-place changes
    desired.set_id(prior.id)
    for key, attr in resource.schema.items():
        if attr.computed and desired.get(key) is None:
            desired.set(key, prior.get(key))

    if changed:
        return Plan(PlanAction.UPDATE, prior, desired, changed)
    return Plan(PlanAction.NOOP, prior, desired)


def apply(resource: Resource, change: Plan, config: "ProviderConfig") -> dict[str, Any] | None:
    """
    Execute a plan.

    Returns:
        New state, or None when the resource no longer exists
    """
    logger.info(
        "lifecycle.apply",
        resource=resource.name,
        action=change.action.value,
        changed=change.changed,
    )

    if change.action is PlanAction.NOOP:
        return change.prior.to_state() if change.prior else None

    if change.action is PlanAction.DELETE:
        resource.delete(change.prior.copy(), config)
        return None

    if change.action is PlanAction.REPLACE:
        resource.delete(change.prior.copy(), config)
        d = change.desired.copy()
        d.set_id("")
        resource.create(d, config)
        return _state_or_none(d)

    d = change.desired.copy()
    if change.action is PlanAction.CREATE:
        resource.create(d, config)
    else:
        resource.update(d, config)
    return _state_or_none(d)


def refresh(resource: Resource, state: dict[str, Any], config: "ProviderConfig") -> dict[str, Any] | None:
    """Re-read a tracked resource. Returns None if it has disappeared remotely."""
    d = ResourceData.from_state(resource.schema, state)
    resource.read(d, config)
    return _state_or_none(d)


def destroy(resource: Resource, state: dict[str, Any], config: "ProviderConfig") -> None:
    d = ResourceData.from_state(resource.schema, state)
    resource.delete(d, config)


def import_resource(
    resource: Resource,
    import_id: str,
    config: "ProviderConfig",
) -> list[dict[str, Any]]:
    """
    Adopt existing remote objects by import ID.

    Raises:
        ValueError: If the resource does not support import
        ImportFormatError: If the ID is malformed
    """
    if not isinstance(resource, ImportableResource):
        raise ValueError(f"Resource '{resource.name}' does not support import")

    d = ResourceData(resource.schema, id=import_id)
    states = []
    for imported in resource.import_state(d, config):
        resource.read(imported, config)
        if imported.id:
            states.append(imported.to_state())
        else:
            logger.warning("lifecycle.import.missing", resource=resource.name, import_id=import_id)
    return states


def _state_or_none(d: ResourceData) -> dict[str, Any] | None:
    return d.to_state() if d.id else None
