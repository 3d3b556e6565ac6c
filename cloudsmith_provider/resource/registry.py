"""Resource registration and lookup system."""

from typing import Dict

from .base import Resource


class ResourceRegistry:
    """Registry for resource adapters."""

    def __init__(self):
        self._resources: Dict[str, Resource] = {}

    def register(self, resource: Resource) -> None:
        """Register a resource.

        Args:
            resource: Resource instance to register
        """
        self._resources[resource.name] = resource

    def get(self, name: str) -> Resource:
        """Get a resource by type name.

        Args:
            name: Resource type name (e.g. "cloudsmith_saml")

        Returns:
            Resource instance

        Raises:
            ValueError: If resource not found
        """
        if name not in self._resources:
            available = ", ".join(sorted(self._resources))
            raise ValueError(
                f"Resource '{name}' not found. "
                f"Available resources: {available or 'none'}"
            )
        return self._resources[name]

    def list(self) -> list[str]:
        """List all registered resource type names."""
        return sorted(self._resources)


# Global registry instance
_registry = ResourceRegistry()


def register_resource(resource: Resource) -> None:
    """Register a resource in the global registry."""
    _registry.register(resource)


def get_resource(name: str) -> Resource:
    """Get a resource from the global registry."""
    return _registry.get(name)


def list_resources() -> list[str]:
    """List all registered resource type names."""
    return _registry.list()
