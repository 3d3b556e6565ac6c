"""Base resource protocol/interface."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .data import ResourceData
from .schema import Schema

if TYPE_CHECKING:
    from cloudsmith_provider.config import ProviderConfig


@runtime_checkable
class Resource(Protocol):
    """Protocol for resource adapters."""

    name: str
    schema: Schema

    def create(self, d: ResourceData, config: "ProviderConfig") -> None:
        """Create the remote object from declared state and record its ID.

        Args:
            d: Declared state; updated in place with what the API reports
            config: Provider configuration (API client and credential)

        Raises:
            Errors from the API client, unwrapped; WaitTimeoutError if the
            object never became visible
        """
        ...

    def read(self, d: ResourceData, config: "ProviderConfig") -> None:
        """Refresh state from the API. Clears the ID if the object is gone."""
        ...

    def update(self, d: ResourceData, config: "ProviderConfig") -> None:
        """Bring the remote object in line with declared state."""
        ...

    def delete(self, d: ResourceData, config: "ProviderConfig") -> None:
        """Remove the remote object."""
        ...


@runtime_checkable
class ImportableResource(Resource, Protocol):
    """Resource that can adopt an existing remote object by ID."""

    def import_state(self, d: ResourceData, config: "ProviderConfig") -> list[ResourceData]:
        """Parse d.id as an import ID and populate identifying attributes.

        Raises:
            ImportFormatError: If the ID does not match the expected format
        """
        ...
