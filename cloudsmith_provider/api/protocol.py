"""
Cloudsmith API Protocol.

Defines the API operations the resource adapters consume.
Uses Python's Protocol for structural typing - the HTTP client and the
in-memory test double don't need to inherit from this class.
"""

from typing import Protocol, runtime_checkable

from cloudsmith_provider.api.types import (
    GeoIpRules,
    SamlGroupSync,
    SamlGroupSyncRequest,
)


@runtime_checkable
class CloudsmithApi(Protocol):
    """
    Subset of the Cloudsmith API used by the resource adapters.

    Implementations raise NotFoundError for HTTP 404, UnprocessableError
    for HTTP 422, ApiError for any other failing status, and TransportError
    when the request never completed.
    """

    # --- Repository Geo/IP rules ---

    def enable_geoip(self, namespace: str, repository: str) -> None:
        """
        Turn on Geo/IP filtering for a repository. Idempotent.

        Args:
            namespace: Owning organization slug
            repository: Repository slug
        """
        ...

    def read_geoip(self, namespace: str, repository: str) -> GeoIpRules:
        """
        Fetch the Geo/IP rule set of a repository.

        Raises:
            NotFoundError: If the repository (or its rules) does not exist
        """
        ...

    def update_geoip(self, namespace: str, repository: str, rules: GeoIpRules) -> None:
        """
        Replace the full Geo/IP rule set. There is no partial update.
        """
        ...

    # --- Organization SAML group sync ---

    def create_saml_group_sync(
        self,
        organization: str,
        request: SamlGroupSyncRequest,
    ) -> SamlGroupSync:
        """
        Create a mapping. The returned slug_perm identifies it from then on.
        """
        ...

    def list_saml_group_sync(
        self,
        organization: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[SamlGroupSync]:
        """
        List mappings for an organization, one page at a time.

        Raises:
            NotFoundError: If nothing is visible yet for the organization
            UnprocessableError: If the server rejects the group-sync state
        """
        ...

    def delete_saml_group_sync(self, organization: str, slug_perm: str) -> None:
        """Delete a mapping by slug_perm."""
        ...
