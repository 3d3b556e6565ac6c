"""
Organization SAML group-sync resource.

Maps an identity-provider attribute (idp_key = idp_value) to a team and
role in an organization. Writes are eventually consistent: a new mapping
may not show up in the list endpoint straight away, and a deleted one may
linger, so create and delete wait on the list before returning.
"""

import time
from typing import TYPE_CHECKING, Callable

from cloudsmith_provider.api.protocol import CloudsmithApi
from cloudsmith_provider.api.types import SamlGroupSync, SamlGroupSyncRequest, SamlRole
from cloudsmith_provider.errors import (
    CloudsmithError,
    ImportFormatError,
    NotFoundError,
    UnprocessableError,
)
from cloudsmith_provider.logger import get_logger
from cloudsmith_provider.resource.data import ResourceData
from cloudsmith_provider.resource.fields import optional_string, required_string
from cloudsmith_provider.resource.schema import Field, FieldType, string_in_slice
from cloudsmith_provider.resource.waiter import (
    DEFAULT_CREATION_INTERVAL_S,
    DEFAULT_CREATION_TIMEOUT_S,
    DEFAULT_DELETION_INTERVAL_S,
    DEFAULT_DELETION_TIMEOUT_S,
    CheckResult,
    wait_for,
)

if TYPE_CHECKING:
    from cloudsmith_provider.config import ProviderConfig

logger = get_logger("saml")

ORGANIZATION = "organization"
IDP_KEY = "idp_key"
IDP_VALUE = "idp_value"
ROLE = "role"
TEAM = "team"
SLUG_PERM = "slug_perm"

# Largest page the list endpoint serves
LIST_PAGE_SIZE = 500

SAML_SCHEMA = {
    ORGANIZATION: Field(
        FieldType.STRING,
        required=True,
        force_new=True,
        description="Organization slug the mapping belongs to.",
    ),
    IDP_KEY: Field(FieldType.STRING, required=True, description="Identity provider attribute name."),
    IDP_VALUE: Field(FieldType.STRING, required=True, description="Identity provider attribute value."),
    ROLE: Field(
        FieldType.STRING,
        optional=True,
        default=SamlRole.MEMBER,
        validate=string_in_slice(SamlRole.ALL),
        description="Role granted within the team.",
    ),
    TEAM: Field(FieldType.STRING, required=True, description="Team slug the members are synced into."),
    SLUG_PERM: Field(FieldType.STRING, computed=True, description="Server-assigned identifier."),
}


def list_all_group_syncs(api: CloudsmithApi, organization: str) -> list[SamlGroupSync]:
    """
    Collect every mapping for an organization across pages.

    A 404 on the first page propagates (nothing visible for the
    organization); a 404 on a later page means the previous page was the last.
    """
    mappings: list[SamlGroupSync] = []
    page = 1
    while True:
        try:
            batch = api.list_saml_group_sync(organization, page=page, page_size=LIST_PAGE_SIZE)
        except NotFoundError:
            if page == 1:
                raise
            break
        mappings.extend(batch)
        if len(batch) < LIST_PAGE_SIZE:
            break
        page += 1
    return mappings


def _find(mappings: list[SamlGroupSync], slug_perm: str) -> SamlGroupSync | None:
    for item in mappings:
        if item.slug_perm == slug_perm:
            return item
    return None


class SamlResource:
    """cloudsmith_saml"""

    name = "cloudsmith_saml"
    schema = SAML_SCHEMA

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._clock = clock
        self._sleep = sleep

    def import_state(self, d: ResourceData, config: "ProviderConfig") -> list[ResourceData]:
        parts = d.id.split(".")
        if len(parts) != 2 or not all(parts):
            raise ImportFormatError(
                "invalid import ID, must be of the form "
                f"<organization_slug>.<saml_slug_perm>, got: {d.id}"
            )

        d.set(ORGANIZATION, parts[0])
        d.set_id(parts[1])
        return [d]

    def create(self, d: ResourceData, config: "ProviderConfig") -> None:
        organization = required_string(d, ORGANIZATION)
        request = SamlGroupSyncRequest(
            idp_key=required_string(d, IDP_KEY),
            idp_value=required_string(d, IDP_VALUE),
            role=optional_string(d, ROLE),
            team=required_string(d, TEAM),
            organization=organization,
        )

        saml = config.api.create_saml_group_sync(organization, request)
        d.set_id(saml.slug_perm)
        logger.info(
            "saml.create",
            resource_id=d.id,
            organization=organization,
            team=request.team,
            role=request.role,
        )

        slug_perm = d.id

        def check() -> CheckResult:
            """
            Ready once the new slug_perm shows up in the listing.

            A successful list alone is not confirmation; the new row must be
            present, otherwise the read that follows could miss it.
            """
            try:
                mappings = list_all_group_syncs(config.api, organization)
            except NotFoundError:
                return CheckResult.retry()
            except UnprocessableError as err:
                return CheckResult.fatal(
                    UnprocessableError(
                        "team does not exist, please check that the team exists",
                        err.body,
                    )
                )
            except CloudsmithError as err:
                return CheckResult.fatal(err)
            if _find(mappings, slug_perm) is None:
                return CheckResult.retry()
            return CheckResult.ready()

        attempts = wait_for(
            check,
            DEFAULT_CREATION_TIMEOUT_S,
            DEFAULT_CREATION_INTERVAL_S,
            resource_id=slug_perm,
            operation="created",
            clock=self._clock,
            sleep=self._sleep,
        )
        logger.info("saml.create.visible", resource_id=slug_perm, attempts=attempts)

        self.read(d, config)

    def read(self, d: ResourceData, config: "ProviderConfig") -> None:
        organization = required_string(d, ORGANIZATION)

        try:
            mappings = list_all_group_syncs(config.api, organization)
        except NotFoundError:
            logger.warning("saml.read.not_found", resource_id=d.id, organization=organization)
            d.set_id("")
            return

        item = _find(mappings, d.id)
        if item is None:
            logger.warning("saml.read.missing", resource_id=d.id, organization=organization)
            d.set_id("")
            return

        d.set(IDP_KEY, item.idp_key)
        d.set(IDP_VALUE, item.idp_value)
        d.set(ROLE, item.role)
        d.set(TEAM, item.team)
        d.set(SLUG_PERM, item.slug_perm)

        # The list endpoint omits the organization, so keep the stored value
        d.set(ORGANIZATION, organization)

    def update(self, d: ResourceData, config: "ProviderConfig") -> None:
        # No update endpoint exists: delete and recreate. If the create fails
        # the old mapping is already gone; the next refresh finds nothing and
        # the plan after it creates the mapping again.
        logger.info("saml.update.recreate", resource_id=d.id)
        self.delete(d, config)
        self.create(d, config)

    def delete(self, d: ResourceData, config: "ProviderConfig") -> None:
        organization = required_string(d, ORGANIZATION)
        slug_perm = d.id

        config.api.delete_saml_group_sync(organization, slug_perm)
        logger.info("saml.delete", resource_id=slug_perm, organization=organization)

        def check() -> CheckResult:
            try:
                mappings = list_all_group_syncs(config.api, organization)
            except NotFoundError:
                return CheckResult.ready()
            except CloudsmithError as err:
                return CheckResult.fatal(err)
            if _find(mappings, slug_perm) is not None:
                return CheckResult.retry()
            return CheckResult.ready()

        wait_for(
            check,
            DEFAULT_DELETION_TIMEOUT_S,
            DEFAULT_DELETION_INTERVAL_S,
            resource_id=slug_perm,
            operation="deleted",
            clock=self._clock,
            sleep=self._sleep,
        )

        d.set_id("")
        d.set(SLUG_PERM, None)
