"""
Repository Geo/IP rules resource.

Manages the CIDR and country-code allow/deny lists of a repository.
The API has no create or delete for the rule set itself: create enables
Geo/IP filtering and then writes the rules, delete writes four empty lists.
"""

from typing import TYPE_CHECKING

from cloudsmith_provider.api.types import GeoIpRules
from cloudsmith_provider.errors import NotFoundError
from cloudsmith_provider.logger import get_logger
from cloudsmith_provider.resource.data import ResourceData
from cloudsmith_provider.resource.fields import (
    expand_strings,
    flatten_strings,
    required_string,
)
from cloudsmith_provider.resource.schema import Field, FieldType, string_is_not_empty

if TYPE_CHECKING:
    from cloudsmith_provider.config import ProviderConfig

logger = get_logger("geo_ip_rules")

NAMESPACE = "namespace"
REPOSITORY = "repository"
CIDR_ALLOW = "cidr_allow"
CIDR_DENY = "cidr_deny"
COUNTRY_CODE_ALLOW = "country_code_allow"
COUNTRY_CODE_DENY = "country_code_deny"


def _rule_set(description: str) -> Field:
    return Field(
        FieldType.SET,
        required=True,
        validate=string_is_not_empty,
        description=description,
    )


GEO_IP_RULES_SCHEMA = {
    CIDR_ALLOW: _rule_set(
        "The list of IP Addresses for which to allow access, expressed in CIDR notation."
    ),
    CIDR_DENY: _rule_set(
        "The list of IP Addresses for which to deny access, expressed in CIDR notation."
    ),
    COUNTRY_CODE_ALLOW: _rule_set(
        "The list of countries for which to allow access, expressed in ISO 3166-1 country codes."
    ),
    COUNTRY_CODE_DENY: _rule_set(
        "The list of countries for which to deny access, expressed in ISO 3166-1 country codes."
    ),
    NAMESPACE: Field(
        FieldType.STRING,
        required=True,
        force_new=True,
        validate=string_is_not_empty,
        description="Organization to which the Repository belongs.",
    ),
    REPOSITORY: Field(
        FieldType.STRING,
        required=True,
        force_new=True,
        validate=string_is_not_empty,
        description="Repository to which these Geo/IP rules belong.",
    ),
}


def geo_ip_rules_id(namespace: str, repository: str) -> str:
    return f"{namespace}_{repository}_geo_ip_rules"


class GeoIpRulesResource:
    """cloudsmith_repository_geo_ip_rules"""

    name = "cloudsmith_repository_geo_ip_rules"
    schema = GEO_IP_RULES_SCHEMA

    def create(self, d: ResourceData, config: "ProviderConfig") -> None:
        namespace = required_string(d, NAMESPACE)
        repository = required_string(d, REPOSITORY)

        # Rules only take effect once Geo/IP is enabled on the repository.
        # Delete never turns it back off.
        config.api.enable_geoip(namespace, repository)
        logger.info(
            "geo_ip_rules.enable",
            namespace=namespace,
            repository=repository,
        )

        self.update(d, config)

    def read(self, d: ResourceData, config: "ProviderConfig") -> None:
        namespace = required_string(d, NAMESPACE)
        repository = required_string(d, REPOSITORY)

        try:
            rules = config.api.read_geoip(namespace, repository)
        except NotFoundError:
            logger.warning(
                "geo_ip_rules.read.not_found",
                resource_id=d.id,
                namespace=namespace,
                repository=repository,
            )
            d.set_id("")
            return

        d.set(CIDR_ALLOW, flatten_strings(rules.cidr_allow))
        d.set(CIDR_DENY, flatten_strings(rules.cidr_deny))
        d.set(COUNTRY_CODE_ALLOW, flatten_strings(rules.country_code_allow))
        d.set(COUNTRY_CODE_DENY, flatten_strings(rules.country_code_deny))

        # The read endpoint does not return namespace/repository; keep the
        # stored values. ForceNew covers changes to either.
        d.set(NAMESPACE, namespace)
        d.set(REPOSITORY, repository)

    def update(self, d: ResourceData, config: "ProviderConfig") -> None:
        namespace = required_string(d, NAMESPACE)
        repository = required_string(d, REPOSITORY)

        rules = GeoIpRules(
            cidr_allow=expand_strings(d, CIDR_ALLOW),
            cidr_deny=expand_strings(d, CIDR_DENY),
            country_code_allow=expand_strings(d, COUNTRY_CODE_ALLOW),
            country_code_deny=expand_strings(d, COUNTRY_CODE_DENY),
        )
        config.api.update_geoip(namespace, repository, rules)

        d.set_id(geo_ip_rules_id(namespace, repository))
        logger.info(
            "geo_ip_rules.update",
            resource_id=d.id,
            cidr_allow=len(rules.cidr_allow),
            cidr_deny=len(rules.cidr_deny),
            country_code_allow=len(rules.country_code_allow),
            country_code_deny=len(rules.country_code_deny),
        )

        self.read(d, config)

    def delete(self, d: ResourceData, config: "ProviderConfig") -> None:
        namespace = required_string(d, NAMESPACE)
        repository = required_string(d, REPOSITORY)

        # There is no DELETE endpoint, so clear every list instead.
        config.api.update_geoip(namespace, repository, GeoIpRules.empty())
        logger.info("geo_ip_rules.delete", resource_id=d.id)
        d.set_id("")
