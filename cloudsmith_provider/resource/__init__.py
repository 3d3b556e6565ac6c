"""Resource adapters and the framework pieces they rely on."""

from .base import ImportableResource, Resource
from .data import ResourceData
from .geo_ip_rules import GeoIpRulesResource
from .registry import get_resource, list_resources, register_resource
from .saml import SamlResource
from .waiter import CheckResult, CheckStatus, WaitState, Waiter, wait_for

# Register resources
register_resource(GeoIpRulesResource())
register_resource(SamlResource())

__all__ = [
    "CheckResult",
    "CheckStatus",
    "GeoIpRulesResource",
    "ImportableResource",
    "Resource",
    "ResourceData",
    "SamlResource",
    "WaitState",
    "Waiter",
    "get_resource",
    "list_resources",
    "register_resource",
    "wait_for",
]
