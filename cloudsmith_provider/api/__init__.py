"""Cloudsmith API client and payload types."""

from .client import DEFAULT_API_HOST, CloudsmithHttpClient
from .protocol import CloudsmithApi
from .types import GeoIpRules, SamlGroupSync, SamlGroupSyncRequest, SamlRole

__all__ = [
    "DEFAULT_API_HOST",
    "CloudsmithApi",
    "CloudsmithHttpClient",
    "GeoIpRules",
    "SamlGroupSync",
    "SamlGroupSyncRequest",
    "SamlRole",
]
