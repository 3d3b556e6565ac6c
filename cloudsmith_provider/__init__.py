"""
Cloudsmith provider resources.

Repository Geo/IP rules and organization SAML group-sync mappings,
managed through the Cloudsmith API with Terraform-style CRUD semantics.
"""

from cloudsmith_provider.config import ProviderConfig, load_provider_config
from cloudsmith_provider.errors import (
    ApiError,
    CloudsmithError,
    ConfigError,
    ImportFormatError,
    NotFoundError,
    SchemaValidationError,
    TransportError,
    UnprocessableError,
    WaitTimeoutError,
)

__all__ = [
    "ApiError",
    "CloudsmithError",
    "ConfigError",
    "ImportFormatError",
    "NotFoundError",
    "ProviderConfig",
    "SchemaValidationError",
    "TransportError",
    "UnprocessableError",
    "WaitTimeoutError",
    "load_provider_config",
]
