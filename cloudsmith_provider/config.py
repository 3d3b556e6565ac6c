"""
Provider configuration loading.

Loads provider configuration from YAML with environment variable expansion
and builds the ProviderConfig handed to every resource operation.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from cloudsmith_provider.api.client import (
    DEFAULT_API_HOST,
    DEFAULT_TIMEOUT_S,
    CloudsmithHttpClient,
)
from cloudsmith_provider.api.protocol import CloudsmithApi
from cloudsmith_provider.errors import ConfigError


def expand_env_vars(value: Any) -> Any:
    """
    Recursively expand ${VAR} environment variables in config values.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with env vars expanded
    """
    if isinstance(value, str):
        # Match ${VAR} or $VAR patterns
        pattern = r'\$\{([^}]+)\}|\$([A-Z_][A-Z0-9_]*)'

        def replace(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, "")

        return re.sub(pattern, replace, value)

    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]

    return value


def load_provider_config(config_path: str | Path | None = None) -> dict:
    """
    Load provider configuration from YAML file.

    Looks for config in this order:
    1. Explicitly provided path
    2. config/cloudsmith.yaml relative to project root
    3. Returns default config built from the environment

    Environment variables in the format ${VAR} are expanded.

    Args:
        config_path: Optional path to config file

    Returns:
        Dict with api_key, api_host, timeout_s
    """
    if config_path is None:
        # cloudsmith_provider/config.py -> project root is ../..
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config" / "cloudsmith.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return {
            "api_key": os.environ.get("CLOUDSMITH_API_KEY", ""),
            "api_host": os.environ.get("CLOUDSMITH_API_HOST", DEFAULT_API_HOST),
            "timeout_s": os.environ.get("CLOUDSMITH_TIMEOUT_S", DEFAULT_TIMEOUT_S),
        }

    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")

    config = expand_env_vars(config)

    # The file may carry the settings under a 'cloudsmith' section
    return config.get("cloudsmith", config)


@dataclass
class ProviderConfig:
    """
    Explicit provider context passed to every resource operation.

    Attributes:
        api: Cloudsmith API client (HTTP client or a test double)
        api_key: Credential the client authenticates with
        api_host: Base URL the client talks to
    """
    api: CloudsmithApi
    api_key: str
    api_host: str = DEFAULT_API_HOST

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderConfig":
        """
        Build a ProviderConfig with an HTTP client from a config dict.

        Raises:
            ConfigError: If the API key is missing or the timeout is invalid
        """
        api_key = str(data.get("api_key") or "").strip()
        if not api_key:
            raise ConfigError(
                "Cloudsmith API key is not configured "
                "(set CLOUDSMITH_API_KEY or api_key in config/cloudsmith.yaml)"
            )

        api_host = str(data.get("api_host") or DEFAULT_API_HOST)

        try:
            timeout_s = float(data.get("timeout_s") or DEFAULT_TIMEOUT_S)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout_s: {data.get('timeout_s')!r}") from e
        if timeout_s <= 0:
            raise ConfigError(f"timeout_s must be positive, got {timeout_s:g}")

        client = CloudsmithHttpClient(api_key, api_host=api_host, timeout_s=timeout_s)
        return cls(api=client, api_key=api_key, api_host=api_host)

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> "ProviderConfig":
        """Load configuration from file (or environment) and build a ProviderConfig."""
        return cls.from_dict(load_provider_config(config_path))
