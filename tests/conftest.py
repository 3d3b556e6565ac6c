"""Pytest configuration for Cloudsmith provider tests."""
import sys
from pathlib import Path

import pytest

# Add project root to path so 'cloudsmith_provider' can be imported,
# and this directory so tests can import the shared fakes
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from cloudsmith_provider.config import ProviderConfig  # noqa: E402
from fakes import FakeClock, FakeCloudsmithApi  # noqa: E402


@pytest.fixture
def api():
    """In-memory API with one repository and one organization."""
    fake = FakeCloudsmithApi()
    fake.add_repository("acme", "prod")
    fake.add_organization("acme", teams=["developers", "ops"])
    return fake


@pytest.fixture
def provider_config(api):
    """ProviderConfig wired to the in-memory API."""
    return ProviderConfig(api=api, api_key="test-key")


@pytest.fixture
def clock():
    return FakeClock()
