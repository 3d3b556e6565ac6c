"""Tests for the repository Geo/IP rules resource."""

import pytest

from cloudsmith_provider.errors import NotFoundError, SchemaValidationError, TransportError
from cloudsmith_provider.resource.data import ResourceData
from cloudsmith_provider.resource.geo_ip_rules import (
    GEO_IP_RULES_SCHEMA,
    GeoIpRulesResource,
    geo_ip_rules_id,
)


@pytest.fixture
def resource():
    return GeoIpRulesResource()


def declared(**overrides):
    config = {
        "namespace": "acme",
        "repository": "prod",
        "cidr_allow": ["10.0.0.0/8", "192.168.0.0/16"],
        "cidr_deny": ["10.1.0.0/16"],
        "country_code_allow": ["IE", "GB"],
        "country_code_deny": ["KP"],
    }
    config.update(overrides)
    return ResourceData.from_config(GeoIpRulesResource.name, GEO_IP_RULES_SCHEMA, config)


class TestGeoIpRulesCreate:
    def test_create_enables_geoip_then_writes_rules(self, resource, api, provider_config):
        d = declared()

        resource.create(d, provider_config)

        assert api.enable_calls == [("acme", "prod")]
        assert ("acme", "prod") in api.geoip_enabled
        assert len(api.update_calls) == 1
        assert d.id == "acme_prod_geo_ip_rules"

    def test_create_with_all_empty_sets_still_enables(self, resource, api, provider_config):
        """Enabling Geo/IP is a side effect of every create."""
        d = declared(cidr_allow=[], cidr_deny=[], country_code_allow=[], country_code_deny=[])

        resource.create(d, provider_config)

        assert ("acme", "prod") in api.geoip_enabled
        assert d.get("cidr_allow") == set()

    def test_create_fails_when_enable_fails(self, resource, api, provider_config):
        def boom(namespace, repository):
            raise TransportError("connection refused")

        api.enable_geoip = boom
        d = declared()

        with pytest.raises(TransportError):
            resource.create(d, provider_config)

        assert api.update_calls == []
        assert d.id == ""


class TestGeoIpRulesReadUpdate:
    def test_update_then_read_round_trips_as_sets(self, resource, api, provider_config):
        d = declared()
        resource.update(d, provider_config)

        fresh = ResourceData(GEO_IP_RULES_SCHEMA, {"namespace": "acme", "repository": "prod"}, id=d.id)
        resource.read(fresh, provider_config)

        assert fresh.get("cidr_allow") == {"10.0.0.0/8", "192.168.0.0/16"}
        assert fresh.get("cidr_deny") == {"10.1.0.0/16"}
        assert fresh.get("country_code_allow") == {"IE", "GB"}
        assert fresh.get("country_code_deny") == {"KP"}

    def test_update_sends_all_four_sets(self, resource, api, provider_config):
        d = declared(country_code_deny=[])

        resource.update(d, provider_config)

        _, _, rules = api.update_calls[-1]
        assert rules.cidr_allow == ["10.0.0.0/8", "192.168.0.0/16"]
        assert rules.country_code_allow == ["GB", "IE"]
        assert rules.country_code_deny == []

    def test_read_echoes_namespace_and_repository(self, resource, provider_config):
        d = declared()
        resource.update(d, provider_config)

        resource.read(d, provider_config)

        assert d.get("namespace") == "acme"
        assert d.get("repository") == "prod"

    def test_read_missing_repository_clears_id(self, resource, provider_config):
        d = declared(repository="gone")
        d.set_id(geo_ip_rules_id("acme", "gone"))

        resource.read(d, provider_config)

        assert d.id == ""

    def test_update_propagates_api_errors(self, resource, provider_config):
        d = declared(repository="gone")

        with pytest.raises(NotFoundError):
            resource.update(d, provider_config)

        assert d.id == ""


class TestGeoIpRulesDelete:
    def test_delete_then_read_yields_empty_sets(self, resource, api, provider_config):
        d = declared()
        resource.create(d, provider_config)

        resource.delete(d, provider_config)
        fresh = ResourceData(GEO_IP_RULES_SCHEMA, {"namespace": "acme", "repository": "prod"})
        fresh.set_id(geo_ip_rules_id("acme", "prod"))
        resource.read(fresh, provider_config)

        for key in ("cidr_allow", "cidr_deny", "country_code_allow", "country_code_deny"):
            assert fresh.get(key) == set()

    def test_delete_leaves_geoip_enabled(self, resource, api, provider_config):
        """Delete never disables Geo/IP filtering on the repository."""
        d = declared()
        resource.create(d, provider_config)

        resource.delete(d, provider_config)

        assert ("acme", "prod") in api.geoip_enabled
        assert d.id == ""


class TestGeoIpRulesSchema:
    def test_empty_string_elements_rejected(self):
        with pytest.raises(SchemaValidationError, match="cidr_allow"):
            declared(cidr_allow=["10.0.0.0/8", ""])

    def test_rule_sets_are_required(self):
        config = {"namespace": "acme", "repository": "prod"}
        with pytest.raises(SchemaValidationError) as exc_info:
            ResourceData.from_config(GeoIpRulesResource.name, GEO_IP_RULES_SCHEMA, config)

        assert len(exc_info.value.problems) == 4

    def test_namespace_and_repository_force_new(self):
        assert GEO_IP_RULES_SCHEMA["namespace"].force_new
        assert GEO_IP_RULES_SCHEMA["repository"].force_new
        assert not GEO_IP_RULES_SCHEMA["cidr_allow"].force_new
