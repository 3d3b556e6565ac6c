"""Tests for planning and applying resource changes."""

import pytest

from cloudsmith_provider.errors import TransportError
from cloudsmith_provider.resource import (
    GeoIpRulesResource,
    SamlResource,
    get_resource,
    list_resources,
)
from cloudsmith_provider.resource.lifecycle import (
    PlanAction,
    apply,
    destroy,
    import_resource,
    plan,
    refresh,
)


@pytest.fixture
def geo():
    return GeoIpRulesResource()


@pytest.fixture
def saml(clock):
    return SamlResource(clock=clock.now, sleep=clock.sleep)


def geo_config(**overrides):
    config = {
        "namespace": "acme",
        "repository": "prod",
        "cidr_allow": ["10.0.0.0/8"],
        "cidr_deny": [],
        "country_code_allow": [],
        "country_code_deny": ["KP"],
    }
    config.update(overrides)
    return config


def saml_config(**overrides):
    config = {
        "organization": "acme",
        "idp_key": "groups",
        "idp_value": "engineering",
        "team": "developers",
    }
    config.update(overrides)
    return config


def test_registry_lists_both_resources():
    assert list_resources() == ["cloudsmith_repository_geo_ip_rules", "cloudsmith_saml"]
    assert isinstance(get_resource("cloudsmith_saml"), SamlResource)


def test_registry_unknown_resource():
    with pytest.raises(ValueError, match="Available resources"):
        get_resource("cloudsmith_nope")


class TestPlan:
    def test_untracked_resource_plans_create(self, geo):
        change = plan(geo, None, geo_config())
        assert change.action is PlanAction.CREATE

    def test_nothing_declared_nothing_tracked(self, geo):
        assert plan(geo, None, None).action is PlanAction.NOOP

    def test_set_order_does_not_diff(self, geo, provider_config):
        state = apply(geo, plan(geo, None, geo_config(cidr_allow=["b/32", "a/32"])), provider_config)

        change = plan(geo, state, geo_config(cidr_allow=["a/32", "b/32"]))

        assert change.action is PlanAction.NOOP

    def test_rule_change_updates_in_place(self, geo, provider_config):
        state = apply(geo, plan(geo, None, geo_config()), provider_config)

        change = plan(geo, state, geo_config(country_code_deny=[]))

        assert change.action is PlanAction.UPDATE
        assert change.changed == ["country_code_deny"]
        assert change.desired.id == state["id"]

    def test_force_new_change_replaces(self, geo, provider_config):
        state = apply(geo, plan(geo, None, geo_config()), provider_config)

        change = plan(geo, state, geo_config(repository="staging"))

        assert change.action is PlanAction.REPLACE
        assert change.replace_reasons == ["repository"]
        assert "forced by repository" in change.summary()

    def test_computed_attribute_never_diffs(self, saml, provider_config):
        state = apply(saml, plan(saml, None, saml_config()), provider_config)
        assert state["attributes"]["slug_perm"] == state["id"]

        change = plan(saml, state, saml_config())

        assert change.action is PlanAction.NOOP

    def test_default_role_does_not_diff(self, saml, provider_config):
        state = apply(saml, plan(saml, None, saml_config()), provider_config)

        change = plan(saml, state, saml_config(role="Member"))

        assert change.action is PlanAction.NOOP

    def test_removed_declaration_plans_delete(self, geo, provider_config):
        state = apply(geo, plan(geo, None, geo_config()), provider_config)
        assert plan(geo, state, None).action is PlanAction.DELETE


class TestApply:
    def test_saml_update_carries_new_slug(self, saml, api, provider_config):
        state = apply(saml, plan(saml, None, saml_config()), provider_config)

        new_state = apply(saml, plan(saml, state, saml_config(team="ops")), provider_config)

        assert new_state["id"] != state["id"]
        assert new_state["attributes"]["team"] == "ops"

    def test_replace_clears_old_rules_and_enables_new_repository(self, geo, api, provider_config):
        api.add_repository("acme", "staging")
        state = apply(geo, plan(geo, None, geo_config()), provider_config)

        new_state = apply(geo, plan(geo, state, geo_config(repository="staging")), provider_config)

        assert new_state["id"] == "acme_staging_geo_ip_rules"
        assert api.repositories[("acme", "prod")].cidr_allow == []
        assert ("acme", "staging") in api.geoip_enabled

    def test_delete_returns_none(self, geo, provider_config):
        state = apply(geo, plan(geo, None, geo_config()), provider_config)
        assert apply(geo, plan(geo, state, None), provider_config) is None

    def test_noop_returns_prior_state(self, geo, api, provider_config):
        state = apply(geo, plan(geo, None, geo_config()), provider_config)
        updates = len(api.update_calls)

        assert apply(geo, plan(geo, state, geo_config()), provider_config) == state
        assert len(api.update_calls) == updates


class TestRefreshDestroyImport:
    def test_refresh_drops_vanished_saml_mapping(self, saml, api, provider_config):
        state = apply(saml, plan(saml, None, saml_config()), provider_config)
        api.organizations["acme"].clear()

        assert refresh(saml, state, provider_config) is None

    def test_failed_recreate_is_created_again_after_refresh(self, saml, api, provider_config):
        state = apply(saml, plan(saml, None, saml_config()), provider_config)
        api.fail_create = True
        with pytest.raises(TransportError):
            apply(saml, plan(saml, state, saml_config(team="ops")), provider_config)
        api.fail_create = False

        assert refresh(saml, state, provider_config) is None
        change = plan(saml, None, saml_config(team="ops"))
        assert change.action is PlanAction.CREATE

        new_state = apply(saml, change, provider_config)

        assert [m.slug_perm for m in api.organizations["acme"]] == [new_state["id"]]
        assert new_state["attributes"]["team"] == "ops"

    def test_destroy_saml(self, saml, api, provider_config):
        state = apply(saml, plan(saml, None, saml_config()), provider_config)

        destroy(saml, state, provider_config)

        assert api.organizations["acme"] == []

    def test_import_saml_reads_remote_fields(self, saml, provider_config):
        state = apply(saml, plan(saml, None, saml_config(role="Manager")), provider_config)

        imported = import_resource(saml, f"acme.{state['id']}", provider_config)

        assert imported == [state]

    def test_import_unknown_slug_returns_nothing(self, saml, provider_config):
        assert import_resource(saml, "acme.missing", provider_config) == []

    def test_geo_ip_rules_not_importable(self, geo, provider_config):
        with pytest.raises(ValueError, match="does not support import"):
            import_resource(geo, "acme.prod", provider_config)
