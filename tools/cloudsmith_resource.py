#!/usr/bin/env python3
"""CLI for planning and applying Cloudsmith resources from a YAML declaration.

Declarations file (YAML):

    resources:
      prod_rules:
        type: cloudsmith_repository_geo_ip_rules
        config:
          namespace: acme
          repository: prod
          cidr_allow: ["10.0.0.0/8"]
          cidr_deny: []
          country_code_allow: []
          country_code_deny: ["KP"]

State is kept in a JSON file (default: cloudsmith-state.json).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Support running as a standalone script from repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import yaml
from dotenv import load_dotenv

from cloudsmith_provider.config import ProviderConfig
from cloudsmith_provider.errors import ImportFormatError, SchemaValidationError
from cloudsmith_provider.logger import set_level
from cloudsmith_provider.resource import get_resource, list_resources
from cloudsmith_provider.resource.lifecycle import (
    PlanAction,
    apply,
    destroy,
    import_resource,
    plan,
    refresh,
)

DEFAULT_STATE_FILE = "cloudsmith-state.json"


def load_declarations(path: Path) -> dict[str, dict[str, Any]]:
    """Load resource declarations keyed by instance name."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    resources = data.get("resources") or {}
    if not isinstance(resources, dict):
        raise SchemaValidationError(str(path), ["resources: expected a mapping"])

    declarations = {}
    for name, entry in resources.items():
        if not isinstance(entry, dict) or "type" not in entry:
            raise SchemaValidationError(str(path), [f"{name}: missing 'type'"])
        declarations[name] = {"type": entry["type"], "config": entry.get("config") or {}}
    return declarations


def load_state(path: Path) -> dict[str, dict[str, Any]]:
    if not path.exists():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    return data.get("resources", {})


def save_state(path: Path, resources: dict[str, dict[str, Any]]) -> None:
    payload = {"version": 1, "resources": resources}
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def refresh_state(state: dict, config: ProviderConfig) -> list[str]:
    """
    Re-read every tracked instance, updating state in place.

    Instances that no longer exist remotely are dropped from state, so the
    next plan creates them again.

    Returns:
        Names of the dropped instances
    """
    gone = []
    for name, entry in list(state.items()):
        new_state = refresh(get_resource(entry["type"]), entry, config)
        if new_state is None:
            state.pop(name)
            gone.append(name)
        else:
            state[name] = {"type": entry["type"], **new_state}
    return gone


def build_plans(declarations: dict, state: dict) -> list[tuple[str, str, Any]]:
    """Return (instance name, resource type, Plan) for declared and orphaned instances."""
    plans = []
    for name, entry in declarations.items():
        resource = get_resource(entry["type"])
        prior = state.get(name)
        if prior and prior.get("type") != entry["type"]:
            # Type change: drop the old instance, create the new one
            plans.append((name, prior["type"], plan(get_resource(prior["type"]), prior, None)))
            prior = None
        plans.append((name, entry["type"], plan(resource, prior, entry["config"])))

    for name, prior in state.items():
        if name not in declarations:
            plans.append((name, prior["type"], plan(get_resource(prior["type"]), prior, None)))
    return plans


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cloudsmith resource CLI")
    parser.add_argument(
        "--provider-config",
        default=None,
        help="Provider YAML (default: config/cloudsmith.yaml or environment)",
    )
    parser.add_argument("--state-file", default=DEFAULT_STATE_FILE)
    parser.add_argument("--verbose", action="store_true", help="Emit debug log lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-resources", help="List supported resource types")

    plan_parser = subparsers.add_parser("plan", help="Show planned changes")
    plan_parser.add_argument("--config-file", required=True)

    apply_parser = subparsers.add_parser("apply", help="Apply planned changes")
    apply_parser.add_argument("--config-file", required=True)

    subparsers.add_parser("refresh", help="Re-read every tracked resource")

    destroy_parser = subparsers.add_parser("destroy", help="Delete tracked resources")
    destroy_parser.add_argument(
        "--target",
        action="append",
        default=[],
        help="Instance name to destroy (repeatable; default: all)",
    )

    import_parser = subparsers.add_parser("import", help="Adopt an existing remote object")
    import_parser.add_argument("--type", required=True, dest="resource_type")
    import_parser.add_argument("--name", required=True)
    import_parser.add_argument("--id", required=True, dest="import_id")

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parser().parse_args(argv)
    state_path = Path(args.state_file)
    if args.verbose:
        set_level(logging.DEBUG)

    try:
        if args.command == "list-resources":
            for name in list_resources():
                print(name)
            return 0

        config = ProviderConfig.from_config(args.provider_config)
        state = load_state(state_path)

        if args.command == "plan":
            declarations = load_declarations(Path(args.config_file))
            # Refreshed state is only used for planning; the file is left as is
            refresh_state(state, config)
            for name, resource_type, change in build_plans(declarations, state):
                print(f"plan:{resource_type}.{name}:{change.summary()}")
            return 0

        if args.command == "apply":
            declarations = load_declarations(Path(args.config_file))
            try:
                for name in refresh_state(state, config):
                    print(f"refresh:{name}:gone")
                for name, resource_type, change in build_plans(declarations, state):
                    if change.action is PlanAction.NOOP:
                        continue
                    new_state = apply(get_resource(resource_type), change, config)
                    if new_state is None:
                        state.pop(name, None)
                    else:
                        state[name] = {"type": resource_type, **new_state}
                    print(f"apply:{resource_type}.{name}:{change.action.value}")
            finally:
                save_state(state_path, state)
            return 0

        if args.command == "refresh":
            try:
                gone = refresh_state(state, config)
            finally:
                save_state(state_path, state)
            for name in gone:
                print(f"refresh:{name}:gone")
            for name, entry in state.items():
                print(f"refresh:{entry['type']}.{name}:ok")
            return 0

        if args.command == "destroy":
            targets = args.target or list(state)
            try:
                for name in targets:
                    entry = state.get(name)
                    if entry is None:
                        print(f"destroy:{name}:not-tracked")
                        continue
                    destroy(get_resource(entry["type"]), entry, config)
                    state.pop(name)
                    print(f"destroy:{entry['type']}.{name}:ok")
            finally:
                save_state(state_path, state)
            return 0

        if args.command == "import":
            resource = get_resource(args.resource_type)
            imported = import_resource(resource, args.import_id, config)
            if not imported:
                print(f"import:{args.resource_type}.{args.name}:not-found", file=sys.stderr)
                return 1
            state[args.name] = {"type": args.resource_type, **imported[0]}
            save_state(state_path, state)
            print(f"import:{args.resource_type}.{args.name}:{imported[0]['id']}")
            return 0
    except (SchemaValidationError, ImportFormatError) as err:
        print(f"invalid:{err}", file=sys.stderr)
        return 2
    except Exception as err:
        print(f"error:{err}", file=sys.stderr)
        return 1

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
