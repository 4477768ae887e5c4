from __future__ import annotations

import argparse
import logging
import sys

from testdbs.errors import SchemaRegistryError
from testdbs.planning import build_provisioning_plan
from testdbs.registry import default_registry
from testdbs.schemes import create_schema, provisionable_identifiers

logger = logging.getLogger(__name__)


def _parse_assignments(values: list[str] | None) -> dict[str, str]:
    substitutions: dict[str, str] = {}
    for raw in values or []:
        token, sep, value = raw.partition("=")
        token = token.strip()
        if not sep or not token:
            raise ValueError(f"--set expects TOKEN=value, got '{raw}'")
        substitutions[token] = value
    return substitutions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print SQL for test databases without a database.")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--list", action="store_true", help="list databases and templates")
    mode.add_argument("--db", type=str, default=None, help="print the schema of one database")
    mode.add_argument("--template", type=str, default=None, help="render a dynamic template")
    mode.add_argument("--plan", action="store_true", help="print every schema in provisioning order")
    parser.add_argument("--set", dest="assignments", action="append", default=None, help="TOKEN=value")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    registry = default_registry()
    try:
        if args.list:
            for identifier in sorted(provisionable_identifiers(registry)):
                print(identifier)
            for template in registry.templates:
                print(f"{template.name}: {', '.join(sorted(template.tokens))}")
        elif args.db:
            print(create_schema(args.db, registry=registry))
        elif args.template:
            print(registry.render(args.template, _parse_assignments(args.assignments)))
        else:
            for spec in build_provisioning_plan(registry=registry):
                print(f"-- database: {spec.identifier}")
                print(spec.sql)
    except (SchemaRegistryError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
