#!/usr/bin/env python3
"""Validation script for the bundled test database schemas (no database required)."""

from __future__ import annotations

from testdbs.planning import build_provisioning_plan
from testdbs.registry import build_registry
from testdbs.schemes import benchmark_add_row, benchmark_scheme, hopsworks_add_project


def main() -> int:
    registry = build_registry()

    for identifier in registry.all_identifiers():
        if not registry.lookup(identifier).strip():
            raise AssertionError(f"Empty schema for {identifier}")

    plan = build_provisioning_plan(registry=registry)
    rendered = [
        ("benchmark", benchmark_scheme(100, registry=registry)),
        ("benchmark_add_row", benchmark_add_row("1", "'abc'", registry=registry)),
        ("hopsworks_add_project", hopsworks_add_project("demo", 5, registry=registry)),
    ]
    rendered.extend(
        (registry.textual_template, spec.sql)
        for spec in plan
        if spec.identifier in registry.textual_databases
    )

    for template_name, sql in rendered:
        leftover = [token for token in registry.template_for(template_name).tokens if token in sql]
        if leftover:
            raise AssertionError(f"{template_name} still contains {leftover}")

    if not plan[-1].is_sentinel:
        raise AssertionError("Expected the sentinel to be provisioned last")

    print("OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
