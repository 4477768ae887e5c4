from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from testdbs.errors import UnknownIdentifierError
from testdbs.observability import log_event
from testdbs.registry import SchemaRegistry, default_registry
from testdbs.schemes import create_schema, provisionable_identifiers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionSpec:
    """One database schema to apply, in plan order.

    A ProvisionSpec describes "what to create" without binding to a connection
    or executor.
    """

    identifier: str
    sql: str
    is_sentinel: bool = False

    def __post_init__(self) -> None:
        if not (self.identifier or "").strip():
            raise ValueError("ProvisionSpec.identifier is required")
        if not (self.sql or "").strip():
            raise ValueError(f"ProvisionSpec.sql is required for '{self.identifier}'")


def build_provisioning_plan(
    identifiers: Iterable[str] | None = None,
    registry: SchemaRegistry | None = None,
) -> list[ProvisionSpec]:
    """Build the ordered list of schemas to apply.

    Non-sentinel entries are sorted by identifier only so output is stable; the
    order carries no dependency meaning. The sentinel is always last and is
    always included, so a harness that stops on the first failure never
    creates it.
    """

    reg = default_registry() if registry is None else registry
    known = provisionable_identifiers(reg)
    sentinel = reg.catalogue.sentinel

    requested = known if identifiers is None else {str(i).strip() for i in identifiers if str(i).strip()}
    for identifier in sorted(requested):
        if identifier not in known:
            raise UnknownIdentifierError(identifier)

    plan = [
        ProvisionSpec(identifier=identifier, sql=create_schema(identifier, registry=reg))
        for identifier in sorted(requested - {sentinel})
    ]
    plan.append(ProvisionSpec(identifier=sentinel, sql=reg.lookup(sentinel), is_sentinel=True))

    log_event(logger, "testdbs.plan_built", entries=len(plan), sentinel=sentinel)
    return plan
