"""Stable public imports for `testdbs`.

Test harness code should import from these symbols. Lower-level utilities
(manifest parsing, settings) should be imported from their submodules explicitly.
"""

from testdbs.catalogue import SchemaCatalogue
from testdbs.errors import (
    InvalidSubstitutionError,
    MissingSubstitutionError,
    SchemaRegistryError,
    UnknownIdentifierError,
    UnknownTemplateError,
    UnusedSubstitutionError,
)
from testdbs.planning import ProvisionSpec, build_provisioning_plan
from testdbs.registry import (
    SchemaRegistry,
    all_identifiers,
    build_registry,
    default_registry,
    lookup,
    render,
    template_for,
)
from testdbs.schemes import (
    benchmark_add_row,
    benchmark_scheme,
    create_schema,
    hopsworks_add_project,
    provisionable_identifiers,
    textual_columns_scheme,
)
from testdbs.templates import DynamicTemplate, TemplateSet

__all__ = [
    "DynamicTemplate",
    "InvalidSubstitutionError",
    "MissingSubstitutionError",
    "ProvisionSpec",
    "SchemaCatalogue",
    "SchemaRegistry",
    "SchemaRegistryError",
    "TemplateSet",
    "UnknownIdentifierError",
    "UnknownTemplateError",
    "UnusedSubstitutionError",
    "all_identifiers",
    "benchmark_add_row",
    "benchmark_scheme",
    "build_provisioning_plan",
    "build_registry",
    "create_schema",
    "default_registry",
    "hopsworks_add_project",
    "lookup",
    "provisionable_identifiers",
    "render",
    "template_for",
    "textual_columns_scheme",
]
