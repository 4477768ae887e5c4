from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from testdbs.catalogue import SchemaCatalogue
from testdbs.errors import CatalogueDefinitionError, TemplateDefinitionError
from testdbs.observability import log_event
from testdbs.resources import Manifest, TextualColumnSpec, load_manifest, load_sql
from testdbs.settings import RegistrySettings, resolve_registry_settings
from testdbs.templates import DynamicTemplate, TemplateSet

logger = logging.getLogger(__name__)

TEXTUAL_COLUMN_TOKENS = frozenset({"DATABASE_NAME", "COLUMN_TYPE", "COLUMN_LENGTH"})


@dataclass(frozen=True)
class SchemaRegistry:
    """Static catalogue and dynamic templates loaded from one resource directory."""

    catalogue: SchemaCatalogue
    templates: TemplateSet
    textual_databases: Mapping[str, TextualColumnSpec]
    textual_template: str
    settings: RegistrySettings

    def lookup(self, identifier: str) -> str:
        return self.catalogue.lookup(identifier)

    def all_identifiers(self) -> frozenset[str]:
        return self.catalogue.all_identifiers()

    def template_for(self, name: str) -> DynamicTemplate:
        return self.templates.template_for(name)

    def render(self, name: str, substitutions: Mapping[str, str]) -> str:
        return self.templates.render(name, substitutions)


def _build_from_manifest(manifest: Manifest, settings: RegistrySettings) -> SchemaRegistry:
    catalogue = SchemaCatalogue(
        {identifier: load_sql(path) for identifier, path in manifest.fixed.items()},
        sentinel=manifest.sentinel,
    )
    templates = TemplateSet(
        (
            DynamicTemplate(name=entry.name, text=load_sql(entry.path), tokens=frozenset(entry.tokens))
            for entry in manifest.dynamic.values()
        ),
        strict=settings.strict_substitutions,
    )

    if manifest.textual_databases:
        if manifest.textual_template not in templates:
            raise TemplateDefinitionError(
                f"Textual databases need template '{manifest.textual_template}'"
            )
        clashes = catalogue.all_identifiers().intersection(manifest.textual_databases)
        if clashes:
            raise CatalogueDefinitionError(
                f"Textual databases clash with fixed schemas: {', '.join(sorted(clashes))}"
            )
        declared = templates.template_for(manifest.textual_template).tokens
        if declared != TEXTUAL_COLUMN_TOKENS:
            raise TemplateDefinitionError(
                f"Template '{manifest.textual_template}' must declare exactly "
                f"{', '.join(sorted(TEXTUAL_COLUMN_TOKENS))}"
            )

    return SchemaRegistry(
        catalogue=catalogue,
        templates=templates,
        textual_databases=MappingProxyType(dict(manifest.textual_databases)),
        textual_template=manifest.textual_template,
        settings=settings,
    )


def build_registry(settings: RegistrySettings | None = None) -> SchemaRegistry:
    """Load the manifest and every SQL resource it names into a new registry."""

    if settings is None:
        settings = resolve_registry_settings()

    manifest = load_manifest(settings.manifest_path)
    registry = _build_from_manifest(manifest, settings)
    log_event(
        logger,
        "testdbs.registry_built",
        resource_dir=settings.resource_dir,
        schemas=len(registry.catalogue),
        templates=len(registry.templates),
        sentinel=registry.catalogue.sentinel,
        strict_substitutions=settings.strict_substitutions,
    )
    return registry


@lru_cache(maxsize=None)
def default_registry() -> SchemaRegistry:
    """Process-wide registry, built on first use and reused afterwards."""

    return build_registry()


def lookup(identifier: str) -> str:
    return default_registry().lookup(identifier)


def all_identifiers() -> frozenset[str]:
    return default_registry().all_identifiers()


def template_for(name: str) -> DynamicTemplate:
    return default_registry().template_for(name)


def render(name: str, substitutions: Mapping[str, str]) -> str:
    return default_registry().render(name, substitutions)
