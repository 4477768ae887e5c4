from __future__ import annotations

from collections.abc import Iterable


class SchemaRegistryError(Exception):
    """Base error for testdbs."""


class UnknownIdentifierError(SchemaRegistryError, KeyError):
    """Raised when a database identifier is not registered."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Unknown test database identifier: '{identifier}'")
        self.identifier = identifier

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownTemplateError(SchemaRegistryError, KeyError):
    """Raised when a dynamic template name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown dynamic template: '{name}'")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class SubstitutionError(SchemaRegistryError, ValueError):
    """Raised when a template cannot be rendered with the given substitutions."""

    reason = "Invalid substitutions"

    def __init__(self, template: str, tokens: Iterable[str]) -> None:
        self.template = template
        self.tokens = tuple(sorted(tokens))
        super().__init__(f"{self.reason} for template '{template}': {', '.join(self.tokens)}")


class MissingSubstitutionError(SubstitutionError):
    reason = "Missing substitutions"


class UnusedSubstitutionError(SubstitutionError):
    reason = "Undeclared substitutions"


class InvalidSubstitutionError(SubstitutionError):
    reason = "Invalid substitution values"


class DefinitionError(SchemaRegistryError):
    """Raised at build time when bundled schema data is inconsistent."""


class CatalogueDefinitionError(DefinitionError):
    """Raised when the static catalogue cannot be constructed."""


class TemplateDefinitionError(DefinitionError):
    """Raised when a dynamic template declares unusable placeholder tokens."""


class ResourceError(SchemaRegistryError):
    """Raised when a bundled resource is missing, empty or malformed."""
