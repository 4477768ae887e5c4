from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from testdbs.errors import CatalogueDefinitionError, UnknownIdentifierError

IDENTIFIER_PATTERN = re.compile(r"^[a-z0-9_]+$")


class SchemaCatalogue:
    """Read-only mapping from database identifier to its complete schema text.

    The sentinel entry is applied by provisioning code after every other entry;
    a database created from it means the whole catalogue was applied. The
    catalogue itself implies no order among the other entries.
    """

    def __init__(self, schemas: Mapping[str, str], *, sentinel: str) -> None:
        for identifier, text in schemas.items():
            if not isinstance(identifier, str) or not IDENTIFIER_PATTERN.match(identifier):
                raise CatalogueDefinitionError(f"Invalid database identifier: {identifier!r}")
            if not isinstance(text, str) or not text.strip():
                raise CatalogueDefinitionError(f"Schema text for '{identifier}' is empty")
        if sentinel not in schemas:
            raise CatalogueDefinitionError(f"Sentinel '{sentinel}' is not registered")

        self._schemas: Mapping[str, str] = MappingProxyType(dict(schemas))
        self._identifiers = frozenset(self._schemas)
        self._sentinel = sentinel

    @property
    def sentinel(self) -> str:
        return self._sentinel

    def lookup(self, identifier: str) -> str:
        try:
            return self._schemas[identifier]
        except (KeyError, TypeError):
            raise UnknownIdentifierError(identifier) from None

    def all_identifiers(self) -> frozenset[str]:
        return self._identifiers

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._identifiers

    def __len__(self) -> int:
        return len(self._schemas)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._identifiers))

    def __repr__(self) -> str:
        return f"SchemaCatalogue(entries={len(self)}, sentinel={self._sentinel!r})"
