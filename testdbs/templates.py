"""Dynamic SQL templates and the placeholder substitution contract.

A template is SQL text with literal placeholder tokens (``COLUMN_LENGTH``,
``PROJECT_NAME``, ...). Each template declares its tokens explicitly; the
declared set is checked once when the template is built and is what ``render``
validates substitutions against.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from testdbs.errors import (
    InvalidSubstitutionError,
    MissingSubstitutionError,
    TemplateDefinitionError,
    UnknownTemplateError,
    UnusedSubstitutionError,
)
from testdbs.observability import log_event, token_log_fields

logger = logging.getLogger(__name__)


def validate_tokens(name: str, text: str, tokens: Iterable[str]) -> frozenset[str]:
    """Check that ``tokens`` can be substituted unambiguously in ``text``.

    Every token must be non-empty, occur in the text, and must not be a
    substring of another token of the same template.
    """

    declared = frozenset(tokens)
    if not text.strip():
        raise TemplateDefinitionError(f"Template '{name}' has empty text")

    for token in sorted(declared):
        if not isinstance(token, str) or not token.strip():
            raise TemplateDefinitionError(f"Template '{name}' declares an empty token")
        if token not in text:
            raise TemplateDefinitionError(f"Token '{token}' does not occur in template '{name}'")
        for other in declared:
            if other != token and token in other:
                raise TemplateDefinitionError(
                    f"Token '{token}' is a substring of '{other}' in template '{name}'"
                )
    return declared


def _token_pattern(tokens: frozenset[str]) -> re.Pattern[str]:
    ordered = sorted(tokens, key=lambda token: (-len(token), token))
    return re.compile("|".join(re.escape(token) for token in ordered))


@dataclass(frozen=True)
class DynamicTemplate:
    """SQL template text together with its declared placeholder tokens."""

    name: str
    text: str
    tokens: frozenset[str]
    _pattern: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        declared = validate_tokens(self.name, self.text, self.tokens)
        object.__setattr__(self, "tokens", declared)
        if declared:
            object.__setattr__(self, "_pattern", _token_pattern(declared))

    def render(self, substitutions: Mapping[str, str], *, strict: bool = True) -> str:
        return render(self, substitutions, strict=strict)


def render(
    template: DynamicTemplate, substitutions: Mapping[str, str], *, strict: bool = True
) -> str:
    """Replace every declared token of ``template`` with its substitution value.

    Replacement is literal and single pass: values are inserted as-is and never
    scanned for further tokens. Undeclared keys raise ``UnusedSubstitutionError``
    when ``strict``; otherwise they are ignored and logged.
    """

    missing = template.tokens.difference(substitutions)
    if missing:
        raise MissingSubstitutionError(template.name, missing)

    undeclared = set(substitutions).difference(template.tokens)
    if undeclared:
        if strict:
            raise UnusedSubstitutionError(template.name, undeclared)
        log_event(
            logger,
            "testdbs.unused_substitutions_ignored",
            level=logging.WARNING,
            **token_log_fields(template.name, undeclared),
        )

    invalid = {
        token
        for token in template.tokens
        if not isinstance(substitutions[token], str)
        or any(other in substitutions[token] for other in template.tokens)
    }
    if invalid:
        raise InvalidSubstitutionError(template.name, invalid)

    if template._pattern is None:
        return template.text

    rendered = template._pattern.sub(lambda match: substitutions[match.group(0)], template.text)
    leftover = {token for token in template.tokens if token in rendered}
    if leftover:
        raise InvalidSubstitutionError(template.name, leftover)

    log_event(
        logger,
        "testdbs.template_rendered",
        level=logging.DEBUG,
        **token_log_fields(template.name, template.tokens),
    )
    return rendered


class TemplateSet:
    """Read-only collection of named dynamic templates."""

    def __init__(self, templates: Iterable[DynamicTemplate], *, strict: bool = True) -> None:
        by_name: dict[str, DynamicTemplate] = {}
        for template in templates:
            if template.name in by_name:
                raise TemplateDefinitionError(f"Duplicate template name: '{template.name}'")
            by_name[template.name] = template
        self._templates: Mapping[str, DynamicTemplate] = MappingProxyType(by_name)
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def template_for(self, name: str) -> DynamicTemplate:
        try:
            return self._templates[name]
        except (KeyError, TypeError):
            raise UnknownTemplateError(name) from None

    def render(self, name: str, substitutions: Mapping[str, str]) -> str:
        return render(self.template_for(name), substitutions, strict=self._strict)

    def names(self) -> frozenset[str]:
        return frozenset(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[DynamicTemplate]:
        return iter(self._templates[name] for name in sorted(self._templates))
