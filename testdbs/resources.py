"""Resource loading boundary: the bundled manifest and SQL files.

Everything here runs once while the registry is built. After that the SQL text
lives in memory and nothing is re-read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from testdbs.errors import ResourceError
from testdbs.observability import log_event

logger = logging.getLogger(__name__)


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses duplicate mapping keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):  # noqa: ANN001, ANN201
        seen: set[object] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    None, None, f"duplicate key '{key}'", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


@dataclass(frozen=True)
class TemplateEntry:
    name: str
    path: Path
    tokens: tuple[str, ...]


@dataclass(frozen=True)
class TextualColumnSpec:
    """Column layout of a database generated from the textual columns template."""

    column_type: str
    column_length: int


@dataclass(frozen=True)
class Manifest:
    """Parsed ``testdbs.yaml``: which files back which identifiers and templates."""

    sentinel: str
    fixed: dict[str, Path] = field(default_factory=dict)
    dynamic: dict[str, TemplateEntry] = field(default_factory=dict)
    textual_template: str = "textual_columns"
    textual_databases: dict[str, TextualColumnSpec] = field(default_factory=dict)


def load_sql(path: str | Path) -> str:
    """Load SQL text from a file and validate that it is not empty."""

    file_path = Path(path)
    if not file_path.is_file():
        raise ResourceError(f"SQL file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    if not content.strip():
        raise ResourceError(f"SQL file is empty: {file_path}")

    return content


def _resolve_resource_path(resource_dir: Path, raw: object, *, owner: str) -> Path:
    if not isinstance(raw, str) or not raw.strip():
        raise ResourceError(f"Missing resource path for '{owner}'")
    root = resource_dir.resolve()
    path = (root / raw.strip()).resolve()
    if root not in path.parents:
        raise ResourceError(f"Resource path for '{owner}' escapes {root}: {raw}")
    return path


def _require_mapping(value: Any, *, section: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ResourceError(f"Manifest section '{section}' must be a mapping")
    return value


def _parse_tokens(raw: Any, *, owner: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ResourceError(f"tokens for template '{owner}' must be a list of strings")
    if len(set(raw)) != len(raw):
        raise ResourceError(f"tokens for template '{owner}' contain duplicates")
    return tuple(raw)


def _parse_textual(raw: Any) -> tuple[str, dict[str, TextualColumnSpec]]:
    section = _require_mapping(raw, section="textual_columns")
    template = str(section.get("template") or "textual_columns")
    databases = _require_mapping(section.get("databases"), section="textual_columns.databases")

    specs: dict[str, TextualColumnSpec] = {}
    for identifier, conf in databases.items():
        conf = _require_mapping(conf, section=f"textual_columns.databases.{identifier}")
        column_type = conf.get("column_type")
        column_length = conf.get("column_length")
        if not isinstance(column_type, str) or not column_type.strip():
            raise ResourceError(f"column_type is required for textual database '{identifier}'")
        if isinstance(column_length, bool) or not isinstance(column_length, int) or column_length <= 0:
            raise ResourceError(
                f"column_length must be a positive integer for textual database '{identifier}'"
            )
        specs[str(identifier)] = TextualColumnSpec(
            column_type=column_type.strip(), column_length=column_length
        )
    return template, specs


def parse_manifest(data: Any, resource_dir: Path) -> Manifest:
    """Turn raw manifest data into a ``Manifest``; paths are resolved against ``resource_dir``."""

    root = _require_mapping(data, section="<root>")

    sentinel = root.get("sentinel")
    if not isinstance(sentinel, str) or not sentinel.strip():
        raise ResourceError("Manifest is missing the 'sentinel' identifier")

    fixed = {
        str(identifier): _resolve_resource_path(resource_dir, raw, owner=str(identifier))
        for identifier, raw in _require_mapping(root.get("fixed"), section="fixed").items()
    }

    dynamic: dict[str, TemplateEntry] = {}
    for name, conf in _require_mapping(root.get("dynamic"), section="dynamic").items():
        conf = _require_mapping(conf, section=f"dynamic.{name}")
        dynamic[str(name)] = TemplateEntry(
            name=str(name),
            path=_resolve_resource_path(resource_dir, conf.get("path"), owner=str(name)),
            tokens=_parse_tokens(conf.get("tokens"), owner=str(name)),
        )

    textual_template, textual_databases = _parse_textual(root.get("textual_columns"))

    return Manifest(
        sentinel=sentinel.strip(),
        fixed=fixed,
        dynamic=dynamic,
        textual_template=textual_template,
        textual_databases=textual_databases,
    )


def load_manifest(path: str | Path) -> Manifest:
    """Load and parse the registry manifest; duplicate keys are rejected."""

    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise ResourceError(f"Manifest not found: {manifest_path}")

    try:
        data = yaml.load(manifest_path.read_text(encoding="utf-8"), Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ResourceError(f"Malformed manifest {manifest_path}: {exc}") from exc

    manifest = parse_manifest(data, manifest_path.parent)
    log_event(
        logger,
        "testdbs.manifest_loaded",
        path=manifest_path,
        fixed=len(manifest.fixed),
        dynamic=len(manifest.dynamic),
        textual=len(manifest.textual_databases),
        sentinel=manifest.sentinel,
    )
    return manifest
