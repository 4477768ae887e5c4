from __future__ import annotations

from pathlib import Path

import pytest

from testdbs.errors import ResourceError
from testdbs.resources import TextualColumnSpec, load_manifest, load_sql

MANIFEST = """
sentinel: sentinel

fixed:
  db000: fixed/DB000.sql
  sentinel: fixed/sentinel.sql

dynamic:
  benchmark_add_row:
    path: dynamic/benchmark_add_row.sql
    tokens: [VALUE_COLUMN_1, VALUE_COLUMN_2]

textual_columns:
  template: benchmark_add_row
  databases:
    db012: {column_type: VARCHAR, column_length: 50}
"""


def test_load_sql_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ResourceError):
        load_sql(tmp_path / "missing.sql")


def test_load_sql_raises_for_empty_file(tmp_path: Path) -> None:
    empty_file = tmp_path / "empty.sql"
    empty_file.write_text("   \n\t", encoding="utf-8")

    with pytest.raises(ResourceError):
        load_sql(empty_file)


def test_load_sql_returns_text_unchanged(tmp_path: Path) -> None:
    sql_file = tmp_path / "db.sql"
    sql_file.write_text("CREATE DATABASE db000;\n", encoding="utf-8")

    assert load_sql(sql_file) == "CREATE DATABASE db000;\n"


def test_load_manifest_resolves_paths(make_resource_dir) -> None:
    root = make_resource_dir(MANIFEST, {})

    manifest = load_manifest(root / "testdbs.yaml")

    assert manifest.sentinel == "sentinel"
    assert manifest.fixed["db000"] == (root / "fixed" / "DB000.sql").resolve()
    assert manifest.dynamic["benchmark_add_row"].tokens == ("VALUE_COLUMN_1", "VALUE_COLUMN_2")
    assert manifest.textual_template == "benchmark_add_row"
    assert manifest.textual_databases == {"db012": TextualColumnSpec("VARCHAR", 50)}


def test_load_manifest_rejects_duplicate_identifiers(make_resource_dir) -> None:
    root = make_resource_dir(
        """
sentinel: sentinel
fixed:
  db000: fixed/DB000.sql
  db000: fixed/DB001.sql
  sentinel: fixed/sentinel.sql
""",
        {},
    )

    with pytest.raises(ResourceError, match="duplicate key 'db000'"):
        load_manifest(root / "testdbs.yaml")


def test_load_manifest_requires_sentinel(make_resource_dir) -> None:
    root = make_resource_dir("fixed:\n  db000: fixed/DB000.sql\n", {})

    with pytest.raises(ResourceError, match="sentinel"):
        load_manifest(root / "testdbs.yaml")


def test_load_manifest_rejects_paths_outside_resource_dir(make_resource_dir) -> None:
    root = make_resource_dir(
        """
sentinel: sentinel
fixed:
  sentinel: ../sentinel.sql
""",
        {},
    )

    with pytest.raises(ResourceError, match="escapes"):
        load_manifest(root / "testdbs.yaml")


def test_load_manifest_rejects_duplicate_tokens(make_resource_dir) -> None:
    root = make_resource_dir(
        """
sentinel: sentinel
dynamic:
  t:
    path: dynamic/t.sql
    tokens: [A, A]
""",
        {},
    )

    with pytest.raises(ResourceError, match="duplicates"):
        load_manifest(root / "testdbs.yaml")


@pytest.mark.parametrize("length", ["50", 0, -1, True])
def test_load_manifest_rejects_bad_textual_column_length(make_resource_dir, length) -> None:
    root = make_resource_dir(
        f"""
sentinel: sentinel
textual_columns:
  databases:
    db012: {{column_type: VARCHAR, column_length: {length!r}}}
""",
        {},
    )

    with pytest.raises(ResourceError, match="column_length"):
        load_manifest(root / "testdbs.yaml")


def test_load_manifest_raises_for_malformed_yaml(make_resource_dir) -> None:
    root = make_resource_dir("sentinel: [unclosed\n", {})

    with pytest.raises(ResourceError, match="Malformed"):
        load_manifest(root / "testdbs.yaml")


def test_load_manifest_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ResourceError):
        load_manifest(tmp_path / "testdbs.yaml")
