"""Named test databases and helpers that render the dynamic schemes.

Fixed databases come straight from the catalogue. The textual-column databases
(``db012``, ``db014``..``db018``) share one template and differ only in column
type and length; the benchmark database takes its column length from the
caller.
"""

from __future__ import annotations

from testdbs.registry import SchemaRegistry, default_registry

# Dynamic schemes
BENCHMARK = "rdrs_bench"
BENCHMARK_TEMPLATE = "benchmark"
BENCHMARK_COLUMN_LENGTH = "COLUMN_LENGTH"

BENCHMARK_ADD_ROW_TEMPLATE = "benchmark_add_row"
BENCHMARK_ADD_ROW_VALUE_COLUMN_1 = "VALUE_COLUMN_1"
BENCHMARK_ADD_ROW_VALUE_COLUMN_2 = "VALUE_COLUMN_2"

HOPSWORKS_ADD_PROJECT_TEMPLATE = "hopsworks_add_project"
HOPSWORKS_ADD_PROJECT_PROJECT_NAME = "PROJECT_NAME"
HOPSWORKS_ADD_PROJECT_PROJECT_NUMBER = "PROJECT_NUMBER"

TEXTUAL_COLUMNS_DATABASE_NAME = "DATABASE_NAME"
TEXTUAL_COLUMNS_COLUMN_TYPE = "COLUMN_TYPE"
TEXTUAL_COLUMNS_COLUMN_LENGTH = "COLUMN_LENGTH"

DB012 = "db012"
DB014 = "db014"
DB015 = "db015"
DB016 = "db016"
DB017 = "db017"
DB018 = "db018"

TEXTUAL_DATABASES = frozenset({DB012, DB014, DB015, DB016, DB017, DB018})

# Fixed schemes
HOPSWORKS_DB_NAME = "hopsworks"

DB000 = "db000"
DB001 = "db001"
DB002 = "db002"
DB003 = "db003"
DB004 = "db004"
DB005 = "db005"
DB006 = "db006"
DB007 = "db007"
DB008 = "db008"
DB009 = "db009"
DB010 = "db010"
DB011 = "db011"
DB013 = "db013"
DB019 = "db019"
DB020 = "db020"
DB021 = "db021"
DB022 = "db022"
DB023 = "db023"
DB024 = "db024"

# If this database exists, every other database was created successfully.
SENTINEL_DB = "sentinel"

FIXED_DATABASES = frozenset(
    {
        HOPSWORKS_DB_NAME,
        DB000,
        DB001,
        DB002,
        DB003,
        DB004,
        DB005,
        DB006,
        DB007,
        DB008,
        DB009,
        DB010,
        DB011,
        DB013,
        DB019,
        DB020,
        DB021,
        DB022,
        DB023,
        DB024,
        SENTINEL_DB,
    }
)


def _registry(registry: SchemaRegistry | None) -> SchemaRegistry:
    return default_registry() if registry is None else registry


def _positive_length(value: int, *, name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return str(value)


def _project_number(value: int | str) -> str:
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    return _positive_length(value, name="project_number")


def textual_columns_scheme(
    database: str,
    column_type: str,
    column_length: int,
    registry: SchemaRegistry | None = None,
) -> str:
    """Render the textual columns template for ``database``."""

    if not database:
        raise ValueError("database is required")
    if not column_type:
        raise ValueError("column_type is required")

    reg = _registry(registry)
    return reg.render(
        reg.textual_template,
        {
            TEXTUAL_COLUMNS_DATABASE_NAME: database,
            TEXTUAL_COLUMNS_COLUMN_TYPE: column_type,
            TEXTUAL_COLUMNS_COLUMN_LENGTH: _positive_length(column_length, name="column_length"),
        },
    )


def benchmark_scheme(column_length: int, registry: SchemaRegistry | None = None) -> str:
    """Schema of the benchmark database with ``column_length`` wide value columns."""

    return _registry(registry).render(
        BENCHMARK_TEMPLATE,
        {BENCHMARK_COLUMN_LENGTH: _positive_length(column_length, name="column_length")},
    )


def benchmark_add_row(value_1: str, value_2: str, registry: SchemaRegistry | None = None) -> str:
    """Insert statement for one benchmark row; values are inserted as SQL literals."""

    return _registry(registry).render(
        BENCHMARK_ADD_ROW_TEMPLATE,
        {
            BENCHMARK_ADD_ROW_VALUE_COLUMN_1: value_1,
            BENCHMARK_ADD_ROW_VALUE_COLUMN_2: value_2,
        },
    )


def hopsworks_add_project(
    project_name: str, project_number: int | str, registry: SchemaRegistry | None = None
) -> str:
    if not project_name:
        raise ValueError("project_name is required")
    return _registry(registry).render(
        HOPSWORKS_ADD_PROJECT_TEMPLATE,
        {
            HOPSWORKS_ADD_PROJECT_PROJECT_NAME: project_name,
            HOPSWORKS_ADD_PROJECT_PROJECT_NUMBER: _project_number(project_number),
        },
    )


def provisionable_identifiers(registry: SchemaRegistry | None = None) -> frozenset[str]:
    """Every database ``create_schema`` can build: fixed plus textual databases."""

    reg = _registry(registry)
    return reg.all_identifiers() | frozenset(reg.textual_databases)


def create_schema(identifier: str, registry: SchemaRegistry | None = None) -> str:
    """Complete schema for a fixed or textual test database."""

    reg = _registry(registry)
    spec = reg.textual_databases.get(identifier)
    if spec is not None:
        return textual_columns_scheme(identifier, spec.column_type, spec.column_length, registry=reg)
    return reg.lookup(identifier)
