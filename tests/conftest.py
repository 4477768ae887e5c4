"""Global pytest configuration.

Scripts are imported as `scripts.*`, so the project root must be importable
when tests run from any directory.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from testdbs.registry import SchemaRegistry, build_registry, default_registry
from testdbs.settings import RegistrySettings


def pytest_configure() -> None:
    root_dir = Path(__file__).resolve().parents[1]

    raw = str(root_dir)
    if raw not in sys.path:
        sys.path.insert(0, raw)


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture(scope="session")
def bundled_registry() -> SchemaRegistry:
    return build_registry(RegistrySettings())


@pytest.fixture(autouse=True)
def _reset_default_registry() -> Iterator[None]:
    default_registry.cache_clear()
    yield
    default_registry.cache_clear()


@pytest.fixture
def make_resource_dir(tmp_path: Path) -> Callable[[str, dict[str, str]], Path]:
    """Write a manifest plus SQL files under a fresh directory and return it."""

    def _make(manifest: str, files: dict[str, str]) -> Path:
        root = tmp_path / "resources"
        _write(root / "testdbs.yaml", manifest.lstrip())
        for relative, text in files.items():
            _write(root / relative, text)
        return root

    return _make
