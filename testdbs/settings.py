from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BUNDLED_RESOURCE_DIR = Path(__file__).resolve().parent / "resources"
MANIFEST_FILE_NAME = "testdbs.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RegistrySettings:
    resource_dir: Path = BUNDLED_RESOURCE_DIR
    strict_substitutions: bool = True

    @property
    def manifest_path(self) -> Path:
        return self.resource_dir / MANIFEST_FILE_NAME


def _parse_bool(raw: str | None, *, default: bool, name: str) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got '{raw}'")


def resolve_registry_settings() -> RegistrySettings:
    resource_dir_env = os.getenv("TESTDBS_RESOURCE_DIR")
    resource_dir = Path(resource_dir_env).expanduser() if resource_dir_env else BUNDLED_RESOURCE_DIR

    strict = _parse_bool(
        os.getenv("TESTDBS_STRICT_SUBSTITUTIONS"),
        default=True,
        name="TESTDBS_STRICT_SUBSTITUTIONS",
    )

    return RegistrySettings(resource_dir=resource_dir, strict_substitutions=strict)
