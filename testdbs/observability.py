from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping


def _format_value(value: object) -> str:
    if isinstance(value, (set, frozenset, list, tuple)):
        return ",".join(sorted(str(item) for item in value))
    return str(value).strip()


def _kv_pairs(fields: Mapping[str, object]) -> str:
    parts: list[str] = []
    for key, value in fields.items():
        if value is None:
            continue
        text = _format_value(value)
        if not text:
            continue
        parts.append(f"{key}={text}")
    return " ".join(parts)


def log_event(
    logger: logging.Logger, message: str, *, level: int = logging.INFO, **fields: object
) -> None:
    """Emit a stable structured log line.

    Test harness logs are plain text, so key fields are appended as ``k=v`` tokens.
    Collections are rendered as sorted comma-separated values.
    """

    suffix = _kv_pairs(fields)
    if suffix:
        logger.log(level, "%s %s", message, suffix)
    else:
        logger.log(level, "%s", message)


def token_log_fields(template: str, tokens: Iterable[str]) -> dict[str, object]:
    """Standard fields for template related log lines."""

    return {"template": template, "tokens": frozenset(tokens)}
