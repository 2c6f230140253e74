"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def env_or_default(name: str, default: str) -> str:
    """Return ``name`` from the environment, falling back when unset or blank."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def split_list(values: Sequence[str] | str | None) -> tuple[str, ...]:
    """Flatten comma separated values, dropping blanks.

    Accepts either a single string (``"a,b"``) or a sequence of such strings, so
    repeated CLI flags and environment values share one code path.
    """

    if values is None:
        return ()
    raw = [values] if isinstance(values, str) else list(values)
    items: list[str] = []
    for entry in raw:
        for part in entry.split(","):
            stripped = part.strip()
            if stripped:
                items.append(stripped)
    return tuple(items)


def env_list(name: str) -> tuple[str, ...]:
    return split_list(os.getenv(name))
