from __future__ import annotations

import os
from collections.abc import Iterable, Mapping


UNSET_SENTINELS = {
    "",
    "none",
    "not_available",
    "n/a",
    "na",
    "null",
    "undefined",
    "(unset)",
}


def env_value(
    name: str,
    default: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    source = os.environ if environ is None else environ
    raw = source.get(name)
    if raw is None:
        return default
    value = raw.strip()
    if value.lower() in UNSET_SENTINELS:
        return default
    return value


def first_env_value(
    names: Iterable[str],
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Return the first set value among *names*, in order."""
    for name in names:
        value = env_value(name, environ=environ)
        if value:
            return value
    return None
