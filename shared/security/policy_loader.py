"""
Policy Loader: loads and caches the guardrail YAML policy at startup.

The YAML file only ever adds restrictions on top of the built-in command
grammar in ``config.constants``; a missing or malformed file leaves the
built-in rules in force.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from shared.utils.env import env_value

logger = logging.getLogger(__name__)

_POLICY_DIR = Path(__file__).resolve().parents[2] / "config" / "policies"


def _policy_dir() -> Path:
    override = env_value("INFRAPLANE_POLICY_DIR")
    return Path(override) if override else _POLICY_DIR


def _load_yaml(filename: str) -> dict[str, Any]:
    """Load a YAML file from the policies directory."""
    path = _policy_dir() / filename
    if not path.exists():
        return {}
    try:
        with open(path, "r") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        logger.warning("policy_load_failed file=%s error=%s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=1)
def get_guardrails() -> dict[str, Any]:
    """Return the guardrails policy (cached singleton)."""
    data = _load_yaml("guardrails.yaml")
    guardrails = data.get("guardrails", {})
    return guardrails if isinstance(guardrails, dict) else {}


def get_blocked_patterns() -> tuple[str, ...]:
    """Return the extra blocked substrings, lower-cased."""
    raw = get_guardrails().get("blocked_patterns", [])
    if not isinstance(raw, list):
        return ()
    return tuple(str(item).lower() for item in raw if isinstance(item, str) and item.strip())


def get_max_timeout(name: str) -> int | None:
    """Return the max timeout for a named operation, or None if unlimited."""
    timeouts = get_guardrails().get("max_timeout_seconds", {})
    if not isinstance(timeouts, dict):
        return None
    value = timeouts.get(name)
    return int(value) if isinstance(value, (int, float)) else None
