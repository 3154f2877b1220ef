from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
import re
import shutil
from typing import List

from config.constants import (
    AWS_REGION_ENV_VARS,
    GCLOUD_CONFIG_TIMEOUT_SECONDS,
    GCP_PROJECT_ENV_VARS,
    PLACEHOLDER_SOURCES,
)
from shared.models.discovery import DiscoveryCommand
from shared.security.policy_loader import get_max_timeout
from shared.security_tools.common import run_command
from shared.utils.env import UNSET_SENTINELS, first_env_value

logger = logging.getLogger(__name__)

# Matches ${NAME} or $NAME not followed by another identifier character.
_PLACEHOLDER_RE = re.compile(
    r"\$\{(?P<braced>%(names)s)\}|\$(?P<bare>%(names)s)(?![A-Za-z0-9_])"
    % {"names": "|".join(sorted(PLACEHOLDER_SOURCES, key=len, reverse=True))}
)


def gcp_project_from_env(environ: Mapping[str, str] | None = None) -> str | None:
    return first_env_value(GCP_PROJECT_ENV_VARS, environ=environ)


def aws_region_from_env(environ: Mapping[str, str] | None = None) -> str | None:
    return first_env_value(AWS_REGION_ENV_VARS, environ=environ)


def gcloud_config_project() -> str | None:
    """Read the active project from the local gcloud configuration."""
    if shutil.which("gcloud") is None:
        return None
    result = run_command(
        ["gcloud", "config", "get-value", "project"],
        timeout_seconds=get_max_timeout("gcloud_config_lookup") or GCLOUD_CONFIG_TIMEOUT_SECONDS,
    )
    if result is None or result.returncode != 0:
        return None
    lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    if not lines:
        return None
    project = lines[-1]
    return None if project.lower() in UNSET_SENTINELS else project


def _placeholder_sources(commands: List[DiscoveryCommand]) -> set[str]:
    sources: set[str] = set()
    for cmd in commands:
        for match in _PLACEHOLDER_RE.finditer(cmd.command):
            name = match.group("braced") or match.group("bare")
            sources.add(PLACEHOLDER_SOURCES[name])
    return sources


def resolve_command_placeholders(
    commands: List[DiscoveryCommand],
    environ: Mapping[str, str] | None = None,
    project_lookup: Callable[[], str | None] = gcloud_config_project,
) -> List[DiscoveryCommand]:
    """
    Replace placeholder tokens such as ``$GOOGLE_PROJECT`` with concrete values.

    Best effort: a token with no resolvable value is left in place, and the
    command later fails validation or execution on its own.
    """
    wanted = _placeholder_sources(commands)
    if not wanted:
        return list(commands)

    values: dict[str, str] = {}
    if "gcp_project" in wanted:
        project = gcp_project_from_env(environ) or project_lookup()
        if project:
            values["gcp_project"] = project
    if "aws_region" in wanted:
        region = aws_region_from_env(environ)
        if region:
            values["aws_region"] = region

    if not values:
        logger.info("placeholder_unresolved sources=%s", ",".join(sorted(wanted)))
        return list(commands)

    def _substitute(match: re.Match[str]) -> str:
        name = match.group("braced") or match.group("bare")
        return values.get(PLACEHOLDER_SOURCES[name], match.group(0))

    resolved: List[DiscoveryCommand] = []
    for cmd in commands:
        text = _PLACEHOLDER_RE.sub(_substitute, cmd.command)
        if text != cmd.command:
            logger.info("placeholder_resolved before=%r after=%r", cmd.command, text)
            cmd = cmd.model_copy(update={"command": text})
        resolved.append(cmd)
    return resolved
