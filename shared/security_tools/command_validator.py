"""
Read-only command validation for discovery commands.

A command is accepted only when all of the following hold, checked in order:

1. it is not empty or whitespace-only;
2. it starts with ``gcloud `` or ``aws `` (case-sensitive);
3. it contains none of the forbidden substrings (case-insensitive), which
   cover mutating verbs, filesystem tokens, force flags and every shell
   metacharacter that could chain or inject a second command;
4. it carries a read-only action token for its provider: ``list`` or
   ``describe`` for gcloud, ``list-*``, ``describe-*`` or ``get-*`` for aws.

The denylist runs before the allow-list, so an allowed verb never excuses a
forbidden modifier elsewhere in the string.

The denylist is extended by ``blocked_patterns`` from the guardrail policy,
which by default rejects secret and credential reads such as
``aws secretsmanager get-secret-value`` even though ``get-*`` is a read verb.
"""
from __future__ import annotations

from config.constants import (
    ALLOWED_COMMAND_PREFIXES,
    AWS_READ_ACTION_PREFIXES,
    FORBIDDEN_PATTERNS,
    GCLOUD_READ_ACTIONS,
)
from shared.models.errors import CommandValidationError
from shared.security.policy_loader import get_blocked_patterns


def forbidden_patterns() -> tuple[str, ...]:
    """Built-in denylist plus any extra patterns from the guardrail policy."""
    extra = tuple(pattern for pattern in get_blocked_patterns() if pattern not in FORBIDDEN_PATTERNS)
    return FORBIDDEN_PATTERNS + extra


def _validate_gcloud(tokens: list[str]) -> None:
    if not any(token in GCLOUD_READ_ACTIONS for token in tokens):
        raise CommandValidationError("gcloud command must include 'list' or 'describe' action")


def _validate_aws(tokens: list[str]) -> None:
    if not any(token.startswith(AWS_READ_ACTION_PREFIXES) for token in tokens):
        raise CommandValidationError(
            "aws command must include a list-*, describe-*, or get-* action"
        )


def validate_command(command: str) -> None:
    """Raise CommandValidationError unless *command* is a safe read-only command."""
    stripped = (command or "").strip()
    if not stripped:
        raise CommandValidationError("empty command")

    if not stripped.startswith(ALLOWED_COMMAND_PREFIXES):
        raise CommandValidationError("command must start with 'gcloud' or 'aws'")

    lowered = stripped.lower()
    for pattern in forbidden_patterns():
        if pattern in lowered:
            raise CommandValidationError(f"command contains forbidden pattern {pattern!r}")

    tokens = stripped.split()
    if tokens[0] == "gcloud":
        _validate_gcloud(tokens[1:])
    else:
        _validate_aws(tokens[1:])


def is_safe_command(command: str) -> bool:
    try:
        validate_command(command)
    except CommandValidationError:
        return False
    return True
