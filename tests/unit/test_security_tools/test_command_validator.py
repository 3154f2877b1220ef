from __future__ import annotations

import pytest

from shared.models.errors import CommandValidationError
from shared.security.policy_loader import get_guardrails
from shared.security_tools.command_validator import forbidden_patterns, is_safe_command, validate_command


@pytest.fixture(autouse=True)
def _fresh_policy_cache():
    get_guardrails.cache_clear()
    yield
    get_guardrails.cache_clear()


@pytest.mark.parametrize(
    "command",
    [
        "kubectl get pods",
        "ls -la",
        "GCLOUD run services list",
        "gcloudrun services list",
        "terraform show",
    ],
)
def test_rejects_commands_without_cloud_prefix(command: str) -> None:
    with pytest.raises(CommandValidationError, match="must start with 'gcloud' or 'aws'"):
        validate_command(command)


@pytest.mark.parametrize("command", ["", "   ", "\t\n"])
def test_rejects_empty_commands(command: str) -> None:
    with pytest.raises(CommandValidationError, match="empty command"):
        validate_command(command)


def test_accepts_read_only_gcloud_and_aws_commands() -> None:
    validate_command("gcloud run services list --project=p --region=r --format=json")
    validate_command("aws ec2 describe-instances --region us-east-1 --output json")
    validate_command("gcloud sql instances describe main-db --project=p --format=json")
    validate_command("aws s3api get-bucket-versioning --bucket assets --output json")


def test_rejects_mutating_verbs() -> None:
    with pytest.raises(CommandValidationError, match="'deploy'"):
        validate_command("gcloud run services deploy x")
    with pytest.raises(CommandValidationError, match="'create'"):
        validate_command("aws s3api create-bucket --bucket x")


def test_denylist_wins_over_allowed_verb() -> None:
    with pytest.raises(CommandValidationError, match="';'"):
        validate_command("gcloud run services list ; rm -rf /")
    assert not is_safe_command("gcloud run services list --format=json | sh")
    assert not is_safe_command("aws s3 ls $(whoami) --region us-east-1")
    assert not is_safe_command("gcloud compute instances list --filter=`id`")


def test_denylist_is_case_insensitive() -> None:
    assert not is_safe_command("gcloud run services DELETE api")
    assert not is_safe_command("aws ecs list-services --FORCE")


def test_denylist_matches_substrings_inside_field_names() -> None:
    # Plain substring matching is conservative: createTime trips "create".
    assert not is_safe_command("gcloud sql instances list --format=value(createTime)")


def test_requires_provider_read_action() -> None:
    with pytest.raises(CommandValidationError, match="'list' or 'describe'"):
        validate_command("gcloud config get-value project")
    with pytest.raises(CommandValidationError, match="list-\\*, describe-\\*, or get-\\*"):
        validate_command("aws s3 ls --region us-east-1")


def test_gcloud_read_action_must_be_standalone_token() -> None:
    assert not is_safe_command("gcloud run services listing --format=json")
    assert is_safe_command("gcloud run services list --format=json")


def test_guardrail_policy_patterns_are_enforced() -> None:
    assert "print-access-token" in forbidden_patterns()
    assert not is_safe_command("gcloud auth print-access-token list")
    assert not is_safe_command("aws secretsmanager get-secret-value --secret-id db --region us-east-1")


def test_guardrail_policy_can_only_add_patterns(tmp_path, monkeypatch) -> None:
    (tmp_path / "guardrails.yaml").write_text(
        "guardrails:\n  blocked_patterns:\n    - describe-db-snapshots\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("INFRAPLANE_POLICY_DIR", str(tmp_path))

    patterns = forbidden_patterns()

    assert "describe-db-snapshots" in patterns
    assert "delete" in patterns
    assert not is_safe_command("aws rds describe-db-snapshots --region us-east-1")
    assert is_safe_command("aws rds describe-db-instances --region us-east-1")


def test_missing_policy_file_keeps_builtin_denylist(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("INFRAPLANE_POLICY_DIR", str(tmp_path / "absent"))

    assert is_safe_command("gcloud auth print-access-token list")
    assert not is_safe_command("gcloud run services delete api")
