from __future__ import annotations

import asyncio

import pytest

from agents.discovery.command_generator.agent import agent as command_generator_agent
from agents.discovery.output_parser.agent import agent as output_parser_agent
from agents.discovery.llm_client import (
    AdkDiscoveryLLM,
    build_discovery_commands_prompt,
    build_discovery_output_prompt,
    extract_json,
)
from shared.models.application import Application
from shared.models.discovery import (
    CloudProvider,
    CodeContext,
    CommandOutput,
    DiscoveryCommand,
    FileContent,
    LiveResourceStatus,
)
from shared.models.errors import DiscoveryLLMError


def _app() -> Application:
    return Application(name="calendar", description="family calendar", source_path="/srv/calendar", provider=CloudProvider.GCP)


def test_agents_are_named_for_model_routing() -> None:
    assert command_generator_agent.name == "discovery_command_generator"
    assert output_parser_agent.name == "discovery_output_parser"
    assert "secrets versions access" in command_generator_agent.instruction
    assert "provisioning" in output_parser_agent.instruction


def test_extract_json_plain_and_fenced() -> None:
    assert extract_json('{"commands": []}') == {"commands": []}
    assert extract_json('```json\n{"commands": [{"command": "gcloud run services list"}]}\n```') == {
        "commands": [{"command": "gcloud run services list"}]
    }


def test_extract_json_tolerates_surrounding_prose() -> None:
    text = 'Here are the commands:\n{"commands": [{"command": "aws ecs list-clusters"}]}\nLet me know.'

    assert extract_json(text)["commands"][0]["command"] == "aws ecs list-clusters"


@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{not json}"])
def test_extract_json_rejects_unusable_responses(text: str) -> None:
    with pytest.raises(DiscoveryLLMError):
        extract_json(text)


def test_commands_prompt_lists_files() -> None:
    context = CodeContext(files=[FileContent(path="deploy/deploy.sh", content="gcloud run deploy api")])

    prompt = build_discovery_commands_prompt(_app(), context)

    assert "Application: calendar" in prompt
    assert "Provider: gcp" in prompt
    assert "Found 1 infrastructure-relevant files:" in prompt
    assert "--- deploy/deploy.sh ---\ngcloud run deploy api" in prompt


def test_commands_prompt_without_files_asks_for_empty_array() -> None:
    prompt = build_discovery_commands_prompt(_app(), CodeContext())

    assert "Return an empty commands array." in prompt


def test_output_prompt_includes_errors_and_output() -> None:
    outputs = [
        CommandOutput(
            command=DiscoveryCommand(description="Services", command="gcloud run services list", resource_type="Cloud Run Service"),
            output='[{"name": "api"}]',
        ),
        CommandOutput(
            command=DiscoveryCommand(description="Databases", command="gcloud sql instances list", resource_type="Cloud SQL Instance"),
            error="PERMISSION_DENIED",
        ),
    ]

    prompt = build_discovery_output_prompt(_app(), outputs)

    assert "--- Command 1: Services ---" in prompt
    assert 'Output:\n[{"name": "api"}]' in prompt
    assert "--- Command 2: Databases ---" in prompt
    assert "Error: PERMISSION_DENIED" in prompt
    assert "Resource Type: Cloud SQL Instance" in prompt


def test_adk_client_validates_command_payload(monkeypatch) -> None:
    client = AdkDiscoveryLLM()
    prompts: list[str] = []

    async def _fake_ask(agent, prompt: str) -> str:
        prompts.append(prompt)
        return '```json\n{"commands": [{"description": "Services", "command": "gcloud run services list", "resource_type": "Cloud Run Service"}]}\n```'

    monkeypatch.setattr(client, "_ask", _fake_ask)

    result = asyncio.run(client.generate_discovery_commands(_app(), CodeContext()))

    assert [c.command for c in result.commands] == ["gcloud run services list"]
    assert "Application: calendar" in prompts[0]


def test_adk_client_parses_resources_with_loose_values(monkeypatch) -> None:
    client = AdkDiscoveryLLM()

    async def _fake_ask(agent, prompt: str) -> str:
        return (
            '{"resources": [{"resource_type": "Cloud Run Service", "name": "api", "provider": "gcp",'
            ' "region": "us-central1", "status": "ACTIVE", "details": {"min_instances": 0, "public": true}}]}'
        )

    monkeypatch.setattr(client, "_ask", _fake_ask)

    result = asyncio.run(client.parse_discovery_output(_app(), []))

    [resource] = result.resources
    assert resource.status == LiveResourceStatus.ACTIVE
    assert resource.details == {"min_instances": "0", "public": "True"}


def test_adk_client_wraps_schema_errors(monkeypatch) -> None:
    client = AdkDiscoveryLLM()

    async def _fake_ask(agent, prompt: str) -> str:
        return '{"commands": [{"description": "missing command field"}]}'

    monkeypatch.setattr(client, "_ask", _fake_ask)

    with pytest.raises(DiscoveryLLMError, match="unexpected commands payload"):
        asyncio.run(client.generate_discovery_commands(_app(), CodeContext()))
