"""
LLM collaborators for live-resource discovery.

Two single-turn ADK agents back the discovery pipeline: one proposes
read-only CLI commands from deploy scripts, the other turns raw CLI output
into LiveResource records. Each call runs in a fresh in-memory session so
no state leaks between discovery invocations.
"""
from __future__ import annotations

import json
import logging
import uuid
from typing import Any, List, Protocol

from google.adk.agents import Agent
from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai.types import Content, Part
from pydantic import ValidationError

from agents.discovery.command_generator.agent import agent as command_generator_agent
from agents.discovery.output_parser.agent import agent as output_parser_agent
from config.settings import app_name
from shared.models.application import Application
from shared.models.discovery import (
    CodeContext,
    CommandOutput,
    DiscoveryCommandResult,
    LiveResourceParseResult,
)
from shared.models.errors import DiscoveryLLMError

logger = logging.getLogger(__name__)

DISCOVERY_USER_ID = "infraplane-discovery"


class DiscoveryLLM(Protocol):
    async def generate_discovery_commands(
        self, app: Application, code_context: CodeContext
    ) -> DiscoveryCommandResult:
        ...

    async def parse_discovery_output(
        self, app: Application, outputs: List[CommandOutput]
    ) -> LiveResourceParseResult:
        ...


def build_discovery_commands_prompt(app: Application, code_context: CodeContext) -> str:
    lines = [
        "Analyze the following deploy scripts and generate CLI commands to discover live cloud resources.",
        "",
        f"Application: {app.name}",
        f"Description: {app.description}",
        f"Provider: {app.provider.value}",
        "",
    ]
    if not code_context.files:
        lines.append("No deploy scripts or infrastructure files were found. Return an empty commands array.")
        return "\n".join(lines) + "\n"

    lines.append(f"Found {len(code_context.files)} infrastructure-relevant files:")
    lines.append("")
    for file in code_context.files:
        lines.append(f"--- {file.path} ---")
        lines.append(file.content)
        lines.append("")
    return "\n".join(lines) + "\n"


def build_discovery_output_prompt(app: Application, outputs: List[CommandOutput]) -> str:
    lines = [
        "Parse the following CLI outputs and extract live resource information.",
        "",
        f"Application: {app.name}",
        f"Provider: {app.provider.value}",
        "",
    ]
    for index, item in enumerate(outputs, start=1):
        lines.append(f"--- Command {index}: {item.command.description} ---")
        lines.append(f"Resource Type: {item.command.resource_type}")
        lines.append(f"Command: {item.command.command}")
        if item.error:
            lines.append(f"Error: {item.error}")
        if item.output:
            lines.append("Output:")
            lines.append(item.output)
        lines.append("")
    return "\n".join(lines) + "\n"


def extract_json(text: str) -> dict[str, Any]:
    """
    Decode the JSON object in a model response.

    Tolerates markdown code fences and prose around the object. Raises
    DiscoveryLLMError when no JSON object can be recovered.
    """
    candidate = text.strip()
    if not candidate:
        raise DiscoveryLLMError("empty response")
    if candidate.startswith("```"):
        lines = [line for line in candidate.splitlines() if not line.strip().startswith("```")]
        candidate = "\n".join(lines).strip()
    try:
        decoded = json.loads(candidate)
    except json.JSONDecodeError:
        start = candidate.find("{")
        end = candidate.rfind("}")
        if start == -1 or end <= start:
            raise DiscoveryLLMError("response contains no JSON object") from None
        try:
            decoded = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError as exc:
            raise DiscoveryLLMError(f"invalid JSON in response: {exc}") from exc
    if not isinstance(decoded, dict):
        raise DiscoveryLLMError("response JSON is not an object")
    return decoded


class AdkDiscoveryLLM:
    """DiscoveryLLM backed by google-adk agents."""

    def __init__(
        self,
        command_agent: Agent | None = None,
        parser_agent: Agent | None = None,
    ) -> None:
        self._command_agent = command_agent or command_generator_agent
        self._parser_agent = parser_agent or output_parser_agent

    async def _ask(self, agent: Agent, prompt: str) -> str:
        session_service = InMemorySessionService()
        runner = Runner(
            app_name=app_name(),
            agent=agent,
            session_service=session_service,
        )
        session_id = uuid.uuid4().hex
        await session_service.create_session(
            app_name=app_name(),
            user_id=DISCOVERY_USER_ID,
            session_id=session_id,
        )

        final_parts: list[str] = []
        try:
            async for event in runner.run_async(
                user_id=DISCOVERY_USER_ID,
                session_id=session_id,
                new_message=Content(role="user", parts=[Part(text=prompt)]),
            ):
                if not event.is_final_response() or event.content is None:
                    continue
                for part in event.content.parts or []:
                    if isinstance(part.text, str) and part.text.strip():
                        final_parts.append(part.text)
        except Exception as exc:
            logger.warning("llm_call_failed agent=%s error=%s", agent.name, exc)
            raise DiscoveryLLMError(f"{agent.name}: {exc}") from exc

        text = "\n".join(final_parts)
        logger.debug("llm_response agent=%s chars=%s", agent.name, len(text))
        return text

    async def generate_discovery_commands(
        self, app: Application, code_context: CodeContext
    ) -> DiscoveryCommandResult:
        prompt = build_discovery_commands_prompt(app, code_context)
        payload = extract_json(await self._ask(self._command_agent, prompt))
        try:
            return DiscoveryCommandResult.model_validate(payload)
        except ValidationError as exc:
            raise DiscoveryLLMError(f"unexpected commands payload: {exc}") from exc

    async def parse_discovery_output(
        self, app: Application, outputs: List[CommandOutput]
    ) -> LiveResourceParseResult:
        prompt = build_discovery_output_prompt(app, outputs)
        payload = extract_json(await self._ask(self._parser_agent, prompt))
        try:
            return LiveResourceParseResult.model_validate(payload)
        except ValidationError as exc:
            raise DiscoveryLLMError(f"unexpected resources payload: {exc}") from exc
