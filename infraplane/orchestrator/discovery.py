"""
Live-resource discovery: targeted and comprehensive phases plus merge.

Targeted phase:
  source analysis -> command generation (LLM) -> placeholder resolution
  -> validate + execute each command -> output parsing (LLM)

Comprehensive phase (only when an inventory client matches the app's
provider): query the managed inventory for a fixed asset catalogue.

Both phases run concurrently and are merged on (name, resource_type),
targeted entries first. Only a missing application or a missing source
path raises; every other failure becomes a diagnostic on the result.
"""
from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
import logging
from typing import List, Tuple

from agents.discovery.llm_client import DiscoveryLLM
from shared.database.application_store import ApplicationStore
from shared.models.application import Application
from shared.models.discovery import (
    CodeContext,
    CommandOutput,
    CommandResult,
    DiscoveryCommand,
    LiveResource,
    LiveResourceResult,
)
from shared.models.errors import (
    ApplicationNotFoundError,
    DiscoveryLLMError,
    InventoryError,
    MissingSourcePathError,
    SourceAnalysisError,
)
from shared.security_tools.command_executor import CommandExecutor
from shared.tools.cloud_tools import InventoryClient
from shared.tools.placeholder_resolver import (
    gcloud_config_project,
    gcp_project_from_env,
    resolve_command_placeholders,
)
from shared.tools.source_analyzer import analyze_source

logger = logging.getLogger(__name__)

PhaseResult = Tuple[List[LiveResource], List[str]]

NO_FILES_DIAGNOSTIC = "no infrastructure files found at source path"
NO_COMMANDS_DIAGNOSTIC = "LLM generated no discovery commands from deploy scripts"
NO_PROJECT_DIAGNOSTIC = "GCP project ID not found (set GOOGLE_PROJECT env var)"


def merge_resources(
    targeted: List[LiveResource], comprehensive: List[LiveResource]
) -> List[LiveResource]:
    """Targeted resources in order, then comprehensive ones whose (name, resource_type) is not yet present."""
    seen = {resource.key for resource in targeted}
    merged = list(targeted)
    for resource in comprehensive:
        if resource.key not in seen:
            merged.append(resource)
            seen.add(resource.key)
    return merged


def command_failure_message(result: CommandResult) -> str:
    """First stderr line when there is one, else the executor's error."""
    stderr = result.stderr.strip()
    if stderr:
        return stderr.split("\n", 1)[0].strip()
    return result.error or ""


class DiscoveryService:
    """Discovers what an application actually has running in the cloud."""

    def __init__(
        self,
        store: ApplicationStore,
        llm: DiscoveryLLM,
        executor: CommandExecutor | None = None,
        inventory: InventoryClient | None = None,
        analyzer: Callable[[str], CodeContext] = analyze_source,
        max_workers: int = 4,
        deadline_seconds: float | None = None,
        environ: Mapping[str, str] | None = None,
        project_lookup: Callable[[], str | None] = gcloud_config_project,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.store = store
        self.llm = llm
        self.executor = executor or CommandExecutor()
        self.inventory = inventory
        self.analyzer = analyzer
        self.max_workers = max_workers
        self.deadline_seconds = deadline_seconds
        self.environ = environ
        self.project_lookup = project_lookup

    def _lookup_application(self, app_ref: str) -> Application | None:
        return self.store.get_by_id(app_ref) or self.store.get_by_name(app_ref)

    async def _load_application(self, app_ref: str) -> Application:
        app = await asyncio.to_thread(self._lookup_application, app_ref)
        if app is None:
            raise ApplicationNotFoundError(app_ref)
        if not app.source_path.strip():
            raise MissingSourcePathError(app.name)
        return app

    def _deadline(self, timeout: float | None) -> float | None:
        budget = self.deadline_seconds if timeout is None else timeout
        if not budget or budget <= 0:
            return None
        return asyncio.get_running_loop().time() + budget

    async def discover_live_resources(
        self, app_ref: str, timeout: float | None = None
    ) -> LiveResourceResult:
        """
        Run both discovery phases for the application with id or name *app_ref*.

        Raises ApplicationNotFoundError or MissingSourcePathError; any other
        failure is reported in ``LiveResourceResult.errors``.
        """
        app = await self._load_application(app_ref)
        deadline = self._deadline(timeout)
        logger.info("discovery_start app=%s provider=%s", app.name, app.provider.value)

        (targeted, targeted_errors), (comprehensive, comprehensive_errors) = await asyncio.gather(
            self._targeted_discovery(app, deadline),
            self._comprehensive_discovery(app, deadline),
        )

        now = datetime.now(UTC)
        resources = merge_resources(targeted, comprehensive)
        for resource in resources:
            resource.last_checked = now
            if resource.provider is None:
                resource.provider = app.provider

        errors = targeted_errors + comprehensive_errors
        logger.info(
            "discovery_complete app=%s targeted=%s comprehensive=%s merged=%s errors=%s",
            app.name,
            len(targeted),
            len(comprehensive),
            len(resources),
            len(errors),
        )
        return LiveResourceResult(resources=resources, errors=errors, timestamp=now)

    # -- targeted phase ------------------------------------------------------

    async def _targeted_discovery(self, app: Application, deadline: float | None) -> PhaseResult:
        try:
            code_context = await asyncio.to_thread(self.analyzer, app.source_path)
        except (SourceAnalysisError, OSError) as exc:
            logger.warning("discovery_step app=%s step=analyze error=%s", app.name, exc)
            return [], [f"analyze source: {exc}"]

        if not code_context.files:
            logger.info("discovery_step app=%s step=analyze files=0", app.name)
            return [], [NO_FILES_DIAGNOSTIC]
        logger.info("discovery_step app=%s step=analyze files=%s", app.name, len(code_context.files))

        try:
            proposal = await self.llm.generate_discovery_commands(app, code_context)
        except DiscoveryLLMError as exc:
            logger.warning("discovery_step app=%s step=generate error=%s", app.name, exc)
            return [], [f"generate discovery commands: {exc}"]

        if not proposal.commands:
            return [], [NO_COMMANDS_DIAGNOSTIC]
        logger.info("discovery_step app=%s step=generate commands=%s", app.name, len(proposal.commands))

        commands = await asyncio.to_thread(
            resolve_command_placeholders,
            proposal.commands,
            self.environ,
            self.project_lookup,
        )

        results = await self._execute_all(commands, deadline)

        errors: List[str] = []
        outputs: List[CommandOutput] = []
        for cmd, result in zip(commands, results):
            output = CommandOutput(command=cmd, output=result.stdout)
            if result.error:
                message = command_failure_message(result)
                output.error = message
                errors.append(f"{cmd.description}: {message}")
            if result.stdout or result.error:
                outputs.append(output)

        if not outputs:
            logger.info("discovery_step app=%s step=execute outputs=0", app.name)
            return [], errors

        try:
            parsed = await self.llm.parse_discovery_output(app, outputs)
        except DiscoveryLLMError as exc:
            logger.warning("discovery_step app=%s step=parse error=%s", app.name, exc)
            errors.append(f"parse discovery output: {exc}")
            return [], errors

        logger.info("discovery_step app=%s step=parse resources=%s", app.name, len(parsed.resources))
        return list(parsed.resources), errors

    async def _execute_all(
        self, commands: List[DiscoveryCommand], deadline: float | None
    ) -> List[CommandResult]:
        semaphore = asyncio.Semaphore(self.max_workers)

        async def _run(cmd: DiscoveryCommand) -> CommandResult:
            async with semaphore:
                logger.info("discovery_command description=%r command=%r", cmd.description, cmd.command)
                return await self.executor.execute(cmd.command, deadline=deadline)

        # gather keeps input order, so diagnostics follow proposal order.
        return list(await asyncio.gather(*(_run(cmd) for cmd in commands)))

    # -- comprehensive phase -------------------------------------------------

    async def _comprehensive_discovery(self, app: Application, deadline: float | None) -> PhaseResult:
        if self.inventory is None or self.inventory.provider != app.provider:
            return [], []

        project_id = gcp_project_from_env(self.environ)
        if not project_id:
            return [], [NO_PROJECT_DIAGNOSTIC]

        query = asyncio.to_thread(self.inventory.list_project_assets, project_id)
        try:
            if deadline is None:
                resources = await query
            else:
                remaining = max(0.0, deadline - asyncio.get_running_loop().time())
                resources = await asyncio.wait_for(query, timeout=remaining)
        except InventoryError as exc:
            logger.warning("discovery_step app=%s step=inventory error=%s", app.name, exc)
            return [], [f"cloud asset inventory: {exc}"]
        except asyncio.TimeoutError:
            logger.warning("discovery_step app=%s step=inventory error=deadline_exceeded", app.name)
            return [], ["cloud asset inventory: discovery deadline exceeded"]

        logger.info("discovery_step app=%s step=inventory resources=%s", app.name, len(resources))
        return list(resources), []
