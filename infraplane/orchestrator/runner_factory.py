"""
Discovery service factory: reusable wiring for store, LLM, executor, inventory.

Separates infrastructure setup from the CLI entry point so the same service
can be reused from tests, the HTTP API, or scripts.
"""
from __future__ import annotations

from pathlib import Path

from config import settings
from shared.database.application_store import ApplicationStore, SqliteApplicationStore
from shared.security.policy_loader import get_max_timeout
from shared.security_tools.command_executor import CommandExecutor
from shared.tools.cloud_tools import GcloudAssetInventory

ROOT_DIR = Path(__file__).resolve().parents[2]


def build_store(db_path: str | None = None) -> SqliteApplicationStore:
    """Open the sqlite application store, relative paths anchored at the repo root."""
    path = Path(db_path or settings.DB_PATH)
    if not path.is_absolute():
        path = ROOT_DIR / path
    return SqliteApplicationStore(path)


def command_timeout_seconds() -> float:
    """Configured per-command timeout, clamped by the guardrail policy ceiling."""
    timeout = settings.COMMAND_TIMEOUT_SECONDS
    ceiling = get_max_timeout("discovery_command")
    if ceiling:
        timeout = min(timeout, float(ceiling))
    return timeout


def build_inventory() -> GcloudAssetInventory | None:
    if not settings.INVENTORY_ENABLED or not GcloudAssetInventory.available():
        return None
    return GcloudAssetInventory(timeout_seconds=settings.INVENTORY_TIMEOUT_SECONDS)


def build_discovery_service(store: ApplicationStore | None = None):
    """Build a fully-wired DiscoveryService backed by the ADK discovery agents."""
    from agents.discovery.llm_client import AdkDiscoveryLLM
    from infraplane.orchestrator.discovery import DiscoveryService

    return DiscoveryService(
        store=store if store is not None else build_store(),
        llm=AdkDiscoveryLLM(),
        executor=CommandExecutor(timeout=command_timeout_seconds()),
        inventory=build_inventory(),
        max_workers=settings.MAX_WORKERS,
        deadline_seconds=settings.DEADLINE_SECONDS,
    )
