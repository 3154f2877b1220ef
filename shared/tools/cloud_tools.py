from __future__ import annotations

from datetime import UTC, datetime
import logging
import shutil
from typing import Any, Dict, List, Protocol

from config.constants import ASSET_STATE_STATUS, GCP_ASSET_TYPES, LOCATION_PATH_SEGMENTS
from shared.models.discovery import CloudProvider, LiveResource, LiveResourceStatus
from shared.models.errors import InventoryError
from shared.security_tools.common import run_json_command

logger = logging.getLogger(__name__)


class InventoryClient(Protocol):
    """A managed cloud inventory source for one provider."""

    provider: CloudProvider

    def list_project_assets(self, project_id: str) -> List[LiveResource]:
        ...


def extract_resource_name(full_name: str) -> str:
    """
    Last path segment of a fully-qualified asset name.

    "//run.googleapis.com/projects/p/locations/us-central1/services/api" -> "api"
    """
    return full_name.split("/")[-1]


def extract_region(full_name: str) -> str:
    """Segment following the first locations/regions/zones segment, if any."""
    parts = full_name.split("/")
    for index, part in enumerate(parts):
        if part in LOCATION_PATH_SEGMENTS and index + 1 < len(parts):
            return parts[index + 1]
    return ""


def infer_status(details: Dict[str, str]) -> LiveResourceStatus:
    state = details.get("state")
    if state:
        mapped = ASSET_STATE_STATUS.get(state.upper())
        if mapped:
            return LiveResourceStatus(mapped)
    # An asset listed by the inventory exists, so assume it is reachable.
    return LiveResourceStatus.ACTIVE


def _asset_details(asset: Dict[str, Any]) -> Dict[str, str]:
    details = {
        "asset_type": str(asset.get("assetType", "")),
        "full_name": str(asset.get("name", "")),
    }
    resource = asset.get("resource")
    data = resource.get("data") if isinstance(resource, dict) else None
    if not isinstance(data, dict):
        return details

    state = data.get("state")
    if isinstance(state, str):
        details["state"] = state
    status = data.get("status")
    if isinstance(status, dict) and "conditions" in status:
        details["has_conditions"] = "true"
    uri = data.get("uri")
    if isinstance(uri, str):
        details["url"] = uri
    database_version = data.get("databaseVersion")
    if isinstance(database_version, str):
        details["database_version"] = database_version
    settings = data.get("settings")
    if isinstance(settings, dict) and isinstance(settings.get("tier"), str):
        details["tier"] = settings["tier"]
    return details


def asset_to_live_resource(asset: Dict[str, Any], now: datetime | None = None) -> LiveResource:
    full_name = str(asset.get("name", ""))
    asset_type = str(asset.get("assetType", ""))
    details = _asset_details(asset)
    return LiveResource(
        resource_type=GCP_ASSET_TYPES.get(asset_type, asset_type),
        name=extract_resource_name(full_name),
        provider=CloudProvider.GCP,
        region=extract_region(full_name),
        status=infer_status(details),
        details=details,
        last_checked=now or datetime.now(UTC),
    )


class GcloudAssetInventory:
    """
    GCP Cloud Asset Inventory queried through ``gcloud asset list``.

    Only the fixed catalogue in ``config.constants.GCP_ASSET_TYPES`` is
    requested. Credentials come from the ambient gcloud configuration.
    """

    provider = CloudProvider.GCP

    def __init__(self, timeout_seconds: int = 60) -> None:
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def available() -> bool:
        return shutil.which("gcloud") is not None

    def build_command(self, project_id: str) -> List[str]:
        return [
            "gcloud",
            "asset",
            "list",
            f"--project={project_id}",
            f"--asset-types={','.join(GCP_ASSET_TYPES)}",
            "--content-type=resource",
            "--format=json",
            "--quiet",
        ]

    def list_project_assets(self, project_id: str) -> List[LiveResource]:
        if not project_id:
            raise InventoryError("project ID is required")

        logger.info("inventory_query provider=gcp project=%s types=%s", project_id, len(GCP_ASSET_TYPES))
        payload, error = run_json_command(
            self.build_command(project_id),
            timeout_seconds=self.timeout_seconds,
        )
        if error:
            raise InventoryError(f"list assets: {error}")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise InventoryError("list assets: unexpected response shape")

        now = datetime.now(UTC)
        resources = [
            asset_to_live_resource(asset, now)
            for asset in payload
            if isinstance(asset, dict) and asset.get("name")
        ]
        logger.info("inventory_complete provider=gcp project=%s assets=%s", project_id, len(resources))
        return resources
