from __future__ import annotations

from datetime import UTC, datetime

import pytest

from shared.models.discovery import CloudProvider, LiveResourceStatus
from shared.models.errors import InventoryError
from shared.tools import cloud_tools
from shared.tools.cloud_tools import (
    GcloudAssetInventory,
    asset_to_live_resource,
    extract_region,
    extract_resource_name,
    infer_status,
)


def test_extract_resource_name_takes_last_segment() -> None:
    assert extract_resource_name("//run.googleapis.com/projects/p/locations/us-central1/services/api") == "api"
    assert extract_resource_name("plain") == "plain"


def test_extract_region_follows_first_location_segment() -> None:
    assert extract_region("//run.googleapis.com/projects/p/locations/us-central1/services/api") == "us-central1"
    assert extract_region("//compute.googleapis.com/projects/p/zones/us-east1-b/instances/vm-1") == "us-east1-b"
    assert extract_region("//redis.googleapis.com/projects/p/regions/europe-west1/instances/cache") == "europe-west1"
    assert extract_region("//storage.googleapis.com/assets-bucket") == ""
    assert extract_region("//x.googleapis.com/projects/p/locations") == ""


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        ("RUNNABLE", LiveResourceStatus.ACTIVE),
        ("ready", LiveResourceStatus.ACTIVE),
        ("SUSPENDED", LiveResourceStatus.STOPPED),
        ("DISABLED", LiveResourceStatus.STOPPED),
        ("CREATING", LiveResourceStatus.PROVISIONING),
        ("FAILED", LiveResourceStatus.ERROR),
        ("SOMETHING_NEW", LiveResourceStatus.ACTIVE),
    ],
)
def test_infer_status_maps_upper_cased_state(state: str, expected: LiveResourceStatus) -> None:
    assert infer_status({"state": state}) == expected


def test_infer_status_defaults_to_active_without_state() -> None:
    assert infer_status({}) == LiveResourceStatus.ACTIVE


def test_asset_to_live_resource_converts_cloud_sql_instance() -> None:
    now = datetime(2026, 3, 1, tzinfo=UTC)
    asset = {
        "name": "//sqladmin.googleapis.com/projects/p/locations/us-central1/instances/main-db",
        "assetType": "sqladmin.googleapis.com/Instance",
        "resource": {
            "data": {
                "state": "RUNNABLE",
                "databaseVersion": "POSTGRES_15",
                "settings": {"tier": "db-f1-micro"},
            }
        },
    }

    resource = asset_to_live_resource(asset, now)

    assert resource.resource_type == "Cloud SQL Instance"
    assert resource.name == "main-db"
    assert resource.provider == CloudProvider.GCP
    assert resource.region == "us-central1"
    assert resource.status == LiveResourceStatus.ACTIVE
    assert resource.last_checked == now
    assert resource.details == {
        "asset_type": "sqladmin.googleapis.com/Instance",
        "full_name": asset["name"],
        "state": "RUNNABLE",
        "database_version": "POSTGRES_15",
        "tier": "db-f1-micro",
    }


def test_asset_to_live_resource_keeps_unknown_asset_type() -> None:
    resource = asset_to_live_resource(
        {
            "name": "//run.googleapis.com/projects/p/locations/us-central1/services/api",
            "assetType": "run.googleapis.com/Revision",
            "resource": {"data": {"uri": "https://api.run.app", "status": {"conditions": []}}},
        }
    )

    assert resource.resource_type == "run.googleapis.com/Revision"
    assert resource.details["url"] == "https://api.run.app"
    assert resource.details["has_conditions"] == "true"
    assert resource.status == LiveResourceStatus.ACTIVE


def test_build_command_queries_fixed_catalogue() -> None:
    argv = GcloudAssetInventory().build_command("proj-1")

    assert argv[:3] == ["gcloud", "asset", "list"]
    assert "--project=proj-1" in argv
    assert "--format=json" in argv
    types_flag = next(arg for arg in argv if arg.startswith("--asset-types="))
    types = types_flag.split("=", 1)[1].split(",")
    assert len(types) == 12
    assert "run.googleapis.com/Service" in types
    assert "vpcaccess.googleapis.com/Connector" in types


def test_list_project_assets_parses_payload(monkeypatch) -> None:
    payload = [
        {"name": "//storage.googleapis.com/assets-bucket", "assetType": "storage.googleapis.com/Bucket"},
        {"assetType": "storage.googleapis.com/Bucket"},
        "garbage",
    ]
    monkeypatch.setattr(cloud_tools, "run_json_command", lambda command, timeout_seconds: (payload, None))

    resources = GcloudAssetInventory(timeout_seconds=5).list_project_assets("proj-1")

    assert [r.name for r in resources] == ["assets-bucket"]
    assert resources[0].resource_type == "Cloud Storage Bucket"
    assert resources[0].region == ""


def test_list_project_assets_raises_inventory_error(monkeypatch) -> None:
    monkeypatch.setattr(
        cloud_tools,
        "run_json_command",
        lambda command, timeout_seconds: (None, "PERMISSION_DENIED: caller lacks cloudasset.assets.listResource"),
    )

    with pytest.raises(InventoryError, match="list assets: PERMISSION_DENIED"):
        GcloudAssetInventory().list_project_assets("proj-1")


def test_list_project_assets_requires_project() -> None:
    with pytest.raises(InventoryError, match="project ID is required"):
        GcloudAssetInventory().list_project_assets("")


def test_list_project_assets_handles_empty_output(monkeypatch) -> None:
    monkeypatch.setattr(cloud_tools, "run_json_command", lambda command, timeout_seconds: (None, None))

    assert GcloudAssetInventory().list_project_assets("proj-1") == []
