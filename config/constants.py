"""
Domain constants for live-resource discovery.

These values encode the read-only command grammar and the cloud inventory
catalogue. They change per business rule update, not per deployment.

For runtime/deployment config, see config.settings.
"""
from __future__ import annotations


# =============================================================================
# COMMAND GRAMMAR
# =============================================================================

ALLOWED_COMMAND_PREFIXES: tuple[str, ...] = ("gcloud ", "aws ")

# Checked case-insensitively as plain substrings, before any allow-list rule.
FORBIDDEN_PATTERNS: tuple[str, ...] = (
    # mutating verbs
    "create",
    "delete",
    "destroy",
    "update",
    "deploy",
    "set-iam",
    "add-iam",
    "remove-iam",
    "import",
    "export",
    # filesystem mutation
    "rm ",
    " rm",
    "mv ",
    " mv",
    # force / consent flags
    "--force",
    "--yes",
    # shell chaining and injection
    "&&",
    "||",
    ";",
    "|",
    ">",
    "<",
    "`",
    "$(",
    "eval",
    "exec",
    "source",
)

GCLOUD_READ_ACTIONS: frozenset[str] = frozenset({"list", "describe"})
AWS_READ_ACTION_PREFIXES: tuple[str, ...] = ("list-", "describe-", "get-")

MAX_STDOUT_BYTES: int = 32 * 1024


# =============================================================================
# PLACEHOLDERS
# =============================================================================

GCP_PROJECT_ENV_VARS: tuple[str, ...] = (
    "GOOGLE_PROJECT",
    "GOOGLE_CLOUD_PROJECT",
    "GCP_PROJECT_ID",
    "GCLOUD_PROJECT",
)
AWS_REGION_ENV_VARS: tuple[str, ...] = ("AWS_REGION", "AWS_DEFAULT_REGION")

# Placeholder name -> which resolved value replaces it.
PLACEHOLDER_SOURCES: dict[str, str] = {
    "GOOGLE_PROJECT": "gcp_project",
    "GCP_PROJECT_ID": "gcp_project",
    "PROJECT_ID": "gcp_project",
    "AWS_REGION": "aws_region",
}

GCLOUD_CONFIG_TIMEOUT_SECONDS: int = 5


# =============================================================================
# CLOUD ASSET INVENTORY
# =============================================================================

GCP_ASSET_TYPES: dict[str, str] = {
    "run.googleapis.com/Service": "Cloud Run Service",
    "run.googleapis.com/Job": "Cloud Run Job",
    "sqladmin.googleapis.com/Instance": "Cloud SQL Instance",
    "storage.googleapis.com/Bucket": "Cloud Storage Bucket",
    "secretmanager.googleapis.com/Secret": "Secret Manager Secret",
    "artifactregistry.googleapis.com/Repository": "Artifact Registry Repository",
    "compute.googleapis.com/Instance": "Compute Engine Instance",
    "redis.googleapis.com/Instance": "Memorystore Redis Instance",
    "pubsub.googleapis.com/Topic": "Pub/Sub Topic",
    "pubsub.googleapis.com/Subscription": "Pub/Sub Subscription",
    "cloudfunctions.googleapis.com/Function": "Cloud Function",
    "vpcaccess.googleapis.com/Connector": "VPC Access Connector",
}

LOCATION_PATH_SEGMENTS: frozenset[str] = frozenset({"locations", "regions", "zones"})

ASSET_STATE_STATUS: dict[str, str] = {
    "RUNNABLE": "active",
    "ACTIVE": "active",
    "READY": "active",
    "ENABLED": "active",
    "STOPPED": "stopped",
    "SUSPENDED": "stopped",
    "DISABLED": "stopped",
    "PENDING": "provisioning",
    "CREATING": "provisioning",
    "PROVISIONING": "provisioning",
    "ERROR": "error",
    "FAILED": "error",
}


# =============================================================================
# SOURCE ANALYSIS
# =============================================================================

MAX_SOURCE_FILE_BYTES: int = 10 * 1024
MAX_README_LINES: int = 200

INFRA_FILES: tuple[str, ...] = (
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    "package.json",
    "requirements.txt",
    "Pipfile",
    "go.mod",
    "Gemfile",
    "pom.xml",
    "build.gradle",
    "serverless.yml",
    "serverless.yaml",
    "Procfile",
    ".env.example",
    ".env.sample",
    "Makefile",
    "README.md",
)

INFRA_GLOBS: tuple[str, ...] = (
    "*.tf",
    "*.tfvars",
    "config/database.yml",
    "knexfile.js",
    "prisma/schema.prisma",
    "drizzle.config.ts",
    "drizzle.config.js",
    "k8s/*.yaml",
    "k8s/*.yml",
    "kubernetes/*.yaml",
    "kubernetes/*.yml",
    "deploy/*.sh",
    "deploy/*.yaml",
    "deploy/*.yml",
    "scripts/*.sh",
    ".github/workflows/*.yml",
    ".github/workflows/*.yaml",
)

GIT_HOSTS: tuple[str, ...] = ("github.com", "gitlab.com", "bitbucket.org")
