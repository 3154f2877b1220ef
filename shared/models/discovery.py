"""
Pydantic models for live-resource discovery.

These models define the data passed through one discovery invocation:
- DiscoveryCommand: a read-only CLI command proposed by the command generator
- CommandResult: the outcome of one execution attempt
- CommandOutput: a command paired with its raw output, handed to the parser
- LiveResource / LiveResourceResult: the normalized snapshot returned to callers

The two *Result wrappers mirror the JSON wire shapes exchanged with the LLM.
"""
from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CloudProvider(str, Enum):
    """Supported cloud providers."""
    AWS = "aws"
    GCP = "gcp"


class LiveResourceStatus(str, Enum):
    """Operational state of a live cloud resource."""
    ACTIVE = "active"
    PROVISIONING = "provisioning"
    STOPPED = "stopped"
    ERROR = "error"
    UNKNOWN = "unknown"


class DiscoveryCommand(BaseModel):
    """A read-only CLI command proposed for one resource type."""
    model_config = ConfigDict(frozen=True)

    description: str = ""
    command: str
    resource_type: str = ""


class DiscoveryCommandResult(BaseModel):
    """Wire shape of the command generation response."""
    commands: List[DiscoveryCommand] = Field(default_factory=list)


class CommandResult(BaseModel):
    """Outcome of executing (or refusing to execute) one command."""
    command: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    error: Optional[str] = None
    error_kind: Optional[Literal["validation", "execution"]] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CommandOutput(BaseModel):
    """A command and its raw output, the unit handed to the output parser."""
    command: DiscoveryCommand
    output: str = ""
    error: str = ""


class LiveResource(BaseModel):
    """One observed cloud resource, normalized across discovery sources."""
    resource_type: str
    name: str
    provider: Optional[CloudProvider] = None
    region: str = ""
    status: LiveResourceStatus = LiveResourceStatus.UNKNOWN
    details: dict[str, str] = Field(default_factory=dict)
    last_checked: Optional[datetime] = None

    @field_validator("details", mode="before")
    @classmethod
    def _stringify_details(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        stringified: dict[str, str] = {}
        for key, item in value.items():
            if isinstance(item, str):
                stringified[str(key)] = item
            elif isinstance(item, (dict, list)):
                stringified[str(key)] = json.dumps(item, default=str)
            else:
                stringified[str(key)] = str(item)
        return stringified

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, LiveResourceStatus):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return LiveResourceStatus(normalized)
        except ValueError:
            return LiveResourceStatus.UNKNOWN

    @field_validator("provider", mode="before")
    @classmethod
    def _blank_provider(cls, value: Any) -> Any:
        if isinstance(value, str):
            normalized = value.strip().lower()
            return normalized if normalized in {p.value for p in CloudProvider} else None
        return value

    @field_validator("region", mode="before")
    @classmethod
    def _none_region(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def key(self) -> tuple[str, str]:
        """Deduplication identity across discovery sources."""
        return (self.name, self.resource_type)


class LiveResourceParseResult(BaseModel):
    """Wire shape of the output parsing response."""
    resources: List[LiveResource] = Field(default_factory=list)


class LiveResourceResult(BaseModel):
    """Externally visible result of one discovery invocation."""
    resources: List[LiveResource] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class FileContent(BaseModel):
    path: str
    content: str


class CodeContext(BaseModel):
    """Infrastructure-relevant files extracted from an application's source."""
    files: List[FileContent] = Field(default_factory=list)
    summary: str = ""
