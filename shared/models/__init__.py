from shared.models.application import Application
from shared.models.discovery import (
    CloudProvider,
    CodeContext,
    CommandOutput,
    CommandResult,
    DiscoveryCommand,
    DiscoveryCommandResult,
    FileContent,
    LiveResource,
    LiveResourceParseResult,
    LiveResourceResult,
    LiveResourceStatus,
)

__all__ = [
    "Application",
    "CloudProvider",
    "CodeContext",
    "CommandOutput",
    "CommandResult",
    "DiscoveryCommand",
    "DiscoveryCommandResult",
    "FileContent",
    "LiveResource",
    "LiveResourceParseResult",
    "LiveResourceResult",
    "LiveResourceStatus",
]
