"""
Exception hierarchy for discovery.

Only ApplicationNotFoundError and MissingSourcePathError ever escape a
discovery call. Everything else is caught at the phase that raised it and
turned into a diagnostic string on the result.
"""


class InfraplaneError(Exception):
    """Base class for all infraplane errors."""


class CommandValidationError(InfraplaneError, ValueError):
    """A proposed command is not a safe, read-only gcloud/aws command."""


class ApplicationNotFoundError(InfraplaneError, LookupError):
    def __init__(self, app_ref: str) -> None:
        super().__init__(f"application not found: {app_ref}")
        self.app_ref = app_ref


class ApplicationExistsError(InfraplaneError):
    def __init__(self, name: str) -> None:
        super().__init__(f"application already exists: {name}")
        self.name = name


class MissingSourcePathError(InfraplaneError, ValueError):
    def __init__(self, app_name: str) -> None:
        super().__init__(f"application {app_name!r} has no source path configured")
        self.app_name = app_name


class SourceAnalysisError(InfraplaneError):
    """The source path could not be read or cloned."""


class InventoryError(InfraplaneError):
    """The managed cloud inventory query failed."""


class DiscoveryLLMError(InfraplaneError):
    """The LLM collaborator failed or returned an unusable response."""
