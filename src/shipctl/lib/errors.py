"""Custom exception hierarchy for shipctl configuration and rollbacks."""

from __future__ import annotations

from typing import Any


class ShipctlError(Exception):
    """Base exception for all shipctl errors.

    All shipctl-specific exceptions inherit from this class, enabling
    centralized exception handling at the CLI boundary.
    """

    pass


class ConfigError(ShipctlError):
    """Exception raised for configuration errors.

    Raised when the settings file or a settings value cannot be loaded or
    validated.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class CloudSDKNotInstalledError(ShipctlError):
    """Raised when the SDK required to talk to a cloud provider is missing."""

    def __init__(self, provider: str, sdk_name: str) -> None:
        """Create an error naming the missing SDK distribution."""
        self.provider = provider
        self.sdk_name = sdk_name
        self.message = (
            f"The {provider} SDK is not installed. "
            f"Install it with: pip install {sdk_name}"
        )
        super().__init__(self.message)


class RollbackError(ShipctlError):
    """Base class for every failure of a rollback invocation.

    Carries the rollback step that failed together with the cluster and
    service it was operating on. The orchestrator attaches this context as the
    error passes through a step, so collaborators (history stores, the
    orchestrator client) can raise these errors without knowing the step.

    Attributes:
        message: Human-readable error message
        step: Name of the rollback step that failed, if known
        cluster: Cluster identifier, if known
        service_name: Service identifier, if known
    """

    operation = "rollback"

    def __init__(
        self,
        message: str,
        *,
        step: str | None = None,
        cluster: str | None = None,
        service_name: str | None = None,
    ) -> None:
        """Create a rollback error.

        Args:
            message: Descriptive error message
            step: Rollback step in which the error occurred
            cluster: Cluster the rollback targeted
            service_name: Service the rollback targeted
        """
        self.message = message
        self.step = step
        self.cluster = cluster
        self.service_name = service_name
        super().__init__(message)

    def with_context(
        self,
        *,
        step: str | None = None,
        cluster: str | None = None,
        service_name: str | None = None,
    ) -> RollbackError:
        """Fill in any missing context and return the same error."""
        self.step = self.step or step
        self.cluster = self.cluster or cluster
        self.service_name = self.service_name or service_name
        return self

    def context(self) -> dict[str, Any]:
        """Return the attached context as a dict (unset keys omitted)."""
        data = {
            "step": self.step,
            "cluster": self.cluster,
            "service": self.service_name,
        }
        return {key: value for key, value in data.items() if value}

    def __str__(self) -> str:
        context = self.context()
        if not context:
            return self.message
        details = ", ".join(f"{key}: {value}" for key, value in context.items())
        return f"{self.message} ({details})"


class InvalidArgumentError(RollbackError):
    """A required invocation argument is missing or invalid."""

    def __init__(self, field: str, message: str, **context: Any) -> None:
        """Create an error for the offending argument."""
        self.field = field
        super().__init__(message, **context)


class ConfigurationMissingError(RollbackError):
    """Environment-derived configuration (e.g. the region) is absent."""


class StoreError(RollbackError):
    """Base class for history store failures."""


class StoreUnavailableError(StoreError):
    """The history store backend cannot be reached."""


class StoreCorruptError(StoreError):
    """Persisted history cannot be decoded."""


class StoreWriteConflictError(StoreError):
    """Another writer modified the history log concurrently."""


class NoHistoryError(RollbackError):
    """The history log has fewer than two entries."""


class OrchestratorError(RollbackError):
    """The orchestrator API failed in a way no more specific error covers."""


class ServiceNotFoundError(RollbackError):
    """The service does not exist on the cluster."""


class DeploymentInProgressError(RollbackError):
    """The service currently reports more than one deployment."""


class RevisionResolutionError(RollbackError):
    """The rollback target revision cannot be resolved to a reference."""


class TaskDefinitionNotFoundError(RollbackError):
    """The resolved task definition does not exist."""


class UpdateRejectedError(RollbackError):
    """The orchestrator rejected the service update."""


class StabilizationTimeoutError(RollbackError):
    """The service did not become stable within the wait budget."""


class HistoryRecordFailedError(RollbackError):
    """The service was rolled back but the history entry was not recorded."""
