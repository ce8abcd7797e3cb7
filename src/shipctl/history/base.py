"""Base interface for revision history stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from shipctl.models.history import DeploymentState

DEFAULT_KEY_PREFIX = "/shipctl"


def history_key(
    cluster: str, service_name: str, prefix: str = DEFAULT_KEY_PREFIX
) -> str:
    """Return the storage key for a cluster/service pair.

    Example:
        >>> history_key("prod", "api")
        '/shipctl/prod/api'
    """
    return f"{prefix.rstrip('/')}/{cluster}/{service_name}"


class BaseHistoryStore(ABC):
    """Append-only log of deployment states for one cluster/service pair.

    Implementations never modify or delete existing entries.
    """

    def __init__(
        self, cluster: str, service_name: str, prefix: str = DEFAULT_KEY_PREFIX
    ) -> None:
        self.cluster = cluster
        self.service_name = service_name
        self.key = history_key(cluster, service_name, prefix)

    @abstractmethod
    def pull(self) -> list[DeploymentState]:
        """Return every recorded state, oldest first.

        Returns:
            Entries in append order. Empty when nothing was recorded yet.

        Raises:
            StoreUnavailableError: If the backend cannot be reached.
            StoreCorruptError: If the persisted data cannot be decoded.
        """

    @abstractmethod
    def push_state(self, revision: int, message: str) -> DeploymentState:
        """Append one state to the log.

        Args:
            revision: Task definition revision the service now runs.
            message: Annotation describing why the state was recorded.

        Returns:
            The appended entry.

        Raises:
            StoreUnavailableError: If the backend cannot be reached.
            StoreWriteConflictError: If another writer raced this append.
        """

    @staticmethod
    def _new_state(revision: int, message: str) -> DeploymentState:
        return DeploymentState(
            revision=revision,
            message=message,
            created_at=datetime.now(timezone.utc),
        )
