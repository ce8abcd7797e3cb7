"""In-memory history store."""

from __future__ import annotations

import threading

from shipctl.history.base import DEFAULT_KEY_PREFIX, BaseHistoryStore
from shipctl.lib.logging_config import get_logger
from shipctl.models.history import DeploymentState

logger = get_logger(__name__)

# Process-wide storage used when no explicit mapping is supplied
_DEFAULT_STORAGE: dict[str, list[DeploymentState]] = {}
_LOCK = threading.Lock()


class MemoryHistoryStore(BaseHistoryStore):
    """History store backed by a dict, keyed like the durable backends.

    Nothing survives the process. Useful for tests and dry runs.
    """

    def __init__(
        self,
        cluster: str,
        service_name: str,
        prefix: str = DEFAULT_KEY_PREFIX,
        storage: dict[str, list[DeploymentState]] | None = None,
    ) -> None:
        super().__init__(cluster, service_name, prefix)
        self._storage = _DEFAULT_STORAGE if storage is None else storage

    def pull(self) -> list[DeploymentState]:
        with _LOCK:
            return list(self._storage.get(self.key, []))

    def push_state(self, revision: int, message: str) -> DeploymentState:
        state = self._new_state(revision, message)
        with _LOCK:
            self._storage.setdefault(self.key, []).append(state)
        logger.debug("Appended revision %d to %s", revision, self.key)
        return state
