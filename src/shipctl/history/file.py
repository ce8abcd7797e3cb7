"""Local JSON file history store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from shipctl.history.base import DEFAULT_KEY_PREFIX, BaseHistoryStore
from shipctl.lib.errors import StoreCorruptError, StoreUnavailableError
from shipctl.lib.logging_config import get_logger
from shipctl.models.history import HISTORY_VERSION, DeploymentState, HistoryLog

logger = get_logger(__name__)

DEFAULT_STATE_DIR = Path(".shipctl") / "history"


def get_history_path(state_dir: Path, key: str) -> Path:
    """Return the file that stores the log for ``key``.

    Path separators in the key are flattened so every key maps to a single
    file directly under ``state_dir``.
    """
    name = key.strip("/").replace("/", "__") or "default"
    return state_dir / f"{name}.json"


def load_history(history_path: Path) -> HistoryLog:
    """Load a history log from disk."""
    if not history_path.exists():
        return HistoryLog(version=HISTORY_VERSION)

    try:
        content = history_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise StoreCorruptError(
            f"Invalid history format in {history_path}: {exc}"
        ) from exc
    except OSError as exc:
        raise StoreUnavailableError(
            f"Failed to read history at {history_path}: {exc}"
        ) from exc

    if not content.strip():
        return HistoryLog(version=HISTORY_VERSION)

    try:
        return HistoryLog.model_validate_json(content)
    except ValidationError as exc:
        raise StoreCorruptError(
            f"Invalid history format in {history_path}: {exc}"
        ) from exc


def save_history(history_path: Path, history: HistoryLog) -> None:
    """Persist a history log, replacing the file atomically."""
    payload = json.dumps(history.model_dump(mode="json"), indent=2, sort_keys=True)
    try:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=history_path.parent, prefix=f".{history_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, history_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise StoreUnavailableError(
            f"Failed to write history to {history_path}: {exc}"
        ) from exc


class FileHistoryStore(BaseHistoryStore):
    """History store keeping one JSON document per key on the local disk.

    Supports a single writer; concurrent invocations against the same file
    are not serialized.
    """

    def __init__(
        self,
        cluster: str,
        service_name: str,
        prefix: str = DEFAULT_KEY_PREFIX,
        state_dir: Path | str = DEFAULT_STATE_DIR,
    ) -> None:
        super().__init__(cluster, service_name, prefix)
        self.path = get_history_path(Path(state_dir), self.key)

    def pull(self) -> list[DeploymentState]:
        return list(load_history(self.path).states)

    def push_state(self, revision: int, message: str) -> DeploymentState:
        history = load_history(self.path)
        state = self._new_state(revision, message)
        save_history(self.path, history.appended(state))
        logger.debug("Appended revision %d to %s", revision, self.path)
        return state
