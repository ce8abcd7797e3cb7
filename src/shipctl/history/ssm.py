"""AWS Systems Manager Parameter Store history store."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from shipctl.history.base import DEFAULT_KEY_PREFIX, BaseHistoryStore
from shipctl.lib.errors import (
    CloudSDKNotInstalledError,
    StoreCorruptError,
    StoreUnavailableError,
    StoreWriteConflictError,
)
from shipctl.lib.logging_config import get_logger
from shipctl.models.history import DeploymentState

logger = get_logger(__name__)

DEFAULT_TIER = "Standard"

# Entry names are zero padded so they also sort lexically
ENTRY_INDEX_WIDTH = 8


def _error_code(exc: Exception) -> str:
    response = getattr(exc, "response", None) or {}
    return str(response.get("Error", {}).get("Code", ""))


class SSMHistoryStore(BaseHistoryStore):
    """History store keeping one parameter per log entry.

    Entries live under the history key as ``{key}/00000000``,
    ``{key}/00000001`` and so on, each holding one JSON encoded state.
    An append creates the next index with ``Overwrite=False``, so two writers
    racing for the same index cannot both succeed: the loser gets a
    ``StoreWriteConflictError`` and the winner's entry stays intact.
    """

    def __init__(
        self,
        cluster: str,
        service_name: str,
        prefix: str = DEFAULT_KEY_PREFIX,
        region: str | None = None,
        tier: str = DEFAULT_TIER,
        client: Any | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            cluster: Cluster the history belongs to
            service_name: Service the history belongs to
            prefix: Parameter name prefix
            region: AWS region for the SSM client
            tier: Parameter tier used for writes
            client: Pre-built SSM client (skips client construction)

        Raises:
            CloudSDKNotInstalledError: If boto3 is not installed
        """
        super().__init__(cluster, service_name, prefix)

        try:
            import boto3
            from botocore.exceptions import BotoCoreError, ClientError
        except ImportError as exc:
            raise CloudSDKNotInstalledError(provider="aws", sdk_name="boto3") from exc

        self._ClientError: type[Exception] = ClientError
        self._BotoCoreError: type[Exception] = BotoCoreError
        self._client = client or boto3.client("ssm", region_name=region)
        self.tier = tier

    def entry_name(self, index: int) -> str:
        """Return the parameter name of the entry at ``index``."""
        return f"{self.key}/{index:0{ENTRY_INDEX_WIDTH}d}"

    def pull(self) -> list[DeploymentState]:
        return [state for _, state in self._read_entries()]

    def push_state(self, revision: int, message: str) -> DeploymentState:
        entries = self._read_entries()
        index = entries[-1][0] + 1 if entries else 0
        state = self._new_state(revision, message)
        name = self.entry_name(index)

        try:
            self._client.put_parameter(
                Name=name,
                Value=state.model_dump_json(),
                Type="String",
                Overwrite=False,
                Tier=self.tier,
            )
        except self._ClientError as exc:
            if _error_code(exc) == "ParameterAlreadyExists":
                raise StoreWriteConflictError(
                    f"History entry {name} was appended by another writer"
                ) from exc
            raise StoreUnavailableError(
                f"Failed to write history parameter {name}: {exc}"
            ) from exc
        except self._BotoCoreError as exc:
            raise StoreUnavailableError(
                f"Failed to write history parameter {name}: {exc}"
            ) from exc

        logger.debug("Appended revision %d as %s", revision, name)
        return state

    def _read_entries(self) -> list[tuple[int, DeploymentState]]:
        """Return ``(index, state)`` pairs for every entry, in index order."""
        entries: list[tuple[int, DeploymentState]] = []
        for parameter in self._list_parameters():
            name = parameter.get("Name", "")
            suffix = name.rsplit("/", 1)[-1]
            if not suffix.isdigit():
                raise StoreCorruptError(
                    f"Unexpected parameter {name} under history {self.key}"
                )
            try:
                state = DeploymentState.model_validate_json(
                    parameter.get("Value") or ""
                )
            except ValidationError as exc:
                raise StoreCorruptError(
                    f"Invalid history format in parameter {name}: {exc}"
                ) from exc
            entries.append((int(suffix), state))

        entries.sort(key=lambda entry: entry[0])
        logger.debug("Read %d history entries from %s", len(entries), self.key)
        return entries

    def _list_parameters(self) -> list[dict[str, Any]]:
        """Fetch every parameter directly below the history key."""
        parameters: list[dict[str, Any]] = []
        request: dict[str, Any] = {"Path": self.key, "Recursive": False}

        while True:
            try:
                response = self._client.get_parameters_by_path(**request)
            except (self._ClientError, self._BotoCoreError) as exc:
                raise StoreUnavailableError(
                    f"Failed to read history parameters under {self.key}: {exc}"
                ) from exc

            parameters.extend(response.get("Parameters", []))
            next_token = response.get("NextToken")
            if not next_token:
                return parameters
            request["NextToken"] = next_token
