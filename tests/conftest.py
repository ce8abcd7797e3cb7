"""Pytest configuration and shared fixtures for shipctl tests."""

from __future__ import annotations

import os
import sys
import types
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from shipctl.ecs.base import BaseOrchestratorClient
from shipctl.ecs.revision import parse_reference
from shipctl.history.memory import MemoryHistoryStore
from shipctl.lib.errors import ServiceNotFoundError, TaskDefinitionNotFoundError
from shipctl.models.service import ServiceSnapshot, StabilityStatus, TaskDefinition

TASK_DEFINITION_PREFIX = "arn:aws:ecs:us-east-1:123456789012:task-definition/app"


class FakeClientError(Exception):
    """Stand-in for botocore.exceptions.ClientError."""

    def __init__(self, code: str, message: str = "error", operation: str = "Call"):
        self.response = {"Error": {"Code": code, "Message": message}}
        super().__init__(
            f"An error occurred ({code}) when calling the {operation} "
            f"operation: {message}"
        )


class FakeBotoCoreError(Exception):
    """Stand-in for botocore.exceptions.BotoCoreError."""


class FakeOrchestratorClient(BaseOrchestratorClient):
    """Scripted orchestrator client that records every call."""

    def __init__(
        self,
        *,
        task_definition: str = f"{TASK_DEFINITION_PREFIX}:7",
        deployment_count: int = 1,
        desired_count: int = 2,
        known_revisions: Iterable[int] = range(1, 20),
        stability: Iterable[StabilityStatus] | None = None,
        service_exists: bool = True,
        update_error: Exception | None = None,
    ) -> None:
        self.snapshot = ServiceSnapshot(
            cluster="prod",
            service_name="api",
            service_arn="arn:aws:ecs:us-east-1:123456789012:service/prod/api",
            task_definition=task_definition,
            deployment_count=deployment_count,
            desired_count=desired_count,
            running_count=desired_count,
            raw={"desiredCount": desired_count},
        )
        self.known_revisions = set(known_revisions)
        self._stability = list(
            stability
            if stability is not None
            else [
                StabilityStatus(
                    deployment_count=1,
                    desired_count=desired_count,
                    running_count=desired_count,
                )
            ]
        )
        self.service_exists = service_exists
        self.update_error = update_error
        self.calls: list[tuple[str, Any]] = []
        self.updates: list[TaskDefinition] = []

    def describe_service(self, cluster: str, service_name: str) -> ServiceSnapshot:
        self.calls.append(("describe_service", (cluster, service_name)))
        if not self.service_exists:
            raise ServiceNotFoundError(f"Service {service_name} not found")
        return self.snapshot

    def describe_task_definition(self, reference: str) -> TaskDefinition:
        self.calls.append(("describe_task_definition", reference))
        _, family, revision = parse_reference(reference)
        if revision not in self.known_revisions:
            raise TaskDefinitionNotFoundError(f"Task definition {reference} not found")
        return TaskDefinition(arn=reference, family=family, revision=revision)

    def update_service(
        self, snapshot: ServiceSnapshot, task_definition: TaskDefinition
    ) -> ServiceSnapshot:
        self.calls.append(("update_service", task_definition.arn))
        if self.update_error is not None:
            raise self.update_error
        self.updates.append(task_definition)
        return snapshot.model_copy(update={"task_definition": task_definition.arn})

    def get_stability(self, cluster: str, service_name: str) -> StabilityStatus:
        self.calls.append(("get_stability", (cluster, service_name)))
        if len(self._stability) > 1:
            return self._stability.pop(0)
        return self._stability[0]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeClock:
    """Monotonic clock advanced by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def isolated_env() -> Generator[dict[str, str], None, None]:
    """Provide isolated environment variables for testing.

    Yields:
        Dictionary of original environment variables

    Cleanup:
        Restores original environment after test
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def aws_sdk(monkeypatch: pytest.MonkeyPatch) -> types.SimpleNamespace:
    """Install mocked boto3/botocore modules into sys.modules."""
    exceptions_module = types.ModuleType("botocore.exceptions")
    exceptions_module.ClientError = FakeClientError  # type: ignore[attr-defined]
    exceptions_module.BotoCoreError = FakeBotoCoreError  # type: ignore[attr-defined]

    boto3_module = types.ModuleType("boto3")
    boto3_module.client = MagicMock(name="boto3.client")  # type: ignore[attr-defined]

    monkeypatch.setitem(sys.modules, "boto3", boto3_module)
    monkeypatch.setitem(sys.modules, "botocore", types.ModuleType("botocore"))
    monkeypatch.setitem(sys.modules, "botocore.exceptions", exceptions_module)

    return types.SimpleNamespace(
        boto3=boto3_module,
        ClientError=FakeClientError,
        BotoCoreError=FakeBotoCoreError,
    )


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeOrchestratorClient]:
    """Return the FakeOrchestratorClient class for building scripted clients."""
    return FakeOrchestratorClient


@pytest.fixture
def fake_clock() -> FakeClock:
    """Fake monotonic clock paired with a fake sleep."""
    return FakeClock()


@pytest.fixture
def memory_store() -> Callable[..., MemoryHistoryStore]:
    """Build isolated in-memory history stores pre-populated with states."""

    def _build(
        *entries: tuple[int, str],
        cluster: str = "prod",
        service_name: str = "api",
    ) -> MemoryHistoryStore:
        store = MemoryHistoryStore(cluster, service_name, storage={})
        for revision, message in entries:
            store.push_state(revision, message)
        return store

    return _build


@pytest.fixture
def history_dir(tmp_path: Path) -> Path:
    """Directory for FILE backend state."""
    path = tmp_path / "history"
    path.mkdir()
    return path
