"""Rollback of a service to its previously recorded task definition revision.

``RollbackOrchestrator`` runs a strictly linear sequence of steps. Any failure
stops the sequence; the only loop is the bounded wait for the service to
stabilize. A rollback appends a new history entry rather than removing the
current one, so rolling back twice returns the service to where it started.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from enum import Enum
from typing import TextIO

from shipctl.deploy.waiter import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    wait_until_stable,
)
from shipctl.ecs.base import BaseOrchestratorClient
from shipctl.ecs.revision import parse_reference, specify_revision
from shipctl.history.base import BaseHistoryStore
from shipctl.lib.errors import (
    ConfigurationMissingError,
    DeploymentInProgressError,
    HistoryRecordFailedError,
    InvalidArgumentError,
    NoHistoryError,
    RollbackError,
    StoreError,
)
from shipctl.lib.logging_config import get_logger
from shipctl.lib.notifier import Notifier, NotifierConfig, Severity
from shipctl.models.history import DeploymentState
from shipctl.models.service import RollbackResult, StabilityStatus
from shipctl.models.settings import ShipctlSettings

logger = get_logger(__name__)


class RollbackStep(str, Enum):
    """Steps of a rollback, in execution order."""

    VALIDATE_INPUT = "validate_input"
    LOAD_HISTORY = "load_history"
    SNAPSHOT_SERVICE = "snapshot_service"
    RESOLVE_TARGET_REVISION = "resolve_target_revision"
    READ_TARGET_TASK_DEFINITION = "read_target_task_definition"
    APPLY_UPDATE = "apply_update"
    AWAIT_STABLE = "await_stable"
    RECORD_HISTORY = "record_history"
    DONE = "done"


def rollback_message(current_revision: int, previous_revision: int) -> str:
    """Return the history message recorded for a rollback."""
    return f"rollback: {current_revision} -> {previous_revision}"


def validate_target(cluster: str | None, service_name: str | None) -> None:
    """Require non-empty cluster and service identifiers.

    Raises:
        InvalidArgumentError: If either identifier is missing or blank
    """
    if not cluster or not cluster.strip():
        raise InvalidArgumentError("cluster", "--cluster is required")
    if not service_name or not service_name.strip():
        raise InvalidArgumentError("service_name", "--service-name is required")


class RollbackOrchestrator:
    """Roll a service back to the revision recorded before the current one."""

    def __init__(
        self,
        history_store: BaseHistoryStore,
        client: BaseOrchestratorClient,
        notifier: Notifier,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.history_store = history_store
        self.client = client
        self.notifier = notifier
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock
        self.step = RollbackStep.VALIDATE_INPUT

    def rollback(self, cluster: str, service_name: str) -> RollbackResult:
        """Run the rollback.

        Args:
            cluster: Cluster name or ARN
            service_name: Service name

        Returns:
            RollbackResult describing the revision change and the new entry.

        Raises:
            RollbackError: Any failure, annotated with the failing step.
        """
        with self._step(RollbackStep.VALIDATE_INPUT, cluster, service_name):
            validate_target(cluster, service_name)

        with self._step(RollbackStep.LOAD_HISTORY, cluster, service_name):
            states = self.history_store.pull()
            if len(states) < 2:
                raise NoHistoryError(
                    f"can not find a previous state ({len(states)} recorded)"
                )
            previous, current = states[-2], states[-1]

        with self._step(RollbackStep.SNAPSHOT_SERVICE, cluster, service_name):
            snapshot = self.client.describe_service(cluster, service_name)
            if snapshot.deployment_count > 1:
                raise DeploymentInProgressError(
                    f"{service_name} is currently deploying "
                    f"({snapshot.deployment_count} deployments)"
                )

        with self._step(RollbackStep.RESOLVE_TARGET_REVISION, cluster, service_name):
            _, _, live_revision = parse_reference(snapshot.task_definition)
            if live_revision != current.revision:
                logger.warning(
                    "Live revision %d differs from recorded current revision %d",
                    live_revision,
                    current.revision,
                )
            target_reference = specify_revision(
                previous.revision, snapshot.task_definition
            )
            logger.debug("Resolved rollback target %s", target_reference)

        with self._step(
            RollbackStep.READ_TARGET_TASK_DEFINITION, cluster, service_name
        ):
            task_definition = self.client.describe_task_definition(target_reference)

        self._notify(
            Severity.NORMAL,
            f"rollback: revision {current.revision} -> {previous.revision}",
        )

        with self._step(RollbackStep.APPLY_UPDATE, cluster, service_name):
            self.client.update_service(snapshot, task_definition)
        self._log("service updating")

        with self._step(RollbackStep.AWAIT_STABLE, cluster, service_name):
            wait_until_stable(
                lambda: self.client.get_stability(cluster, service_name),
                interval=self.poll_interval,
                timeout=self.timeout,
                sleep=self._sleep,
                clock=self._clock,
                on_poll=self._report_progress,
            )

        with self._step(RollbackStep.RECORD_HISTORY, cluster, service_name):
            entry = self._record(current, previous)

        self.step = RollbackStep.DONE
        self._notify(Severity.GOOD, "successfully updated")

        return RollbackResult(
            cluster=cluster,
            service_name=service_name,
            from_revision=current.revision,
            to_revision=previous.revision,
            task_definition_arn=task_definition.arn,
            entry=entry,
        )

    def _record(
        self, current: DeploymentState, previous: DeploymentState
    ) -> DeploymentState:
        try:
            return self.history_store.push_state(
                previous.revision,
                rollback_message(current.revision, previous.revision),
            )
        except StoreError as exc:
            raise HistoryRecordFailedError(
                "service was rolled back to revision "
                f"{previous.revision} but the history entry could not be "
                f"recorded; history is inconsistent: {exc.message}"
            ) from exc

    @contextmanager
    def _step(
        self, step: RollbackStep, cluster: str, service_name: str
    ) -> Generator[None, None, None]:
        """Track the current step and annotate errors raised inside it."""
        self.step = step
        logger.debug("Rollback step: %s", step.value)
        try:
            yield
        except RollbackError as exc:
            exc.with_context(
                step=step.value, cluster=cluster, service_name=service_name
            )
            raise

    def _report_progress(self, status: StabilityStatus, attempt: int) -> None:
        self._log(
            f"waiting for service to stabilize (check {attempt}): "
            f"deployments: {status.deployment_count}, "
            f"running: {status.running_count}/{status.desired_count}, "
            f"pending: {status.pending_count}"
        )

    def _log(self, message: str) -> None:
        try:
            self.notifier.log(message)
        except Exception as exc:
            logger.warning(f"Notifier failed: {exc}")

    def _notify(self, severity: Severity, message: str) -> None:
        self._log(message)
        try:
            self.notifier.chat(severity, message)
        except Exception as exc:
            logger.warning(f"Notifier failed: {exc}")


def run_rollback(
    cluster: str,
    service_name: str,
    settings: ShipctlSettings,
    *,
    out: TextIO | None = None,
    history_store: BaseHistoryStore | None = None,
    client: BaseOrchestratorClient | None = None,
    notifier: Notifier | None = None,
) -> RollbackResult:
    """Run a rollback as a single process-level invocation.

    Validates the invocation before any network call, wires the collaborators
    selected by ``settings``, and reports failures through the notifier before
    re-raising them.

    Args:
        cluster: Cluster name or ARN
        service_name: Service name
        settings: Resolved settings (backend, webhook, region, wait budget)
        out: Stream for progress lines (defaults to stdout)
        history_store: Pre-built history store (skips backend selection)
        client: Pre-built orchestrator client (skips client construction)
        notifier: Pre-built notifier

    Raises:
        RollbackError: Any failure of the rollback
        CloudSDKNotInstalledError: If boto3 is required but not installed
    """
    notifier = notifier or Notifier(
        NotifierConfig(
            cluster=cluster or "",
            service_name=service_name or "",
            webhook_url=settings.slack_webhook_url,
        ),
        out=out,
    )

    try:
        validate_target(cluster, service_name)
        if not settings.region:
            raise ConfigurationMissingError(
                "AWS region is not found. please set AWS_DEFAULT_REGION or AWS_REGION"
            )

        if history_store is None:
            from shipctl.history import create_history_store

            history_store = create_history_store(
                settings.backend, cluster, service_name, settings
            )
        if client is None:
            from shipctl.ecs import create_orchestrator_client

            client = create_orchestrator_client(settings.region)

        orchestrator = RollbackOrchestrator(
            history_store,
            client,
            notifier,
            poll_interval=settings.poll_interval,
            timeout=settings.timeout,
        )
        return orchestrator.rollback(cluster, service_name)
    except Exception as exc:
        if isinstance(exc, RollbackError):
            exc.with_context(
                step=exc.step or RollbackStep.VALIDATE_INPUT.value,
                cluster=cluster,
                service_name=service_name,
            )
        _report_failure(notifier, cluster, service_name)
        raise


def _report_failure(notifier: Notifier, cluster: str, service_name: str) -> None:
    message = f"failed to rollback. cluster: {cluster}, serviceName: {service_name}"
    try:
        notifier.log(message)
        notifier.chat(Severity.DANGER, message)
    except Exception as exc:
        logger.warning(f"Failed to send failure notification: {exc}")
