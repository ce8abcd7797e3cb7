"""Amazon ECS orchestrator client."""

from __future__ import annotations

from typing import Any

from shipctl.ecs.base import BaseOrchestratorClient
from shipctl.ecs.revision import parse_reference
from shipctl.lib.errors import (
    CloudSDKNotInstalledError,
    OrchestratorError,
    ServiceNotFoundError,
    TaskDefinitionNotFoundError,
    UpdateRejectedError,
)
from shipctl.lib.logging_config import get_logger
from shipctl.models.service import ServiceSnapshot, StabilityStatus, TaskDefinition

logger = get_logger(__name__)

_SERVICE_MISSING_CODES = frozenset(
    {
        "ServiceNotFoundException",
        "ServiceNotActiveException",
        "ClusterNotFoundException",
    }
)
_TASK_DEFINITION_MISSING_CODES = frozenset(
    {"ClientException", "InvalidParameterException"}
)

# Service fields passed back unchanged on update
_PRESERVED_UPDATE_FIELDS = ("desiredCount", "deploymentConfiguration")


def _error_code(exc: Exception) -> str:
    response = getattr(exc, "response", None) or {}
    return str(response.get("Error", {}).get("Code", ""))


class ECSClient(BaseOrchestratorClient):
    """Read and update ECS services through boto3."""

    def __init__(self, region: str | None = None, client: Any | None = None) -> None:
        """Initialize the ECS client.

        Args:
            region: AWS region of the cluster
            client: Pre-built boto3 ECS client (skips client construction)

        Raises:
            CloudSDKNotInstalledError: If boto3 is not installed
        """
        try:
            import boto3
            from botocore.exceptions import BotoCoreError, ClientError
        except ImportError as exc:
            raise CloudSDKNotInstalledError(provider="aws", sdk_name="boto3") from exc

        self._ClientError: type[Exception] = ClientError
        self._BotoCoreError: type[Exception] = BotoCoreError
        self._client = client or boto3.client("ecs", region_name=region)
        self.region = region

    def describe_service(self, cluster: str, service_name: str) -> ServiceSnapshot:
        """Describe an ECS service."""
        service = self._describe_raw_service(cluster, service_name)
        return self._to_snapshot(cluster, service_name, service)

    def describe_task_definition(self, reference: str) -> TaskDefinition:
        """Describe a task definition by ARN or ``family:revision``."""
        try:
            response = self._client.describe_task_definition(taskDefinition=reference)
        except self._ClientError as exc:
            if _error_code(exc) in _TASK_DEFINITION_MISSING_CODES:
                raise TaskDefinitionNotFoundError(
                    f"Task definition {reference} not found: {exc}"
                ) from exc
            raise OrchestratorError(
                f"Failed to describe task definition {reference}: {exc}"
            ) from exc
        except self._BotoCoreError as exc:
            raise OrchestratorError(
                f"Failed to describe task definition {reference}: {exc}"
            ) from exc

        document = response.get("taskDefinition")
        if not document:
            raise TaskDefinitionNotFoundError(f"Task definition {reference} not found")

        arn = document.get("taskDefinitionArn") or reference
        family = document.get("family")
        revision = document.get("revision")
        if not family or not revision:
            _, family, revision = parse_reference(arn)
        return TaskDefinition(arn=arn, family=family, revision=revision, raw=document)

    def update_service(
        self, snapshot: ServiceSnapshot, task_definition: TaskDefinition
    ) -> ServiceSnapshot:
        """Switch the service to ``task_definition``."""
        params: dict[str, Any] = {
            "cluster": snapshot.cluster,
            "service": snapshot.service_name,
            "taskDefinition": task_definition.arn,
        }
        for field in _PRESERVED_UPDATE_FIELDS:
            if snapshot.raw.get(field) is not None:
                params[field] = snapshot.raw[field]

        logger.info(
            "ECS update_service: cluster=%s service=%s taskDefinition=%s",
            snapshot.cluster,
            snapshot.service_name,
            task_definition.arn,
        )
        try:
            response = self._client.update_service(**params)
        except (self._ClientError, self._BotoCoreError) as exc:
            raise UpdateRejectedError(
                f"ECS rejected the update of {snapshot.service_name}: {exc}"
            ) from exc

        service = response.get("service")
        if not service:
            return snapshot.model_copy(
                update={"task_definition": task_definition.arn}
            )
        return self._to_snapshot(snapshot.cluster, snapshot.service_name, service)

    def get_stability(self, cluster: str, service_name: str) -> StabilityStatus:
        """Return deployment and task counts for a service."""
        service = self._describe_raw_service(cluster, service_name)
        return StabilityStatus(
            deployment_count=len(service.get("deployments") or []),
            desired_count=service.get("desiredCount", 0),
            running_count=service.get("runningCount", 0),
            pending_count=service.get("pendingCount", 0),
        )

    def _describe_raw_service(self, cluster: str, service_name: str) -> dict[str, Any]:
        try:
            response = self._client.describe_services(
                cluster=cluster, services=[service_name]
            )
        except self._ClientError as exc:
            if _error_code(exc) in _SERVICE_MISSING_CODES:
                raise ServiceNotFoundError(
                    f"Service {service_name} not found in cluster {cluster}: {exc}"
                ) from exc
            raise OrchestratorError(
                f"Failed to describe service {service_name}: {exc}"
            ) from exc
        except self._BotoCoreError as exc:
            raise OrchestratorError(
                f"Failed to describe service {service_name}: {exc}"
            ) from exc

        services = response.get("services") or []
        if not services:
            reasons = [f.get("reason", "") for f in response.get("failures") or []]
            detail = f" ({', '.join(r for r in reasons if r)})" if any(reasons) else ""
            raise ServiceNotFoundError(
                f"Service {service_name} not found in cluster {cluster}{detail}"
            )

        service: dict[str, Any] = services[0]
        if service.get("status") == "INACTIVE":
            raise ServiceNotFoundError(
                f"Service {service_name} in cluster {cluster} is inactive"
            )
        return service

    @staticmethod
    def _to_snapshot(
        cluster: str, service_name: str, service: dict[str, Any]
    ) -> ServiceSnapshot:
        return ServiceSnapshot(
            cluster=cluster,
            service_name=service.get("serviceName") or service_name,
            service_arn=service.get("serviceArn"),
            task_definition=service.get("taskDefinition", ""),
            deployment_count=len(service.get("deployments") or []),
            desired_count=service.get("desiredCount", 0),
            running_count=service.get("runningCount", 0),
            raw=service,
        )
