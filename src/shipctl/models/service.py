"""Models describing live orchestrator state.

These are read from the orchestrator on every invocation and never persisted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shipctl.models.history import DeploymentState


class ServiceSnapshot(BaseModel):
    """Point-in-time view of a running service.

    Attributes:
        cluster: Cluster name or ARN the service runs in
        service_name: Service name
        service_arn: Service ARN as reported by the orchestrator
        task_definition: Full task definition reference currently in use
        deployment_count: Number of deployments the orchestrator is managing
        desired_count: Desired number of running tasks
        running_count: Number of tasks currently running
        raw: Raw service description, the base object for updates
    """

    model_config = ConfigDict(extra="forbid")

    cluster: str
    service_name: str
    service_arn: str | None = None
    task_definition: str
    deployment_count: int = Field(default=1, ge=0)
    desired_count: int = Field(default=0, ge=0)
    running_count: int = Field(default=0, ge=0)
    raw: dict[str, Any] = Field(default_factory=dict)


class TaskDefinition(BaseModel):
    """A task definition document resolved by reference."""

    model_config = ConfigDict(extra="forbid")

    arn: str
    family: str
    revision: int = Field(..., ge=1)
    raw: dict[str, Any] = Field(default_factory=dict)


class StabilityStatus(BaseModel):
    """Deployment and task counts used to decide convergence."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    deployment_count: int = Field(..., ge=0)
    desired_count: int = Field(..., ge=0)
    running_count: int = Field(..., ge=0)
    pending_count: int = Field(default=0, ge=0)

    @property
    def is_stable(self) -> bool:
        """True when a single deployment runs exactly the desired task count."""
        return self.deployment_count == 1 and self.running_count == self.desired_count


class RollbackResult(BaseModel):
    """Outcome of a successful rollback."""

    model_config = ConfigDict(extra="forbid")

    cluster: str
    service_name: str
    from_revision: int
    to_revision: int
    task_definition_arn: str
    entry: DeploymentState
