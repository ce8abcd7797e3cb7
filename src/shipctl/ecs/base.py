"""Base interface for container orchestrator clients."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shipctl.models.service import ServiceSnapshot, StabilityStatus, TaskDefinition


class BaseOrchestratorClient(ABC):
    """Abstract base class for the orchestrator operations a rollback needs.

    Every call is synchronous and may raise a RollbackError subclass.
    """

    @abstractmethod
    def describe_service(self, cluster: str, service_name: str) -> ServiceSnapshot:
        """Read the live state of a service.

        Raises:
            ServiceNotFoundError: If the service does not exist.
            OrchestratorError: If the orchestrator cannot be queried.
        """

    @abstractmethod
    def describe_task_definition(self, reference: str) -> TaskDefinition:
        """Read a task definition document by reference.

        Raises:
            TaskDefinitionNotFoundError: If no such task definition exists.
            OrchestratorError: If the orchestrator cannot be queried.
        """

    @abstractmethod
    def update_service(
        self, snapshot: ServiceSnapshot, task_definition: TaskDefinition
    ) -> ServiceSnapshot:
        """Point the service at ``task_definition``, keeping everything else.

        Args:
            snapshot: Service state the update is based on.
            task_definition: Task definition the service should run.

        Returns:
            The service state reported after the update was accepted.

        Raises:
            UpdateRejectedError: If the orchestrator rejects the update.
        """

    @abstractmethod
    def get_stability(self, cluster: str, service_name: str) -> StabilityStatus:
        """Return the current deployment and task counts of a service.

        Raises:
            ServiceNotFoundError: If the service does not exist.
            OrchestratorError: If the orchestrator cannot be queried.
        """
