"""Container orchestrator clients for shipctl."""

from __future__ import annotations

from shipctl.ecs.base import BaseOrchestratorClient
from shipctl.ecs.revision import parse_reference, specify_revision


def create_orchestrator_client(region: str | None) -> BaseOrchestratorClient:
    """Create the ECS client for ``region``."""
    from shipctl.ecs.client import ECSClient

    return ECSClient(region=region)


__all__ = [
    "BaseOrchestratorClient",
    "create_orchestrator_client",
    "parse_reference",
    "specify_revision",
]
