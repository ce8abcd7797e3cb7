"""Pydantic models for shipctl."""

from shipctl.models.history import DeploymentState, HistoryLog
from shipctl.models.service import (
    RollbackResult,
    ServiceSnapshot,
    StabilityStatus,
    TaskDefinition,
)

__all__ = [
    "DeploymentState",
    "HistoryLog",
    "RollbackResult",
    "ServiceSnapshot",
    "StabilityStatus",
    "TaskDefinition",
]
