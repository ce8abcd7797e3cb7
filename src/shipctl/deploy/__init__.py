"""Rollback engine for shipctl.

This package provides the rollback state machine and the polling helper it
uses to wait for a service to stabilize.
"""

from shipctl.deploy.rollback import (
    RollbackOrchestrator,
    RollbackStep,
    rollback_message,
    run_rollback,
)
from shipctl.deploy.waiter import wait_until_stable

__all__ = [
    "RollbackOrchestrator",
    "RollbackStep",
    "rollback_message",
    "run_rollback",
    "wait_until_stable",
]
