"""Revision history models persisted by the history stores."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

HISTORY_VERSION = "1.0"


class DeploymentState(BaseModel):
    """One entry of a service's revision history.

    Entries are ranked only by their position in the log; ``created_at`` is
    informational and may be absent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    revision: int = Field(..., ge=1, description="Task definition revision number")
    message: str = Field(..., description="Why this state was recorded")
    created_at: datetime | None = Field(
        default=None, description="When the entry was appended"
    )


class HistoryLog(BaseModel):
    """Top-level document stored under a history key."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default=HISTORY_VERSION, description="Log format version")
    states: list[DeploymentState] = Field(
        default_factory=list, description="Entries in append order, oldest first"
    )

    @property
    def current(self) -> DeploymentState | None:
        """Return the most recent entry."""
        return self.states[-1] if self.states else None

    @property
    def previous(self) -> DeploymentState | None:
        """Return the entry before the most recent one."""
        return self.states[-2] if len(self.states) >= 2 else None

    def appended(self, state: DeploymentState) -> HistoryLog:
        """Return a copy of the log with ``state`` added at the end."""
        return self.model_copy(update={"states": [*self.states, state]})
