"""Pydantic model for shipctl settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BACKEND = "SSM"
DEFAULT_POLL_INTERVAL = 15.0  # seconds
DEFAULT_TIMEOUT = 600.0  # seconds
DEFAULT_STATE_DIR = ".shipctl/history"
DEFAULT_SSM_PREFIX = "/shipctl"


class ShipctlSettings(BaseModel):
    """Resolved settings for a single shipctl invocation.

    Attributes:
        backend: History store backend name (SSM, FILE or MEMORY)
        slack_webhook_url: Chat webhook for notifications; disabled when unset
        poll_interval: Seconds between stability checks
        timeout: Maximum seconds to wait for the service to stabilize
        state_dir: Directory used by the FILE backend
        ssm_prefix: Parameter name prefix used by the SSM backend
        region: AWS region, resolved from the environment
    """

    model_config = ConfigDict(extra="forbid")

    backend: str = Field(default=DEFAULT_BACKEND, description="History backend")
    slack_webhook_url: str | None = Field(
        default=None, description="Slack incoming webhook URL"
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between polls"
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Stabilization wait budget"
    )
    state_dir: str = Field(
        default=DEFAULT_STATE_DIR, description="FILE backend state directory"
    )
    ssm_prefix: str = Field(
        default=DEFAULT_SSM_PREFIX, description="SSM parameter name prefix"
    )
    region: str | None = Field(default=None, description="AWS region")

    @field_validator("backend")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        """Normalize backend names to upper case."""
        v = v.strip()
        if not v:
            raise ValueError("backend must not be empty")
        return v.upper()

    @field_validator("slack_webhook_url", "region")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        """Treat empty strings as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("ssm_prefix")
    @classmethod
    def validate_ssm_prefix(cls, v: str) -> str:
        """SSM hierarchical names must start with a slash."""
        if not v.startswith("/"):
            raise ValueError(f"ssm_prefix must start with '/': {v}")
        return v.rstrip("/") or "/"
