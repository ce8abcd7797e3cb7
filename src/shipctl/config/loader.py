"""Settings loader for shipctl.

Settings are merged from, lowest to highest priority:

1. Built-in defaults
2. A YAML settings file (``.shipctl.yaml`` in the working directory, or an
   explicit path)
3. ``SHIPCTL_*`` environment variables
4. Command-line overrides

The AWS region is always taken from the environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from shipctl.config.validator import flatten_pydantic_errors
from shipctl.lib.errors import ConfigError
from shipctl.lib.logging_config import get_logger
from shipctl.models.settings import ShipctlSettings

logger = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = ".shipctl.yaml"

# Environment variable to field name mapping
ENV_VAR_MAP = {
    "backend": "SHIPCTL_BACKEND",
    "slack_webhook_url": "SHIPCTL_SLACK_WEBHOOK_URL",
    "poll_interval": "SHIPCTL_POLL_INTERVAL",
    "timeout": "SHIPCTL_TIMEOUT",
    "state_dir": "SHIPCTL_STATE_DIR",
    "ssm_prefix": "SHIPCTL_SSM_PREFIX",
}

# Checked in order; the first non-empty value wins
REGION_ENV_VARS = ("AWS_REGION", "AWS_DEFAULT_REGION")


def resolve_region(env: Mapping[str, str] | None = None) -> str | None:
    """Return the AWS region configured in the environment, if any.

    Args:
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        Region name, or None when neither AWS_REGION nor AWS_DEFAULT_REGION
        is set to a non-empty value.
    """
    env = os.environ if env is None else env
    for name in REGION_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            return value
    return None


def _read_settings_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError("config", f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError("config", f"Invalid YAML in {path}: {exc}") from exc

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(
            "config", f"Settings file {path} must contain a mapping at the top level"
        )
    return content


def _env_settings(env: Mapping[str, str]) -> dict[str, Any]:
    return {
        field_name: env[env_var]
        for field_name, env_var in ENV_VAR_MAP.items()
        if env.get(env_var)
    }


def load_settings(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> ShipctlSettings:
    """Load and validate settings for one invocation.

    Args:
        config_path: Explicit settings file. When omitted, ``.shipctl.yaml`` in
            the current directory is used if it exists.
        overrides: Values from the command line; None values are ignored.
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        Validated ShipctlSettings

    Raises:
        ConfigError: If the settings file is missing, unreadable or invalid
    """
    env = os.environ if env is None else env
    data: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError("config", f"Settings file not found: {path}")
        data.update(_read_settings_file(path))
    else:
        default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if default_path.is_file():
            logger.debug("Loading settings from %s", default_path)
            data.update(_read_settings_file(default_path))

    data.update(_env_settings(env))
    if overrides:
        data.update(
            {key: value for key, value in overrides.items() if value is not None}
        )

    data["region"] = resolve_region(env)

    try:
        return ShipctlSettings.model_validate(data)
    except PydanticValidationError as exc:
        messages = flatten_pydantic_errors(exc)
        raise ConfigError("settings", "\n".join(messages)) from exc
