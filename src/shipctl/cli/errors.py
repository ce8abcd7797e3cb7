"""Shared error handling for shipctl CLI commands."""

from __future__ import annotations

import sys
from collections.abc import Generator
from contextlib import contextmanager

import click

from shipctl.lib.errors import (
    CloudSDKNotInstalledError,
    ConfigError,
    ConfigurationMissingError,
    InvalidArgumentError,
    RollbackError,
)
from shipctl.lib.logging_config import get_logger

logger = get_logger(__name__)

EXIT_USAGE_ERROR = 2
EXIT_FAILURE = 3


@contextmanager
def handle_command_errors() -> Generator[None, None, None]:
    """Context manager for consistent error handling in shipctl commands.

    Exit codes:
        2: Configuration or invocation error
        3: Rollback/execution error
    """
    try:
        yield
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.secho("Error: Configuration error", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(EXIT_USAGE_ERROR)
    except (InvalidArgumentError, ConfigurationMissingError) as e:
        logger.error(f"Invalid invocation: {e}")
        click.secho("Error: Invalid invocation", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(EXIT_USAGE_ERROR)
    except RollbackError as e:
        logger.error(f"Rollback error: {e}")
        click.secho(f"Error: {e.step or e.operation} failed", fg="red", err=True)
        click.echo(f"  {e}", err=True)
        sys.exit(EXIT_FAILURE)
    except CloudSDKNotInstalledError as e:
        logger.error(f"Missing SDK: {e}")
        click.secho("Error: AWS SDK is not available", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_FAILURE)
