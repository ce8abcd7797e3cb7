"""CLI command for inspecting a service's revision history."""

from __future__ import annotations

import click

from shipctl.cli.errors import handle_command_errors
from shipctl.config.loader import load_settings
from shipctl.deploy.rollback import validate_target
from shipctl.history import create_history_store
from shipctl.lib.errors import ConfigurationMissingError
from shipctl.lib.logging_config import get_logger, setup_logging
from shipctl.models.history import DeploymentState

logger = get_logger(__name__)

# Backends that call AWS and therefore need a region
_REGIONAL_BACKENDS = frozenset({"SSM"})


@click.command()
@click.option("--cluster", type=str, default="", help="ECS Cluster Name")
@click.option("--service-name", type=str, default="", help="ECS Service Name")
@click.option(
    "--backend",
    type=str,
    default=None,
    help="Backend type of state manager (SSM, FILE, MEMORY) [default: SSM]",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (defaults to ./.shipctl.yaml when present)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug logging",
)
def history(
    cluster: str,
    service_name: str,
    backend: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Show the recorded revision history of a service, oldest first.

    The last entry is the current state and the one before it is the state a
    rollback would return to.

    Example:

        shipctl history --cluster prod --service-name api
    """
    setup_logging(verbose=verbose)

    with handle_command_errors():
        settings = load_settings(config_path, overrides={"backend": backend})
        validate_target(cluster, service_name)
        if settings.backend in _REGIONAL_BACKENDS and not settings.region:
            raise ConfigurationMissingError(
                "AWS region is not found. please set AWS_DEFAULT_REGION or AWS_REGION"
            )

        store = create_history_store(settings.backend, cluster, service_name, settings)
        states = store.pull()
        _display_history(store.key, states)


def _display_history(key: str, states: list[DeploymentState]) -> None:
    click.echo()
    click.secho(f"Revision History ({key})", bold=True)
    if not states:
        click.echo("  (no history recorded)")
        click.echo()
        return

    for index, state in enumerate(states):
        if index == len(states) - 1:
            marker = "current"
        elif index == len(states) - 2:
            marker = "previous"
        else:
            marker = ""
        recorded = state.created_at.isoformat() if state.created_at else "-"
        click.echo(
            f"  {index + 1:>3}  rev {state.revision:<6} {marker:<9} "
            f"{recorded:<32} {state.message}"
        )
    click.echo()
