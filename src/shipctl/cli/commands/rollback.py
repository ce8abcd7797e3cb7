"""CLI command for rolling back an ECS service.

Implements ``shipctl rollback``: revert a service to the task definition
revision recorded before the current one, wait for it to stabilize and record
the rollback in the revision history.
"""

from __future__ import annotations

import click

from shipctl.cli.errors import handle_command_errors
from shipctl.config.loader import load_settings
from shipctl.deploy.rollback import run_rollback
from shipctl.lib.logging_config import get_logger, setup_logging
from shipctl.models.service import RollbackResult

logger = get_logger(__name__)


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
    "--slack-webhook-url",
    type=str,
    default=None,
    help="Slack webhook URL for progress notifications",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (defaults to ./.shipctl.yaml when present)",
)
@click.option(
    "--poll-interval",
    type=float,
    default=None,
    help="Seconds between stability checks [default: 15]",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds to wait for the service to stabilize [default: 600]",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug logging",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Print only the resulting task definition ARN as the summary",
)
def rollback(
    cluster: str,
    service_name: str,
    backend: str | None,
    slack_webhook_url: str | None,
    config_path: str | None,
    poll_interval: float | None,
    timeout: float | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Roll a service back to its previous task definition revision.

    The previous revision is the second-to-last entry of the service's
    revision history. The rollback itself is recorded as a new entry, so
    running it again moves the service forward to the revision it just left.

    Example:

        shipctl rollback --cluster prod --service-name api

        shipctl rollback --cluster prod --service-name api --backend FILE
    """
    setup_logging(verbose=verbose, quiet=quiet)

    with handle_command_errors():
        settings = load_settings(
            config_path,
            overrides={
                "backend": backend,
                "slack_webhook_url": slack_webhook_url,
                "poll_interval": poll_interval,
                "timeout": timeout,
            },
        )
        result = run_rollback(cluster, service_name, settings)
        _display_rollback_success(result, quiet)


def _display_rollback_success(result: RollbackResult, quiet: bool) -> None:
    """Display the rollback summary.

    Args:
        result: Rollback result
        quiet: If True, only print the task definition ARN
    """
    if quiet:
        click.echo(result.task_definition_arn)
        return

    click.echo()
    click.secho("Rollback Successful!", fg="green", bold=True)
    click.echo(f"  Cluster:   {result.cluster}")
    click.echo(f"  Service:   {result.service_name}")
    click.echo(f"  Revision:  {result.from_revision} -> {result.to_revision}")
    click.echo(f"  Task def:  {result.task_definition_arn}")
    click.echo(f"  History:   {result.entry.message}")
    click.echo()
