"""Entry point for the shipctl command line."""

from __future__ import annotations

import click

from shipctl import __version__
from shipctl.cli.commands.history import history
from shipctl.cli.commands.rollback import rollback


@click.group(name="shipctl")
@click.version_option(__version__, prog_name="shipctl")
def main() -> None:
    """shipctl - operate ECS service deployments.

    Subcommands:

        rollback  Roll a service back to its previous revision
        history   Show the recorded revision history of a service
    """


main.add_command(rollback)
main.add_command(history)


if __name__ == "__main__":
    main()
