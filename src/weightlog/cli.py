"""CLI entry point for weightlog."""

import click

from . import __version__
from .commands import entries, export, import_backup, init, serve, settings, stats, sync
from .logs import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="weightlog")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override LOG_LEVEL for this run",
)
def main(log_level: str | None):
    """weightlog: personal weight tracker with Airtable backup.

    Entries and settings are stored locally. When Airtable credentials are
    configured, changes are also pushed to your Airtable base.

    Example usage:

        # Initialize the database
        weightlog init

        # Log today's weight
        weightlog entries add 195.4 --notes "morning"

        # See progress
        weightlog stats

        # Back up to a file
        weightlog export -o backup.json
    """
    configure_logging(log_level)


# Register commands
main.add_command(init)
main.add_command(entries)
main.add_command(settings)
main.add_command(stats)
main.add_command(sync)
main.add_command(export)
main.add_command(import_backup)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
