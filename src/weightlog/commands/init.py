"""Initialize project command."""

import click

from ..config import AppConfig
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the weightlog data directory and database."""
    data_dir = AppConfig.DATA_DIR
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing weightlog in {data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("weightlog is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo('  1. Set your profile:   weightlog settings set --name "Sam" --goal-weight 180')
    click.echo("  2. Log a weight:       weightlog entries add 195.4")
    if not AppConfig.remote_configured:
        click.echo()
        click.echo("Airtable sync is off. Set AIRTABLE_BASE_ID and AIRTABLE_API_KEY to enable it,")
        click.echo("then run 'weightlog sync setup' for the table layout.")
