"""Backup export and import commands."""

from pathlib import Path

import click

from ..db import EntryRepository, SettingsRepository, get_db_path
from ..services import BackupService
from .base import (
    async_command,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    handle_errors,
)


def _backup_service() -> BackupService:
    db_path = get_db_path()
    return BackupService(EntryRepository(db_path), SettingsRepository(db_path))


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to file instead of stdout",
)
@click.pass_context
@async_command
@handle_errors
async def export(ctx: click.Context, output: Path | None):
    """Export all entries and settings as a JSON backup.

    Examples:
        # Print to stdout
        weightlog export

        # Save to file
        weightlog export -o weight-backup.json
    """
    ensure_initialized(ctx)

    content = await _backup_service().export_json()

    if output:
        output.write_text(content, encoding="utf-8")
        echo_success(f"Exported to {output}")
    else:
        click.echo(content)


@click.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
@handle_errors
async def import_backup(ctx: click.Context, path: Path, yes: bool):
    """Restore entries and settings from a JSON backup.

    The current data is replaced. If the import fails part way, the previous
    data is restored.
    """
    ensure_initialized(ctx)

    if not yes:
        echo_warning("Importing replaces all current entries and settings.")
        echo_info("Run 'weightlog export -o backup.json' first to keep a copy.")
        if not click.confirm("Continue?"):
            return

    count = await _backup_service().import_json(path.read_text(encoding="utf-8"))
    echo_success(f"Imported {count} weight entries and settings")
