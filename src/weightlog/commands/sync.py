"""Airtable sync commands."""

import click

from ..clients.airtable import SETUP_INSTRUCTIONS
from ..config import AppConfig
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    handle_errors,
    open_coordinator,
)


@click.group()
def sync():
    """Back up to and restore from Airtable.

    Sync is enabled when AIRTABLE_BASE_ID and AIRTABLE_API_KEY are set.
    Local data always wins; Airtable is a backup copy.
    """
    pass


@sync.command("status")
@click.pass_context
@async_command
@handle_errors
async def status(ctx: click.Context):
    """Show whether Airtable sync is configured."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        current = coordinator.get_sync_status()

    if not current.has_remote:
        echo_info("Airtable sync is not configured; data is stored locally only.")
        return

    click.echo(f"Airtable base:   {AppConfig.AIRTABLE_BASE_ID}")
    click.echo(f"Entries table:   {AppConfig.AIRTABLE_TABLE_NAME}")
    click.echo(f"Settings table:  {AppConfig.AIRTABLE_SETTINGS_TABLE}")
    click.echo(f"Online:          {'yes' if current.is_online else 'no'}")
    click.echo(f"Pending changes: {'yes' if current.is_pending else 'no'}")


@sync.command("push")
@click.pass_context
@async_command
@handle_errors
async def push(ctx: click.Context):
    """Push all entries and settings to Airtable now."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        await coordinator.force_sync()

    echo_success("Entries and settings synced to Airtable")


@sync.command("recover")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
@handle_errors
async def recover(ctx: click.Context, yes: bool):
    """Replace local data with the copy stored in Airtable.

    Use this to restore a new device. Local entries are overwritten when
    Airtable holds any entries.
    """
    ensure_initialized(ctx)

    if not yes:
        echo_warning("This overwrites your local entries and settings.")
        if not click.confirm("Continue?"):
            return

    async with open_coordinator() as coordinator:
        result = await coordinator.recover_from_remote()

    if not result.entries and result.settings is None:
        echo_info("Airtable holds no data; local data left unchanged.")
        return

    echo_success(f"Recovered {len(result.entries)} entries from Airtable")
    if result.settings is not None:
        echo_success("Recovered settings from Airtable")


@sync.command("test")
@click.pass_context
@async_command
@handle_errors
async def test(ctx: click.Context):
    """Check the Airtable credentials and tables."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        result = await coordinator.test_connection()

    if result.success:
        echo_success(result.message)
    else:
        echo_error(result.message)
        click.echo("Run 'weightlog sync setup' for the required table layout.")
        ctx.exit(1)


@sync.command("cleanup")
@click.pass_context
@async_command
@handle_errors
async def cleanup(ctx: click.Context):
    """Delete duplicate settings records in Airtable, keeping one."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        deleted = await coordinator.delete_duplicate_settings()

    if deleted:
        echo_success(f"Deleted {deleted} duplicate settings records.")
    else:
        echo_info("No duplicate records found.")


@sync.command("setup")
def setup():
    """Show the Airtable table layout the tracker expects."""
    click.echo(
        SETUP_INSTRUCTIONS.format(
            entries_table=AppConfig.AIRTABLE_TABLE_NAME,
            settings_table=AppConfig.AIRTABLE_SETTINGS_TABLE,
        )
    )
