"""Weight entry commands."""

import click

from ..utils.calculations import format_date, format_weight, sort_entries_by_date
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    flush_sync,
    format_table,
    handle_errors,
    open_coordinator,
    parse_entry_input,
)


@click.group()
def entries():
    """Log, list, edit and delete weight entries."""
    pass


@entries.command("add")
@click.argument("weight", type=float)
@click.option("--date", "-d", "entry_date", help="Measurement date (YYYY-MM-DD, default today)")
@click.option("--notes", "-n", help="Optional notes (max 200 characters)")
@click.pass_context
@async_command
@handle_errors
async def add(ctx: click.Context, weight: float, entry_date: str | None, notes: str | None):
    """Log a new weight measurement.

    Examples:

        weightlog entries add 195.4

        weightlog entries add 194.8 --date 2024-01-15 --notes "after run"
    """
    ensure_initialized(ctx)
    parsed_date = parse_entry_input(ctx, weight, entry_date, notes)

    async with open_coordinator() as coordinator:
        entry = await coordinator.add_entry(parsed_date, weight, notes or None)
        settings = await coordinator.get_settings()
        echo_success(
            f"Logged {format_weight(entry.weight, settings.weight_unit)} "
            f"on {format_date(entry.date, settings.date_format)} (ID: {entry.id})"
        )
        await flush_sync(coordinator)


@entries.command("list")
@click.option("--limit", "-l", type=int, help="Show only the most recent N entries")
@click.option("--asc", is_flag=True, help="Oldest first")
@click.pass_context
@async_command
@handle_errors
async def list_entries(ctx: click.Context, limit: int | None, asc: bool):
    """List logged entries, newest first."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        all_entries = await coordinator.get_entries()
        settings = await coordinator.get_settings()

    if not all_entries:
        echo_info("No entries yet. Add one with 'weightlog entries add <weight>'.")
        return

    ordered = sort_entries_by_date(all_entries, descending=True)
    if limit:
        ordered = ordered[:limit]
    if asc:
        ordered.reverse()

    rows = [
        [
            entry.id,
            format_date(entry.date, settings.date_format),
            format_weight(entry.weight, settings.weight_unit),
            entry.notes or "",
        ]
        for entry in ordered
    ]
    click.echo(format_table(["ID", "Date", "Weight", "Notes"], rows))


@entries.command("edit")
@click.argument("entry_id")
@click.option("--weight", "-w", type=float, help="New weight")
@click.option("--date", "-d", "entry_date", help="New date (YYYY-MM-DD)")
@click.option("--notes", "-n", help="New notes (empty string clears them)")
@click.pass_context
@async_command
@handle_errors
async def edit(
    ctx: click.Context,
    entry_id: str,
    weight: float | None,
    entry_date: str | None,
    notes: str | None,
):
    """Edit an existing entry. Unspecified fields keep their value."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        existing = await coordinator.entries.get(entry_id)
        if existing is None:
            echo_error(f"Entry {entry_id} not found.")
            ctx.exit(1)

        weight = existing.weight if weight is None else weight
        entry_date = entry_date or existing.date.isoformat()
        if notes is None:
            notes = existing.notes
        parsed_date = parse_entry_input(ctx, weight, entry_date, notes)

        updated = await coordinator.update_entry(entry_id, parsed_date, weight, notes or None)
        if updated is None:
            echo_error(f"Entry {entry_id} not found.")
            ctx.exit(1)

        echo_success(f"Updated entry {entry_id}")
        await flush_sync(coordinator)


@entries.command("delete")
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
@handle_errors
async def delete(ctx: click.Context, entry_id: str, yes: bool):
    """Delete an entry.

    Deletions are local only; entries already backed up to Airtable stay there.
    """
    ensure_initialized(ctx)

    if not yes and not click.confirm(f"Delete entry {entry_id}?"):
        return

    async with open_coordinator() as coordinator:
        if not await coordinator.delete_entry(entry_id):
            echo_error(f"Entry {entry_id} not found.")
            ctx.exit(1)

        echo_success(f"Deleted entry {entry_id}")
        await flush_sync(coordinator)
