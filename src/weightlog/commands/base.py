"""Shared CLI utilities."""

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from functools import wraps

import click

from ..db import get_db_path
from ..errors import WeightLogError
from ..models.entry import parse_date, validate_weight_entry
from ..services import HybridSyncCoordinator, create_coordinator


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def handle_errors(f):
    """Report weightlog errors as [ERROR] lines and exit with status 1."""

    @wraps(f)
    async def wrapper(*args, **kwargs):
        try:
            return await f(*args, **kwargs)
        except WeightLogError as e:
            echo_error(e.message)
            raise click.exceptions.Exit(1) from e

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'weightlog init' first."
        )
        ctx.exit(1)


@asynccontextmanager
async def open_coordinator():
    """Build a coordinator for one command and dispose of it afterwards."""
    coordinator = create_coordinator()
    async with coordinator:
        yield coordinator


async def flush_sync(coordinator: HybridSyncCoordinator) -> None:
    """Push pending changes before the process exits."""
    if not coordinator.has_remote:
        return
    if await coordinator.process_sync_queue():
        echo_info("Synced to Airtable")
    elif coordinator.get_sync_status().is_pending:
        echo_warning("Changes saved locally; Airtable sync is pending")


def parse_entry_input(
    ctx: click.Context, weight: float, entry_date: str | None, notes: str | None
) -> date:
    """Validate entry input, exiting with the errors when it is rejected."""
    entry_date = entry_date or date.today().isoformat()
    errors = validate_weight_entry(weight, entry_date, notes)
    if errors:
        for error in errors:
            echo_error(error)
        ctx.exit(1)
    return parse_date(entry_date)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = [
        "".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)),
        "".join("-" * w + " " * padding for w in widths),
    ]
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(lines)
