"""User settings commands."""

import click

from ..models.settings import DateFormat, WeightUnit
from .base import (
    async_command,
    echo_info,
    echo_success,
    ensure_initialized,
    flush_sync,
    handle_errors,
    open_coordinator,
)


def _optional(value: float | None, suffix: str) -> str:
    return f"{value} {suffix}" if value is not None else "(not set)"


@click.group()
def settings():
    """View and change your profile and preferences."""
    pass


@settings.command("show")
@click.pass_context
@async_command
@handle_errors
async def show(ctx: click.Context):
    """Show current settings."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        current = await coordinator.get_settings()

    unit = current.weight_unit.value
    click.echo(f"Name:          {current.name or '(not set)'}")
    click.echo(f"Goal weight:   {_optional(current.goal_weight, unit)}")
    click.echo(f"Start weight:  {_optional(current.start_weight, unit)}")
    click.echo(f"Height:        {_optional(current.height_cm, 'cm')}")
    click.echo(f"Weight unit:   {unit}")
    click.echo(f"Date format:   {current.date_format.value}")

    if current.is_first_run:
        click.echo()
        echo_info("Set your name with 'weightlog settings set --name <name>'.")


@settings.command("set")
@click.option("--name", help="Display name")
@click.option("--goal-weight", type=float, help="Goal weight")
@click.option("--start-weight", type=float, help="Starting weight")
@click.option("--height-cm", type=float, help="Height in centimeters (enables BMI)")
@click.option("--unit", type=click.Choice([u.value for u in WeightUnit]), help="Weight unit")
@click.option(
    "--date-format",
    type=click.Choice([f.value for f in DateFormat]),
    help="Date display format",
)
@click.pass_context
@async_command
@handle_errors
async def set_settings(
    ctx: click.Context,
    name: str | None,
    goal_weight: float | None,
    start_weight: float | None,
    height_cm: float | None,
    unit: str | None,
    date_format: str | None,
):
    """Change one or more settings."""
    ensure_initialized(ctx)

    changes = {
        "name": name,
        "goal_weight": goal_weight,
        "start_weight": start_weight,
        "height_cm": height_cm,
        "weight_unit": unit,
        "date_format": date_format,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        echo_info("Nothing to change. See 'weightlog settings set --help'.")
        return

    async with open_coordinator() as coordinator:
        await coordinator.patch_settings(**changes)
        echo_success(f"Updated {', '.join(sorted(changes))}")
        await flush_sync(coordinator)
