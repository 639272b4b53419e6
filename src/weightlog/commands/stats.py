"""Progress statistics command."""

import click

from ..utils.calculations import (
    calculate_weight_stats,
    format_date,
    format_weight,
    get_weekly_averages,
)
from .base import async_command, echo_info, ensure_initialized, handle_errors, open_coordinator


@click.command()
@click.option("--weekly", is_flag=True, help="Also show weekly averages")
@click.pass_context
@async_command
@handle_errors
async def stats(ctx: click.Context, weekly: bool):
    """Show progress toward your goal, BMI and weekly rate of change."""
    ensure_initialized(ctx)

    async with open_coordinator() as coordinator:
        all_entries = await coordinator.get_entries()
        settings = await coordinator.get_settings()

    if not all_entries:
        echo_info("No entries yet.")
        return

    result = calculate_weight_stats(all_entries, settings)
    unit = settings.weight_unit

    click.echo(click.style("Progress", bold=True))
    click.echo("=" * 40)
    click.echo(f"Current weight:   {format_weight(result.current_weight, unit)}")
    click.echo(f"Start weight:     {format_weight(result.start_weight, unit)}")
    click.echo(f"Total change:     {format_weight(-result.total_loss, unit)}")
    if result.goal_weight is not None:
        click.echo(f"Goal weight:      {format_weight(result.goal_weight, unit)}")
        click.echo(f"Progress:         {result.progress_percentage:.1f}%")
    click.echo(f"Avg weekly loss:  {result.average_weekly_loss:.2f} {unit.value}")
    click.echo(f"Days tracking:    {result.days_tracking}")
    if result.bmi is not None:
        click.echo(f"BMI:              {result.bmi} ({result.bmi_category})")

    if weekly:
        click.echo()
        click.echo(click.style("Weekly averages", bold=True))
        for week_start, average in get_weekly_averages(all_entries):
            click.echo(
                f"  Week of {format_date(week_start, settings.date_format)}: "
                f"{format_weight(average, unit)}"
            )
