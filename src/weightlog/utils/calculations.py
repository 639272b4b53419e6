"""Derived statistics over weight entries."""

from dataclasses import dataclass
from datetime import date, timedelta

from ..models.entry import WeightEntry
from ..models.settings import DateFormat, UserSettings, WeightUnit

LBS_TO_KG = 0.453592
KG_TO_LBS = 2.20462


@dataclass
class WeightStats:
    """Summary statistics for a set of entries."""

    total_loss: float
    current_weight: float
    start_weight: float
    goal_weight: float | None
    progress_percentage: float
    average_weekly_loss: float
    days_tracking: int
    bmi: float | None = None
    bmi_category: str | None = None

    def to_dict(self) -> dict:
        return {
            "total_loss": self.total_loss,
            "current_weight": self.current_weight,
            "start_weight": self.start_weight,
            "goal_weight": self.goal_weight,
            "progress_percentage": self.progress_percentage,
            "average_weekly_loss": self.average_weekly_loss,
            "days_tracking": self.days_tracking,
            "bmi": self.bmi,
            "bmi_category": self.bmi_category,
        }


def calculate_bmi(weight: float, height_cm: float, weight_unit: WeightUnit) -> float:
    """Calculate BMI from weight in the given unit and height in cm."""
    height_m = height_cm / 100
    weight_kg = weight * LBS_TO_KG if weight_unit == WeightUnit.LBS else weight
    return round(weight_kg / (height_m * height_m), 1)


def get_bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def convert_weight(weight: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    """Convert a weight between lbs and kg, rounded to one decimal."""
    if from_unit == to_unit:
        return weight
    if from_unit == WeightUnit.LBS:
        return round(weight * LBS_TO_KG, 1)
    return round(weight * KG_TO_LBS, 1)


def sort_entries_by_date(
    entries: list[WeightEntry], descending: bool = False
) -> list[WeightEntry]:
    """Sort by date; entries on the same date keep their insertion order."""
    return sorted(entries, key=lambda e: e.date, reverse=descending)


def filter_entries_by_date_range(
    entries: list[WeightEntry],
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[WeightEntry]:
    """Keep entries within the inclusive date range."""
    return [
        e for e in entries
        if (start_date is None or e.date >= start_date)
        and (end_date is None or e.date <= end_date)
    ]


def calculate_weight_stats(
    entries: list[WeightEntry], settings: UserSettings
) -> WeightStats:
    """Calculate progress statistics.

    Start weight comes from settings when set, otherwise from the earliest
    entry. Progress is measured against the goal weight if one is set.
    """
    if not entries:
        return WeightStats(
            total_loss=0,
            current_weight=0,
            start_weight=settings.start_weight or 0,
            goal_weight=settings.goal_weight,
            progress_percentage=0,
            average_weekly_loss=0,
            days_tracking=0,
        )

    sorted_entries = sort_entries_by_date(entries)
    earliest = sorted_entries[0]
    latest = sorted_entries[-1]

    start_weight = settings.start_weight or earliest.weight
    current_weight = latest.weight
    total_loss = start_weight - current_weight

    days_tracking = (latest.date - earliest.date).days + 1
    weeks_tracking = days_tracking / 7
    average_weekly_loss = total_loss / weeks_tracking if weeks_tracking > 0 else 0

    progress_percentage = 0.0
    if settings.goal_weight and settings.goal_weight != start_weight:
        goal_difference = start_weight - settings.goal_weight
        progress_percentage = total_loss / goal_difference * 100

    bmi = None
    bmi_category = None
    if settings.height_cm:
        bmi = calculate_bmi(current_weight, settings.height_cm, settings.weight_unit)
        bmi_category = get_bmi_category(bmi)

    return WeightStats(
        total_loss=round(total_loss, 1),
        current_weight=round(current_weight, 1),
        start_weight=round(start_weight, 1),
        goal_weight=settings.goal_weight,
        progress_percentage=round(progress_percentage, 1),
        average_weekly_loss=round(average_weekly_loss, 2),
        days_tracking=days_tracking,
        bmi=bmi,
        bmi_category=bmi_category,
    )


def get_weekly_averages(entries: list[WeightEntry]) -> list[tuple[date, float]]:
    """Average weight per week (weeks start on Sunday), oldest first."""
    weeks: dict[date, list[float]] = {}
    for entry in sort_entries_by_date(entries):
        week_start = entry.date - timedelta(days=(entry.date.weekday() + 1) % 7)
        weeks.setdefault(week_start, []).append(entry.weight)

    return [
        (week_start, round(sum(weights) / len(weights), 1))
        for week_start, weights in weeks.items()
    ]


def format_weight(weight: float, unit: WeightUnit) -> str:
    return f"{weight:.1f} {unit.value}"


def format_date(value: date, date_format: DateFormat) -> str:
    """Format a date according to the user's preference."""
    if date_format == DateFormat.EU:
        return value.strftime("%d/%m/%Y")
    return value.strftime("%m/%d/%Y")
