"""Utility functions for weightlog."""

from .calculations import (
    WeightStats,
    calculate_bmi,
    calculate_weight_stats,
    convert_weight,
    filter_entries_by_date_range,
    format_date,
    format_weight,
    get_bmi_category,
    get_weekly_averages,
    sort_entries_by_date,
)

__all__ = [
    "calculate_bmi",
    "calculate_weight_stats",
    "convert_weight",
    "filter_entries_by_date_range",
    "format_date",
    "format_weight",
    "get_bmi_category",
    "get_weekly_averages",
    "sort_entries_by_date",
    "WeightStats",
]
