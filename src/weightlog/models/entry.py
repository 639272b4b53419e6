"""Weight entry data model."""

import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import uuid4

MAX_WEIGHT = 1000
MAX_NOTES_LENGTH = 200


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_entry_id() -> str:
    """Build a new opaque entry id (entry_<epoch ms>_<random>)."""
    return f"entry_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


def parse_timestamp(value: str | datetime | None) -> datetime:
    """Parse an ISO timestamp, falling back to now when missing."""
    if value is None or value == "":
        return utc_now()
    if isinstance(value, datetime):
        return value
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: str | date) -> date:
    """Parse a calendar date, accepting a full ISO timestamp too."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


@dataclass
class WeightEntry:
    """One dated weight measurement."""

    date: date
    weight: float
    notes: str | None = None
    id: str = field(default_factory=generate_entry_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        """Convert to the JSON shape used for storage and export."""
        data = {
            "id": self.id,
            "date": self.date.isoformat(),
            "weight": self.weight,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        data["createdAt"] = self.created_at.isoformat()
        data["updatedAt"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WeightEntry":
        """Create from the stored JSON shape.

        Raises:
            KeyError: If id, date or weight is missing
            ValueError: If a date or number cannot be parsed, or notes is not text
        """
        weight = data["weight"]
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise ValueError(f"Invalid weight: {weight!r}")
        notes = data.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise ValueError(f"Invalid notes: {notes!r}")

        return cls(
            id=str(data["id"]),
            date=parse_date(data["date"]),
            weight=weight,
            notes=notes,
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


def validate_weight_entry(
    weight: float | str | None,
    entry_date: date | str | None,
    notes: str | None = None,
    today: date | None = None,
) -> list[str]:
    """Check user input for a weight entry.

    Args:
        weight: Weight as typed (number or string)
        entry_date: Measurement date
        notes: Optional notes
        today: Reference date for the "not in the future" rule

    Returns:
        List of error messages, empty when the input is valid
    """
    errors = []

    try:
        weight_num = float(weight)
    except (TypeError, ValueError):
        weight_num = None

    if weight_num is None or weight_num != weight_num or weight_num <= 0:
        errors.append("Weight must be a positive number")
    elif weight_num > MAX_WEIGHT:
        errors.append(f"Weight seems unrealistic (over {MAX_WEIGHT})")

    try:
        parsed_date = parse_date(entry_date)
    except (TypeError, ValueError):
        errors.append("Invalid date format")
    else:
        if parsed_date > (today or date.today()):
            errors.append("Date cannot be in the future")

    if notes and len(notes) > MAX_NOTES_LENGTH:
        errors.append(f"Notes must be {MAX_NOTES_LENGTH} characters or less")

    return errors
