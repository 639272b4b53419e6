"""User settings data model."""

from dataclasses import dataclass, fields, replace
from enum import Enum


class WeightUnit(str, Enum):
    """Unit all weights are recorded in."""

    LBS = "lbs"
    KG = "kg"


class DateFormat(str, Enum):
    """Display format for dates."""

    US = "MM/dd/yyyy"
    EU = "dd/MM/yyyy"


def _optional_number(value) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a number, got {value!r}")
    return value


@dataclass
class UserSettings:
    """Singleton user profile and display preferences.

    Optional numeric fields stay None when not set; they are never
    defaulted to zero.
    """

    name: str = ""
    goal_weight: float | None = None
    start_weight: float | None = None
    height_cm: float | None = None
    weight_unit: WeightUnit = WeightUnit.LBS
    date_format: DateFormat = DateFormat.US

    @property
    def is_first_run(self) -> bool:
        return not self.name

    def to_dict(self) -> dict:
        """Convert to the JSON shape used for storage and export."""
        data = {"name": self.name}
        if self.goal_weight is not None:
            data["goalWeight"] = self.goal_weight
        if self.start_weight is not None:
            data["startWeight"] = self.start_weight
        if self.height_cm is not None:
            data["heightCm"] = self.height_cm
        data["weightUnit"] = self.weight_unit.value
        data["dateFormat"] = self.date_format.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        """Create from a (possibly partial) mapping merged over the defaults.

        Raises:
            ValueError: If an enum or numeric field holds an invalid value
        """
        defaults = cls()
        return cls(
            name=str(data.get("name") or ""),
            goal_weight=_optional_number(data.get("goalWeight")),
            start_weight=_optional_number(data.get("startWeight")),
            height_cm=_optional_number(data.get("heightCm")),
            weight_unit=WeightUnit(data.get("weightUnit") or defaults.weight_unit),
            date_format=DateFormat(data.get("dateFormat") or defaults.date_format),
        )

    def merge(self, **changes) -> "UserSettings":
        """Return a copy with the given attributes replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown settings fields: {', '.join(sorted(unknown))}")
        if "weight_unit" in changes:
            changes["weight_unit"] = WeightUnit(changes["weight_unit"])
        if "date_format" in changes:
            changes["date_format"] = DateFormat(changes["date_format"])
        return replace(self, **changes)


