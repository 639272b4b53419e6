"""Request bodies for the JSON API."""

import datetime

from pydantic import BaseModel, Field

from ..models.settings import DateFormat, WeightUnit


class EntryIn(BaseModel):
    """Weight entry as submitted by a client."""

    date: datetime.date
    weight: float
    notes: str | None = None


class SettingsIn(BaseModel):
    """Full settings record."""

    name: str = ""
    goal_weight: float | None = Field(None, alias="goalWeight")
    start_weight: float | None = Field(None, alias="startWeight")
    height_cm: float | None = Field(None, alias="heightCm")
    weight_unit: WeightUnit = Field(WeightUnit.LBS, alias="weightUnit")
    date_format: DateFormat = Field(DateFormat.US, alias="dateFormat")


class ConnectivityIn(BaseModel):
    online: bool
