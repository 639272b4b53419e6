"""Mapping between local models and Airtable record fields.

Airtable field names are matched exactly and case-sensitively.
"""

from ...models.entry import WeightEntry, parse_date, parse_timestamp, utc_now
from ...models.settings import DateFormat, UserSettings, WeightUnit

ENTRY_FIELDS = {
    "id": "Entry ID",
    "date": "Date",
    "weight": "Weight",
    "notes": "Notes",
    "created_at": "Created At",
    "updated_at": "Updated At",
}

SETTINGS_FIELDS = {
    "name": "Name",
    "goal_weight": "Goal Weight",
    "start_weight": "Start Weight",
    "height_cm": "Height Cm",
    "weight_unit": "Weight Unit",
    "date_format": "Date Format",
    "last_updated": "Last Updated",
}


def entry_to_fields(entry: WeightEntry) -> dict:
    """Build the Airtable field map for an entry."""
    return {
        ENTRY_FIELDS["id"]: entry.id,
        ENTRY_FIELDS["date"]: entry.date.isoformat(),
        ENTRY_FIELDS["weight"]: entry.weight,
        ENTRY_FIELDS["notes"]: entry.notes or "",
        ENTRY_FIELDS["created_at"]: entry.created_at.isoformat(),
        ENTRY_FIELDS["updated_at"]: entry.updated_at.isoformat(),
    }


def record_entry_id(record: dict) -> str:
    """Entry id of a record, or the Airtable record id when "Entry ID" is empty."""
    return str(record.get("fields", {}).get(ENTRY_FIELDS["id"]) or record["id"])


def record_to_entry(record: dict) -> WeightEntry:
    """Build an entry from an Airtable record.

    Falls back to the Airtable record id when "Entry ID" is empty and to
    the current time for missing timestamps.
    """
    fields = record.get("fields", {})
    notes = fields.get(ENTRY_FIELDS["notes"])
    if notes is not None:
        notes = str(notes)
    return WeightEntry(
        id=record_entry_id(record),
        date=parse_date(fields[ENTRY_FIELDS["date"]]),
        weight=fields[ENTRY_FIELDS["weight"]],
        notes=notes or None,
        created_at=parse_timestamp(fields.get(ENTRY_FIELDS["created_at"])),
        updated_at=parse_timestamp(fields.get(ENTRY_FIELDS["updated_at"])),
    )


def settings_to_fields(settings: UserSettings) -> dict:
    """Build the Airtable field map for settings; unset values are left out."""
    fields = {
        SETTINGS_FIELDS["name"]: settings.name,
        SETTINGS_FIELDS["goal_weight"]: settings.goal_weight,
        SETTINGS_FIELDS["start_weight"]: settings.start_weight,
        SETTINGS_FIELDS["height_cm"]: settings.height_cm,
        SETTINGS_FIELDS["weight_unit"]: settings.weight_unit.value,
        SETTINGS_FIELDS["date_format"]: settings.date_format.value,
        SETTINGS_FIELDS["last_updated"]: utc_now().isoformat(),
    }
    return {name: value for name, value in fields.items() if value is not None}


def record_to_settings(record: dict) -> UserSettings:
    """Build settings from an Airtable record, defaulting the select fields."""
    fields = record.get("fields", {})
    return UserSettings(
        name=fields.get(SETTINGS_FIELDS["name"]) or "",
        goal_weight=fields.get(SETTINGS_FIELDS["goal_weight"]),
        start_weight=fields.get(SETTINGS_FIELDS["start_weight"]),
        height_cm=fields.get(SETTINGS_FIELDS["height_cm"]),
        weight_unit=WeightUnit(fields.get(SETTINGS_FIELDS["weight_unit"]) or WeightUnit.LBS),
        date_format=DateFormat(fields.get(SETTINGS_FIELDS["date_format"]) or DateFormat.US),
    )


SETUP_INSTRUCTIONS = """\
{entries_table} table schema:
- Entry ID (Single line text)
- Date (Date)
- Weight (Number)
- Notes (Long text)
- Created At (Date)
- Updated At (Date)

{settings_table} table schema:
- Name (Single line text)
- Goal Weight (Number)
- Start Weight (Number)
- Height Cm (Number)
- Weight Unit (Single select: lbs, kg)
- Date Format (Single select: MM/dd/yyyy, dd/MM/yyyy)
- Last Updated (Date)

To set up your Airtable base:

1. Open your base at https://airtable.com/
2. Create two tables named exactly '{entries_table}' and '{settings_table}'
3. Add the fields listed above
4. Make sure field names match exactly (case-sensitive)
5. Once the tables exist, entries and settings sync automatically

The tracker works offline without Airtable; sync only needs the tables above."""
