"""Weight entry routes."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from ...errors import ValidationError
from ...models.entry import validate_weight_entry
from ...services import HybridSyncCoordinator
from ...utils.calculations import (
    calculate_weight_stats,
    filter_entries_by_date_range,
    get_weekly_averages,
    sort_entries_by_date,
)
from ..dependencies import get_coordinator
from ..schemas import EntryIn

router = APIRouter(tags=["entries"])


def _validate(body: EntryIn) -> None:
    errors = validate_weight_entry(body.weight, body.date, body.notes)
    if errors:
        raise ValidationError("Invalid weight entry", details={"errors": errors})


@router.get("/entries")
async def list_entries(
    start_date: date | None = None,
    end_date: date | None = None,
    order: str = "desc",
    coordinator: HybridSyncCoordinator = Depends(get_coordinator),
):
    """List entries sorted by date, optionally within a date range."""
    entries = await coordinator.get_entries()
    entries = filter_entries_by_date_range(entries, start_date, end_date)
    entries = sort_entries_by_date(entries, descending=order != "asc")
    return {"entries": [entry.to_dict() for entry in entries]}


@router.post("/entries", status_code=201)
async def add_entry(
    body: EntryIn,
    coordinator: HybridSyncCoordinator = Depends(get_coordinator),
):
    """Log a new entry."""
    _validate(body)
    entry = await coordinator.add_entry(body.date, body.weight, body.notes or None)
    return entry.to_dict()


@router.put("/entries/{entry_id}")
async def update_entry(
    entry_id: str,
    body: EntryIn,
    coordinator: HybridSyncCoordinator = Depends(get_coordinator),
):
    """Replace the date, weight and notes of an entry."""
    _validate(body)
    entry = await coordinator.update_entry(entry_id, body.date, body.weight, body.notes or None)
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry.to_dict()


@router.delete("/entries/{entry_id}")
async def delete_entry(
    entry_id: str,
    coordinator: HybridSyncCoordinator = Depends(get_coordinator),
):
    """Delete an entry (locally only)."""
    if not await coordinator.delete_entry(entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")
    return {"deleted": True}


@router.get("/stats")
async def stats(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    """Progress statistics and weekly averages."""
    entries = await coordinator.get_entries()
    settings = await coordinator.get_settings()
    return {
        **calculate_weight_stats(entries, settings).to_dict(),
        "weekly_averages": [
            {"week_start": week_start.isoformat(), "weight": weight}
            for week_start, weight in get_weekly_averages(entries)
        ],
    }
