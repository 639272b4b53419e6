"""Backup routes."""

from fastapi import APIRouter, Body, Depends

from ...services import BackupService
from ..dependencies import get_backup_service

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("/export")
async def export_backup(backup: BackupService = Depends(get_backup_service)):
    return await backup.export_data()


@router.post("/import")
async def import_backup(
    payload: dict = Body(...),
    backup: BackupService = Depends(get_backup_service),
):
    """Replace local data with a backup payload; rolled back on failure."""
    count = await backup.import_data(payload)
    return {"imported": count}
