"""Sync status and remote action routes."""

from fastapi import APIRouter, Depends

from ...services import HybridSyncCoordinator
from ..dependencies import get_coordinator
from ..schemas import ConnectivityIn

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/status")
async def sync_status(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    return coordinator.get_sync_status().to_dict()


@router.post("/push")
async def push(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    """Push everything to Airtable now."""
    pushed = await coordinator.force_sync()
    return {"pushed": pushed, **coordinator.get_sync_status().to_dict()}


@router.post("/recover")
async def recover(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    """Overwrite local data with the Airtable copy."""
    result = await coordinator.recover_from_remote()
    return {
        "entries": len(result.entries),
        "settings": result.settings.to_dict() if result.settings else None,
    }


@router.post("/test")
async def test_connection(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    result = await coordinator.test_connection()
    return result.to_dict()


@router.post("/cleanup")
async def cleanup(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    """Delete duplicate Airtable settings records."""
    deleted = await coordinator.delete_duplicate_settings()
    return {"deleted": deleted}


@router.post("/connectivity")
async def connectivity(
    body: ConnectivityIn,
    coordinator: HybridSyncCoordinator = Depends(get_coordinator),
):
    """Report a connectivity change from the client environment."""
    coordinator.set_online(body.online)
    return coordinator.get_sync_status().to_dict()
