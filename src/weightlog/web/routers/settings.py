"""User settings routes."""

from fastapi import APIRouter, Depends

from ...models.settings import UserSettings
from ...services import HybridSyncCoordinator
from ..dependencies import get_coordinator
from ..schemas import SettingsIn

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
async def get_settings(coordinator: HybridSyncCoordinator = Depends(get_coordinator)):
    """Current settings; an empty name means first run."""
    settings = await coordinator.get_settings()
    return settings.to_dict()


@router.put("")
async def save_settings(
    body: SettingsIn,
    coordinator: HybridSyncCoordinator = Depends(get_coordinator),
):
    """Replace the settings record."""
    settings = UserSettings.from_dict(body.model_dump(mode="json", by_alias=True))
    await coordinator.update_settings(settings)
    return settings.to_dict()
