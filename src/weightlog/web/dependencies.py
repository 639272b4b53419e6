"""Request-scoped accessors for objects owned by the app."""

from fastapi import Request

from ..services import BackupService, HybridSyncCoordinator


def get_coordinator(request: Request) -> HybridSyncCoordinator:
    """Get the coordinator from app state."""
    return request.app.state.coordinator


def get_backup_service(request: Request) -> BackupService:
    """Get the backup service from app state."""
    return request.app.state.backup
