"""Services built on top of the local store and remote client."""

from .backup import EXPORT_VERSION, BackupService
from .sync import (
    HybridSyncCoordinator,
    RecoveryResult,
    SyncDataset,
    SyncStatus,
    create_coordinator,
)

__all__ = [
    "BackupService",
    "create_coordinator",
    "EXPORT_VERSION",
    "HybridSyncCoordinator",
    "RecoveryResult",
    "SyncDataset",
    "SyncStatus",
]
