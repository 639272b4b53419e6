"""CLI commands for weightlog."""

from .backup import export, import_backup
from .entries import entries
from .init import init
from .serve import serve
from .settings import settings
from .stats import stats
from .sync import sync

__all__ = [
    "entries",
    "export",
    "import_backup",
    "init",
    "serve",
    "settings",
    "stats",
    "sync",
]
