"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import AppConfig

# Stable keys of the two durable records
ENTRIES_KEY = "weight-tracker-entries"
SETTINGS_KEY = "weight-tracker-settings"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = AppConfig.DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "weightlog.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        await db.commit()
