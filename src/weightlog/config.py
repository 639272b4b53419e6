"""Application configuration from environment variables."""

from pathlib import Path

from environs import Env

env = Env()

STAND = env.str("STAND", default="local")
BASE_PATH = Path.cwd().absolute()

if STAND == "local":
    env.read_env(path=str(BASE_PATH / ".env"))

# Default data directory (repository root / data)
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


class Settings:
    def __init__(self):
        self.DATA_DIR: Path = env.path("WEIGHTLOG_DATA_DIR", default=DEFAULT_DATA_DIR)

        # Airtable
        self.AIRTABLE_BASE_ID: str = env.str("AIRTABLE_BASE_ID", "")
        self.AIRTABLE_API_KEY: str = env.str("AIRTABLE_API_KEY", "")
        self.AIRTABLE_TABLE_NAME: str = env.str("AIRTABLE_TABLE_NAME", "WeightEntries")
        self.AIRTABLE_SETTINGS_TABLE: str = env.str("AIRTABLE_SETTINGS_TABLE", "Settings")
        self.AIRTABLE_API_URL: str = env.str("AIRTABLE_API_URL", "https://api.airtable.com/v0")
        self.AIRTABLE_TIMEOUT: float = env.float("AIRTABLE_TIMEOUT", 30.0)

        # Sync scheduling (seconds)
        self.SYNC_DEBOUNCE_SECONDS: float = env.float("SYNC_DEBOUNCE_SECONDS", 1.0)
        self.SYNC_INTERVAL_SECONDS: float = env.float("SYNC_INTERVAL_SECONDS", 30.0)

    @property
    def remote_configured(self) -> bool:
        """Remote sync needs both a base id and an API key."""
        return bool(self.AIRTABLE_BASE_ID and self.AIRTABLE_API_KEY)


AppConfig = Settings()
