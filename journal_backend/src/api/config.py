import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration read from environment variables.
    """
    db_path: str
    log_level: str
    log_dir: Optional[str]
    log_file_name: str
    frontend_origin: str
    busy_timeout: float


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        db_path=os.getenv("JOURNAL_DB_PATH", "./journal.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR") or None,
        log_file_name=os.getenv("LOG_FILE_NAME", "journal.log"),
        # The desktop webview origin; override when serving a dev frontend
        frontend_origin=os.getenv("FRONTEND_ORIGIN", "tauri://localhost"),
        busy_timeout=float(os.getenv("SQLITE_BUSY_TIMEOUT", "30")),
    )
