"""
Store Configuration

Resolves where the card database lives and how the connection pool is sized.

Settings come from environment variables (optionally loaded from a .env file):
- REPEAT_DATA_DIR: directory holding cards.db (default: per-user data dir)
- REPEAT_POOL_SIZE: number of pooled connections (default: 5)
- REPEAT_DB_ECHO: "true" to log every SQL statement
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from repeat.store.constants import APP_NAME, DB_FILENAME, POOL_SIZE


def default_data_dir() -> Path:
    """
    Get the platform-appropriate data directory for the application.

    REPEAT_DATA_DIR wins when set. Otherwise:
    - Windows: %APPDATA%/repeat/data
    - macOS: ~/Library/Application Support/repeat
    - Linux and others: $XDG_DATA_HOME/repeat or ~/.local/share/repeat

    Returns:
        Path to the data directory (not created here)
    """
    override = os.getenv("REPEAT_DATA_DIR")
    if override:
        return Path(override).expanduser()

    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / APP_NAME / "data"

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg_data_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return base / APP_NAME


class StoreConfig(BaseModel):
    """Where the database file lives and how it is opened."""
    data_dir: Optional[Path] = None  # None = resolve with default_data_dir()
    db_filename: str = DB_FILENAME
    pool_size: int = Field(default=POOL_SIZE, ge=1)
    echo: bool = False  # SQLAlchemy statement logging

    @classmethod
    def from_env(cls) -> StoreConfig:
        """
        Build a config from environment variables and an optional .env file.

        REPEAT_DATA_DIR is left to default_data_dir(), which reads it when
        the directory is resolved.
        """
        load_dotenv()

        return cls(
            pool_size=int(os.getenv("REPEAT_POOL_SIZE", str(POOL_SIZE))),
            echo=os.getenv("REPEAT_DB_ECHO", "false").lower() == "true",
        )

    def resolve_data_dir(self) -> Path:
        return self.data_dir if self.data_dir is not None else default_data_dir()

    def db_path(self) -> Path:
        return self.resolve_data_dir() / self.db_filename
