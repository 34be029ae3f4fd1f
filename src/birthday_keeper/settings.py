from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

APP_FOLDER_NAME = "BirthdayReminder"


@dataclass(frozen=True)
class Settings:
    database_path: Path
    config_path: Path
    log_level: str


def default_data_dir() -> Path:
    if sys.platform == "win32" and os.getenv("APPDATA"):
        base = Path(os.environ["APPDATA"])
    elif os.getenv("XDG_DATA_HOME"):
        base = Path(os.environ["XDG_DATA_HOME"])
    else:
        base = Path.home() / ".local" / "share"
    return base / APP_FOLDER_NAME


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_settings() -> Settings:
    data_dir = default_data_dir()

    database_path = Path(_optional_env("BIRTHDAY_DB_PATH") or data_dir / "birthdays.db")
    config_path = Path(_optional_env("BIRTHDAY_CONFIG_PATH") or data_dir / "config.toml")
    log_level = (_optional_env("BIRTHDAY_LOG_LEVEL") or "WARNING").upper()

    return Settings(
        database_path=database_path,
        config_path=config_path,
        log_level=log_level,
    )
