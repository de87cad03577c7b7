# src/togo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TOGO"

ENV_LOCAL = "local"
ENV_TEST = "test"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    environment: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    # ---- Storage ----
    db_timeout: float
    sql_debug: bool

    # ---- Quota ----
    default_max_todo: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "togo").strip() or "togo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        environment = _env(_k("ENV"), ENV_LOCAL).strip().lower() or ENV_LOCAL

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/togo"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "togo.sqlite3")

        db_timeout = max(0.0, _env_float(_k("DB_TIMEOUT"), 30.0))
        # Test environment traces SQL by default, like a debug-mode ORM session.
        sql_debug = _env_bool(_k("SQL_DEBUG"), environment == ENV_TEST)

        default_max_todo = max(0, _env_int(_k("DEFAULT_MAX_TODO"), 5))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            environment=environment,
            data_dir=data_dir,
            db_path=db_path,
            db_timeout=db_timeout,
            sql_debug=sql_debug,
            default_max_todo=default_max_todo,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
