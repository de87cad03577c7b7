# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from togo.config import Settings

_VARS = (
    "TOGO_APP_NAME",
    "TOGO_LOG_LEVEL",
    "TOGO_ENV",
    "TOGO_DATA_DIR",
    "TOGO_DB_PATH",
    "TOGO_DB_TIMEOUT",
    "TOGO_SQL_DEBUG",
    "TOGO_DEFAULT_MAX_TODO",
)


def _clear(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch) -> None:
    _clear(monkeypatch)
    s = Settings.from_env()

    assert s.app_name == "togo"
    assert s.environment == "local"
    assert s.data_dir == Path(".local/togo")
    assert s.db_path == Path(".local/togo") / "togo.sqlite3"
    assert s.db_timeout == 30.0
    assert s.sql_debug is False
    assert s.default_max_todo == 5


def test_env_overrides(monkeypatch, tmp_path: Path) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("TOGO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TOGO_DEFAULT_MAX_TODO", "9")
    monkeypatch.setenv("TOGO_DB_TIMEOUT", "2.5")
    monkeypatch.setenv("TOGO_ENV", "TEST")

    s = Settings.from_env()

    assert s.db_path == tmp_path / "togo.sqlite3"
    assert s.default_max_todo == 9
    assert s.db_timeout == 2.5
    assert s.environment == "test"
    # test environment traces SQL unless told otherwise
    assert s.sql_debug is True

    monkeypatch.setenv("TOGO_SQL_DEBUG", "off")
    assert Settings.from_env().sql_debug is False


def test_malformed_numbers_fall_back(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("TOGO_DEFAULT_MAX_TODO", "many")
    monkeypatch.setenv("TOGO_DB_TIMEOUT", "soon")

    s = Settings.from_env()

    assert s.default_max_todo == 5
    assert s.db_timeout == 30.0


def test_negative_default_quota_is_clamped(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("TOGO_DEFAULT_MAX_TODO", "-3")
    assert Settings.from_env().default_max_todo == 0
