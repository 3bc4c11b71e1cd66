from pathlib import Path

import pytest

from pubconfig.config import DEFAULT_REQUIRED_FIELDS, Settings, parse_required_fields


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PUBCONFIG_DATA_DIR",
        "PUBCONFIG_HISTORY_DIR",
        "PUBCONFIG_HOST",
        "PUBCONFIG_PORT",
        "PUBCONFIG_REQUIRED_FIELDS",
        "PUBCONFIG_LOG_LEVEL",
        "PUBCONFIG_STORE_URL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.data_dir == Path("data")
    assert settings.resolved_history_dir == Path("data") / "history"
    assert settings.port == 3000
    assert settings.required_fields == DEFAULT_REQUIRED_FIELDS
    assert settings.log_level == "WARNING"
    assert settings.store_url is None


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PUBCONFIG_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PUBCONFIG_HISTORY_DIR", str(tmp_path / "versions"))
    monkeypatch.setenv("PUBCONFIG_PORT", "8080")
    monkeypatch.setenv("PUBCONFIG_REQUIRED_FIELDS", "publisherId, pages,publisherId")
    monkeypatch.setenv("PUBCONFIG_LOG_LEVEL", "debug")
    monkeypatch.setenv("PUBCONFIG_STORE_URL", "http://127.0.0.1:3000")

    settings = Settings.from_env()

    assert settings.data_dir == tmp_path
    assert settings.resolved_history_dir == tmp_path / "versions"
    assert settings.port == 8080
    assert settings.required_fields == ("publisherId", "pages")
    assert settings.log_level == "DEBUG"
    assert settings.store_url == "http://127.0.0.1:3000"


def test_invalid_port_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUBCONFIG_PORT", "three thousand")

    with pytest.raises(ValueError, match="PUBCONFIG_PORT"):
        Settings.from_env()


def test_blank_required_fields_fall_back_to_defaults() -> None:
    assert parse_required_fields("  ") == DEFAULT_REQUIRED_FIELDS
    assert parse_required_fields(None) == DEFAULT_REQUIRED_FIELDS
