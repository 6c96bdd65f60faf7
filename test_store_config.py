"""Tests for store configuration and data directory resolution."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from repeat.store import StoreConfig, default_data_dir
from repeat.store import config as config_module


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("REPEAT_DATA_DIR", "REPEAT_POOL_SIZE", "REPEAT_DB_ECHO", "XDG_DATA_HOME", "APPDATA"):
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working directory out of these tests
    monkeypatch.setattr(config_module, "load_dotenv", lambda: False)


def test_defaults():
    config = StoreConfig()

    assert config.db_filename == "cards.db"
    assert config.pool_size == 5
    assert config.echo is False
    assert config.data_dir is None


def test_pool_size_must_be_positive():
    with pytest.raises(ValidationError):
        StoreConfig(pool_size=0)


def test_data_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv("REPEAT_DATA_DIR", str(tmp_path / "custom"))

    assert default_data_dir() == tmp_path / "custom"


def test_linux_data_dir_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module.sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert default_data_dir() == tmp_path / "repeat"


def test_linux_data_dir_fallback(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module.sys, "platform", "linux")
    monkeypatch.setattr(config_module.Path, "home", classmethod(lambda cls: tmp_path))

    assert default_data_dir() == tmp_path / ".local" / "share" / "repeat"


def test_macos_data_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module.sys, "platform", "darwin")
    monkeypatch.setattr(config_module.Path, "home", classmethod(lambda cls: tmp_path))

    assert default_data_dir() == tmp_path / "Library" / "Application Support" / "repeat"


def test_windows_data_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module.sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path))

    assert default_data_dir() == tmp_path / "repeat" / "data"


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("REPEAT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REPEAT_POOL_SIZE", "3")
    monkeypatch.setenv("REPEAT_DB_ECHO", "true")

    config = StoreConfig.from_env()

    assert config.data_dir is None  # resolved lazily by default_data_dir()
    assert config.pool_size == 3
    assert config.echo is True
    assert config.db_path() == tmp_path / "cards.db"


def test_resolve_data_dir_prefers_explicit_value(monkeypatch, tmp_path):
    monkeypatch.setenv("REPEAT_DATA_DIR", str(tmp_path / "from-env"))
    config = StoreConfig(data_dir=tmp_path / "explicit")

    assert config.resolve_data_dir() == tmp_path / "explicit"
    assert StoreConfig().resolve_data_dir() == Path(tmp_path / "from-env")
