import os

import pytest

from coinbot.errors import EnvVarError
from coinbot.settings import load_env, require_env


def test_require_env_returns_value(monkeypatch):
    monkeypatch.setenv("COINBOT_SAMPLE_VALUE", "value")
    assert require_env("COINBOT_SAMPLE_VALUE") == "value"


def test_require_env_accepts_empty_value(monkeypatch):
    monkeypatch.setenv("COINBOT_SAMPLE_VALUE", "")
    assert require_env("COINBOT_SAMPLE_VALUE") == ""


def test_require_env_missing_raises(monkeypatch):
    monkeypatch.delenv("COINBOT_SURELY_MISSING", raising=False)
    with pytest.raises(EnvVarError) as info:
        require_env("COINBOT_SURELY_MISSING")
    assert "COINBOT_SURELY_MISSING" in str(info.value)


def test_load_env_reads_file_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("COINBOT_FROM_FILE", "placeholder")
    monkeypatch.delenv("COINBOT_FROM_FILE")
    (tmp_path / ".env").write_text("COINBOT_FROM_FILE=loaded\n")
    monkeypatch.chdir(tmp_path)

    assert load_env() is True
    assert os.environ["COINBOT_FROM_FILE"] == "loaded"


def test_load_env_keeps_existing_values(tmp_path, monkeypatch):
    monkeypatch.setenv("COINBOT_KEEP_ME", "original")
    (tmp_path / ".env").write_text("COINBOT_KEEP_ME=overwritten\n")
    monkeypatch.chdir(tmp_path)

    loaded = load_env()
    assert loaded is True
    assert os.environ["COINBOT_KEEP_ME"] == "original"
    assert require_env("COINBOT_KEEP_ME") == "original"