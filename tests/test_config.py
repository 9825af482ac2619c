import json
import os

import pytest

from buildkit.commands import Command
from buildkit.config import DEFAULT_CONFIG, get_config, load_config, save_default_config
from buildkit.errors import ConfigError
from buildkit.project import Project


def _write(root, data):
    path = root / ".buildkit" / "config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path):
    cfg, path = load_config(tmp_path)
    assert cfg == DEFAULT_CONFIG
    assert path == (tmp_path / ".buildkit" / "config.json").resolve()


def test_project_file_is_deep_merged(tmp_path):
    _write(tmp_path, {"shell": {"timeout_sec": 30}, "swift": {"program": "xcrun swift"}})
    cfg, _ = load_config(tmp_path)

    assert cfg["shell"] == {"type": "/bin/sh", "timeout_sec": 30}
    assert cfg["swift"]["program"] == "xcrun swift"
    assert cfg["executor"]["max_workers"] == DEFAULT_CONFIG["executor"]["max_workers"]


def test_env_wins_over_file(tmp_path, monkeypatch):
    _write(tmp_path, {"shell": {"type": "/bin/bash"}})
    monkeypatch.setenv("BUILDKIT_SHELL", "/bin/zsh")
    monkeypatch.setenv("BUILDKIT_TIMEOUT_SEC", "12.5")
    monkeypatch.setenv("BUILDKIT_MAX_WORKERS", "8")
    monkeypatch.setenv("BUILDKIT_LOG_LEVEL", "debug")
    monkeypatch.setenv("BUILDKIT_LOG_JSON", "yes")

    cfg, _ = load_config(tmp_path)

    assert cfg["shell"] == {"type": "/bin/zsh", "timeout_sec": 12.5}
    assert cfg["executor"]["max_workers"] == 8
    assert cfg["logging"] == {"level": "DEBUG", "json": True}


def test_non_numeric_env_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("BUILDKIT_MAX_WORKERS", "many")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_schema_violation_is_rejected(tmp_path):
    _write(tmp_path, {"executor": {"max_workers": 0}})
    with pytest.raises(ConfigError) as ei:
        load_config(tmp_path)
    assert "executor/max_workers" in str(ei.value)


def test_malformed_json_is_rejected(tmp_path):
    _write(tmp_path, "{not json")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_explicit_missing_file_is_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path, str(tmp_path / "nope.json"))


def test_saved_defaults_load_back(tmp_path):
    path = tmp_path / "cfg" / "config.json"
    save_default_config(path)
    cfg, used = load_config(tmp_path, str(path))
    assert used == path.resolve()
    assert cfg == DEFAULT_CONFIG


def test_get_config_is_cached():
    assert get_config() is get_config()


def test_dotenv_in_working_directory_is_loaded(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("BUILDKIT_SWIFT_PROGRAM=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    get_config.cache_clear()
    try:
        assert get_config()["swift"]["program"] == "from-dotenv"
        assert Project().command_line(Command.build()) == "from-dotenv build"
    finally:
        # python-dotenv writes straight into os.environ
        os.environ.pop("BUILDKIT_SWIFT_PROGRAM", None)


def test_dotenv_does_not_override_set_variables(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("BUILDKIT_SWIFT_PROGRAM=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BUILDKIT_SWIFT_PROGRAM", "from-env")
    get_config.cache_clear()

    assert get_config()["swift"]["program"] == "from-env"
