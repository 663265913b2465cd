"""Tests for openapi_linker.config -- XDG paths, precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from openapi_linker.config import (
    get_cache_dir,
    get_config_dir,
    load_global_config,
    resolve_config,
)
from openapi_linker.exceptions import ConfigError
from openapi_linker.models import CacheBackend, GlobalConfig


def _write_config(isolated_config: Path, data: dict) -> Path:
    path = isolated_config / "config" / "openapi-linker" / "config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestXDGPaths:
    def test_config_dir_custom(self, isolated_config: Path) -> None:
        result = get_config_dir()
        assert result == isolated_config / "config" / "openapi-linker"
        assert result.is_dir()

    def test_cache_dir_custom(self, isolated_config: Path) -> None:
        result = get_cache_dir()
        assert result == isolated_config / "cache" / "openapi-linker"
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_linker.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "openapi-linker"

    def test_non_xdg_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_linker.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".openapi-linker"
        assert get_cache_dir() == tmp_path / ".openapi-linker" / "cache"


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        cfg = load_global_config()
        assert cfg == GlobalConfig()
        assert cfg.cache.backend == CacheBackend.MEMORY
        assert cfg.server.route == "/api/linker"

    def test_reads_file(self, isolated_config: Path) -> None:
        _write_config(isolated_config, {"cache": {"backend": "disk", "ttl_seconds": 60}})
        cfg = load_global_config()
        assert cfg.cache.backend == CacheBackend.DISK
        assert cfg.cache.ttl_seconds == 60
        assert cfg.server == GlobalConfig().server

    def test_invalid_json(self, isolated_config: Path) -> None:
        path = _write_config(isolated_config, {})
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        _write_config(isolated_config, {"cache": {"backend": "redis"}})
        with pytest.raises(ConfigError):
            load_global_config()

    def test_config_env_override(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = isolated_config / "elsewhere.json"
        custom.write_text(json.dumps({"log_level": "debug"}), encoding="utf-8")
        monkeypatch.setenv("OPENAPI_LINKER_CONFIG", str(custom))
        assert load_global_config().log_level == "DEBUG"


class TestResolveConfig:
    def test_file_values(self, isolated_config: Path) -> None:
        _write_config(isolated_config, {"server": {"host": "0.0.0.0", "port": 8000}})
        cfg = resolve_config()
        assert cfg.server.host == "0.0.0.0"
        assert cfg.server.port == 8000

    def test_env_beats_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_config(isolated_config, {"server": {"port": 8000}, "cache": {"backend": "memory"}})
        monkeypatch.setenv("OPENAPI_LINKER_PORT", "8100")
        monkeypatch.setenv("OPENAPI_LINKER_CACHE_BACKEND", "DISK")
        monkeypatch.setenv("OPENAPI_LINKER_LOG_LEVEL", "warning")
        cfg = resolve_config()
        assert cfg.server.port == 8100
        assert cfg.cache.backend == CacheBackend.DISK
        assert cfg.log_level == "WARNING"

    def test_cli_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAPI_LINKER_PORT", "8100")
        monkeypatch.setenv("OPENAPI_LINKER_HOST", "10.0.0.1")
        cfg = resolve_config(cli_host="127.0.0.2", cli_port=9000, cli_cache_backend="memory")
        assert cfg.server.host == "127.0.0.2"
        assert cfg.server.port == 9000
        assert cfg.cache.backend == CacheBackend.MEMORY

    def test_unknown_backend(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown cache backend"):
            resolve_config(cli_cache_backend="redis")

    def test_bad_port(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAPI_LINKER_PORT", "eighty")
        with pytest.raises(ConfigError, match="must be an integer"):
            resolve_config()
