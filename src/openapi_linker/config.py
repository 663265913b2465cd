"""Configuration management with XDG paths and precedence resolution.

This module handles all persistent configuration for openapi_linker:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.openapi-linker/`` on macOS and Windows. See :func:`get_config_dir`
  and :func:`get_cache_dir`.
* **Global config** -- A single :class:`~openapi_linker.models.GlobalConfig`
  JSON file. The ``OPENAPI_LINKER_CONFIG`` environment variable points at an
  alternative file.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the config file into the effective
  configuration.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from openapi_linker.exceptions import ConfigError
from openapi_linker.models import CacheBackend, GlobalConfig

_APP_NAME = "openapi-linker"
_CONFIG_FILENAME = "config.json"

ENV_CONFIG = "OPENAPI_LINKER_CONFIG"
ENV_CACHE_BACKEND = "OPENAPI_LINKER_CACHE_BACKEND"
ENV_LOG_LEVEL = "OPENAPI_LINKER_LOG_LEVEL"
ENV_HOST = "OPENAPI_LINKER_HOST"
ENV_PORT = "OPENAPI_LINKER_PORT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/openapi-linker/`` (default
    ``~/.config/openapi-linker/``). On macOS/Windows: ``~/.openapi-linker/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds the on-disk document store used when the cache backend is
    ``disk``. Its contents can be deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/openapi-linker/`` (default
    ``~/.cache/openapi-linker/``). On macOS/Windows:
    ``~/.openapi-linker/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file, honouring ``OPENAPI_LINKER_CONFIG``."""
    override = os.environ.get(ENV_CONFIG)
    if override:
        return Path(override)
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The deserialised :class:`~openapi_linker.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_host: Optional[str] = None,
    cli_port: Optional[int] = None,
    cli_cache_backend: Optional[str] = None,
    cli_log_level: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``OPENAPI_LINKER_CACHE_BACKEND``,
           ``OPENAPI_LINKER_LOG_LEVEL``, ``OPENAPI_LINKER_HOST``,
           ``OPENAPI_LINKER_PORT``)
        3. Config file
        4. Defaults

    Raises:
        ConfigError: If the config file or an override value is invalid.
    """
    cfg = load_global_config()

    backend = cli_cache_backend or os.environ.get(ENV_CACHE_BACKEND)
    if backend:
        try:
            cfg.cache.backend = CacheBackend(backend.lower())
        except ValueError as exc:
            raise ConfigError(
                f"Unknown cache backend '{backend}'. Expected one of: "
                + ", ".join(b.value for b in CacheBackend)
            ) from exc

    level = cli_log_level or os.environ.get(ENV_LOG_LEVEL)
    if level:
        cfg.log_level = level.upper()

    host = cli_host or os.environ.get(ENV_HOST)
    if host:
        cfg.server.host = host

    if cli_port is not None:
        cfg.server.port = cli_port
    else:
        env_port = os.environ.get(ENV_PORT)
        if env_port:
            try:
                cfg.server.port = int(env_port)
            except ValueError as exc:
                raise ConfigError(f"{ENV_PORT} must be an integer, got '{env_port}'") from exc

    try:
        return GlobalConfig.model_validate(cfg.model_dump())
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
