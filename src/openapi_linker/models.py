"""Pydantic configuration models shared across openapi_linker modules.

This is the single source of truth for configuration shapes. The models are
serialised as JSON in the user's config directory (see
:mod:`openapi_linker.config`) and nest as follows::

    GlobalConfig
    +-- cache: CacheConfig
    +-- request: RequestConfig
    +-- server: ServerConfig

All models use Pydantic v2.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CacheBackend(str, enum.Enum):
    """Backing store for the process-wide document cache."""

    MEMORY = "memory"
    DISK = "disk"


class CacheConfig(BaseModel):
    """Process-wide document cache settings.

    ``memory`` keeps fetched documents for the lifetime of the process.
    ``disk`` stores them under :func:`~openapi_linker.config.get_cache_dir`
    so they survive restarts and are shared by worker processes; entries
    expire after ``ttl_seconds`` when it is set.
    """

    enabled: bool = Field(default=True, description="Enable the process-wide cache")
    backend: CacheBackend = Field(
        default=CacheBackend.MEMORY, description="Backing store: memory or disk"
    )
    ttl_seconds: Optional[int] = Field(
        default=None, description="Expiry for disk entries; None keeps them forever"
    )


class RequestConfig(BaseModel):
    """Settings for outgoing document fetches."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")


class ServerConfig(BaseModel):
    """Settings for ``openapi-linker serve``."""

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=7071, description="Port to listen on")
    route: str = Field(default="/api/linker", description="Path of the linker route")

    @field_validator("route")
    @classmethod
    def _route_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            return "/" + value
        return value


class GlobalConfig(BaseModel):
    """Top-level configuration loaded from ``config.json``.

    Read by :func:`~openapi_linker.config.load_global_config`. Every field
    has a default so an empty or missing file is valid.
    """

    log_level: str = Field(default="INFO", description="Operator log level")
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.upper()
