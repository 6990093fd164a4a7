"""Configuration models for the HttpClient interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import urlsplit

from .errors import ApiErrorResponse, ConfigurationError


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class CacheConfig:
    """Response cache sizing.

    Without ``disk_path`` responses are kept in memory and bounded by
    ``memory_capacity_bytes``; with it they are stored in an SQLite file
    under that directory and bounded by ``disk_capacity_bytes``.
    """

    memory_capacity_bytes: int = 10_000_000
    disk_capacity_bytes: int = 50_000_000
    disk_path: str | None = None

    def __post_init__(self) -> None:
        if self.memory_capacity_bytes < 0:
            raise ConfigurationError("memory_capacity_bytes must be >= 0")
        if self.disk_capacity_bytes < 0:
            raise ConfigurationError("disk_capacity_bytes must be >= 0")

    @property
    def capacity_bytes(self) -> int:
        """Capacity of the backend selected by ``disk_path``."""
        if self.disk_path is None:
            return self.memory_capacity_bytes
        return self.disk_capacity_bytes


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for HttpClient behavior.

    ``error_model`` is the type 4xx bodies are decoded into when a call does
    not pass its own; ``None`` disables error body decoding.
    """

    base_url: str
    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    timeout_seconds: float = 60.0
    cache: CacheConfig | None = None
    enable_logging: bool = False
    error_model: Any = ApiErrorResponse
    user_agent: str | None = None
    verify_tls: bool = True
    allow_redirects: bool = True

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        parts = urlsplit(self.base_url)
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise ConfigurationError(
                f"base_url must be an absolute http(s) URL: {self.base_url!r}"
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be > 0")

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )

    def transport_settings(self) -> tuple[Any, ...]:
        """Return the fields that require a new transport session when changed."""
        return (
            self.user_agent,
            self.verify_tls,
            self.allow_redirects,
            self.cache,
        )
