"""Response cache capability backed by requests-cache."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Any

import requests
from requests_cache import CachedSession

from .config import CacheConfig
from .request import WireRequest
from .response import TransportResponse

logger = logging.getLogger(__name__)


def build_cached_session(config: CacheConfig) -> CachedSession:
    """Create a caching session for ``config``.

    Memory-only caching is used unless ``disk_path`` is set, in which case
    responses go to an SQLite database inside that directory.
    """
    if config.disk_path is None:
        return CachedSession(backend="memory")
    directory = Path(config.disk_path)
    directory.mkdir(parents=True, exist_ok=True)
    return CachedSession(str(directory / "http_cache"), backend="sqlite")


class ResponseCache:
    """Inspection and maintenance operations over a requests-cache backend.

    Body sizes are tracked per cache key so the capacity check after each
    request does not deserialize the whole backend. The table is loaded from
    the backend on first use and rebuilt after evictions and URL removals.
    """

    def __init__(
        self, backend: Any, capacity_bytes: int, *, verify_tls: bool = True
    ) -> None:
        self._backend = backend
        self._capacity_bytes = capacity_bytes
        self._verify_tls = verify_tls
        self._sizes: dict[str, int] | None = None
        self._lock = Lock()

    @property
    def capacity_bytes(self) -> int:
        return self._capacity_bytes

    def _tracked_sizes(self) -> dict[str, int]:
        # Caller holds the lock.
        if self._sizes is None:
            self._sizes = {
                key: len(response.content or b"")
                for key, response in self._backend.responses.items()
            }
        return self._sizes

    def clear(self) -> None:
        with self._lock:
            self._backend.clear()
            self._sizes = {}

    def size_bytes(self) -> int:
        """Total size of cached response bodies."""
        with self._lock:
            return sum(self._tracked_sizes().values())

    def remove(self, url: str) -> None:
        with self._lock:
            self._backend.delete(urls=[url])
            self._sizes = None

    def lookup(self, request: WireRequest) -> TransportResponse | None:
        prepared = requests.Request(
            method=request.method.value,
            url=request.url,
            headers=dict(request.headers),
            data=request.body,
        ).prepare()
        key = self._backend.create_key(prepared, verify=self._verify_tls)
        cached = self._backend.get_response(key)
        if cached is None:
            return None
        return TransportResponse.from_requests(cached)

    def record(self, response: Any) -> None:
        """Account for a response returned by the cached session.

        Cache hits are ignored. A response the session stored is added to the
        tracked total, and eviction runs once the total exceeds capacity.
        """
        if getattr(response, "from_cache", False):
            return
        key = getattr(response, "cache_key", None)
        if not key:
            return
        with self._lock:
            if key not in self._backend.responses:
                return
            sizes = self._tracked_sizes()
            sizes[key] = len(response.content or b"")
            over_capacity = sum(sizes.values()) > self._capacity_bytes
        if over_capacity:
            self.enforce_capacity()

    def enforce_capacity(self) -> None:
        """Evict expired, then oldest, responses until within capacity."""
        with self._lock:
            if sum(self._tracked_sizes().values()) <= self._capacity_bytes:
                return
            self._backend.delete(expired=True)
            entries = sorted(
                self._backend.responses.items(),
                key=lambda item: item[1].created_at,
            )
            sizes = {
                key: len(response.content or b"") for key, response in entries
            }
            size = sum(sizes.values())
            evicted = 0
            for key, _ in entries:
                if size <= self._capacity_bytes:
                    break
                self._backend.delete(key)
                size -= sizes.pop(key)
                evicted += 1
            self._sizes = sizes
            if evicted:
                logger.debug(
                    "evicted %d cached responses to fit %d bytes",
                    evicted,
                    self._capacity_bytes,
                )
