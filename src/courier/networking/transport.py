"""Transport capability and its requests-based implementation."""

from __future__ import annotations

from typing import Protocol

import requests

from .cache import ResponseCache, build_cached_session
from .config import ClientConfig
from .errors import ConnectionFailedError, RequestTimeoutError, TransportError
from .request import WireRequest
from .response import TransportResponse


class Transport(Protocol):
    """Sends one wire request and returns the raw response.

    Implementations raise ``TransportError`` subclasses when no response
    could be obtained and never retry on their own.
    """

    cache: ResponseCache | None

    def send(self, request: WireRequest) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class RequestsTransport:
    """Transport over a ``requests.Session``.

    When the config enables caching the session is a requests-cache
    ``CachedSession`` and ``cache`` exposes it.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._verify_tls = config.verify_tls
        self._allow_redirects = config.allow_redirects
        self.cache: ResponseCache | None = None
        if config.cache is not None:
            session: requests.Session = build_cached_session(config.cache)
            self.cache = ResponseCache(
                session.cache,
                config.cache.capacity_bytes,
                verify_tls=config.verify_tls,
            )
        else:
            session = requests.Session()
        if config.user_agent:
            session.headers["User-Agent"] = config.user_agent
        self._session = session

    def send(self, request: WireRequest) -> TransportResponse:
        try:
            response = self._session.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=request.timeout_seconds,
                allow_redirects=self._allow_redirects,
                verify=self._verify_tls,
            )
        except requests.exceptions.Timeout as exc:
            raise RequestTimeoutError(str(exc)) from exc
        except requests.exceptions.ConnectionError as exc:
            raise ConnectionFailedError(str(exc)) from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(str(exc)) from exc

        if self.cache is not None:
            self.cache.record(response)
        return TransportResponse.from_requests(response)

    def close(self) -> None:
        self._session.close()
