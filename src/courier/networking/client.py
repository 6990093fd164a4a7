"""HTTP client interface for the courier networking layer.

``HttpClient`` owns the mutable state shared by all requests: the active
configuration, the interceptor chain and the transport session. Mutations
are serialized by a lock; each request snapshots that state once and then
runs without holding the lock, so independent requests may run concurrently
on separate threads.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Mapping

from .codec import Codec, JsonCodec
from .config import ClientConfig
from .empty import EmptyValueFactory, default_empty_values
from .errors import HttpClientError
from .executor import (
    CONFIG_ERROR_MODEL,
    RawExecutor,
    RequestExecutor,
    build_wire_request,
)
from .interceptors import Interceptor, InterceptorChain
from .request import HttpMethod, RequestDescriptor, WireRequest, join_url
from .response import ResponseEnvelope, TransportResponse
from .transport import RequestsTransport, Transport
from .types import Result

logger = logging.getLogger(__name__)

TransportFactory = Callable[[ClientConfig], Transport]
SendResult = Result[ResponseEnvelope[Any], HttpClientError]


class HttpClient:
    """REST API client with an interceptor pipeline.

    Methods return a Result that contains either a ``ResponseEnvelope`` or a
    typed ``HttpClientError`` plus request metadata.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        interceptors: list[Interceptor] | None = None,
        transport_factory: TransportFactory = RequestsTransport,
        codec: Codec | None = None,
        empty_values: EmptyValueFactory | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Base URL, default headers, timeout and cache settings.
            interceptors: Initial interceptors, invoked in list order.
            transport_factory: Builds the transport for a configuration; it
                is called again whenever ``update_config`` changes a
                session-shaping field.
            codec: Codec for request parameters and response bodies.
            empty_values: Registry of empty values for bodiless responses.
                Defaults to a private copy of the shared default registry.
        """
        self._lock = Lock()
        self._config = config
        self._transport_factory = transport_factory
        self._transport = transport_factory(config)
        self._retired_transports: list[Transport] = []
        self._chain = InterceptorChain(interceptors or [])
        self._codec = codec or JsonCodec()
        self._empty_values = empty_values or default_empty_values.copy()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def empty_values(self) -> EmptyValueFactory:
        return self._empty_values

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return tuple(self._chain)

    def add_interceptor(self, interceptor: Interceptor) -> None:
        """Append an interceptor; it runs after all existing ones."""
        with self._lock:
            self._chain.append(interceptor)

    def get_config(self) -> ClientConfig:
        with self._lock:
            return self._config

    def update_config(self, config: ClientConfig) -> None:
        """Replace the configuration.

        The transport is rebuilt only when a session-shaping field changed.
        Requests already running keep the transport they started with; the
        replaced transport stays open until ``close``.
        """
        with self._lock:
            rebuild = (
                config.transport_settings()
                != self._config.transport_settings()
            )
            self._config = config
            if rebuild:
                logger.debug("transport settings changed; rebuilding session")
                self._retired_transports.append(self._transport)
                self._transport = self._transport_factory(config)

    def close(self) -> None:
        """Close the current transport and every transport it replaced."""
        with self._lock:
            for transport in self._retired_transports:
                transport.close()
            self._retired_transports.clear()
            self._transport.close()

    def _snapshot(self) -> tuple[ClientConfig, Transport, InterceptorChain]:
        with self._lock:
            return self._config, self._transport, self._chain.snapshot()

    def _executor(self) -> RequestExecutor:
        config, transport, chain = self._snapshot()
        return RequestExecutor(
            config,
            transport,
            chain,
            codec=self._codec,
            empty_values=self._empty_values,
        )

    def _raw_executor(self) -> RawExecutor:
        config, transport, _ = self._snapshot()
        return RawExecutor(
            config,
            transport,
            codec=self._codec,
            empty_values=self._empty_values,
        )

    def execute(
        self,
        descriptor: RequestDescriptor,
        response_type: Any = Any,
        *,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        """Send a prepared descriptor through the interceptor pipeline."""
        return self._executor().send(
            descriptor, response_type, error_model=error_model
        )

    def send(
        self,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        """Perform a request through the interceptor pipeline.

        Args:
            path: Path relative to the configured base URL.
            method: HTTP method.
            parameters: Optional JSON body parameters.
            headers: Optional per-request headers merged over the defaults.
            response_type: Type the success body is decoded into.
            error_model: Type 4xx bodies are decoded into; defaults to
                ``ClientConfig.error_model``.

        Returns:
            Result containing a ResponseEnvelope on success, or an error on
            failure.
        """
        descriptor = RequestDescriptor(path, method, parameters, headers)
        return self.execute(
            descriptor, response_type, error_model=error_model
        )

    def send_raw(
        self,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        parameters: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        """Perform a request that bypasses every interceptor hook."""
        descriptor = RequestDescriptor(path, method, parameters, headers)
        return self._raw_executor().send(
            descriptor, response_type, error_model=error_model
        )

    def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        return self.send(
            path,
            HttpMethod.GET,
            headers=headers,
            response_type=response_type,
            error_model=error_model,
        )

    def post(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        return self.send(
            path,
            HttpMethod.POST,
            parameters,
            headers,
            response_type=response_type,
            error_model=error_model,
        )

    def put(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        return self.send(
            path,
            HttpMethod.PUT,
            parameters,
            headers,
            response_type=response_type,
            error_model=error_model,
        )

    def patch(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        return self.send(
            path,
            HttpMethod.PATCH,
            parameters,
            headers,
            response_type=response_type,
            error_model=error_model,
        )

    def delete(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        response_type: Any = Any,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> SendResult:
        return self.send(
            path,
            HttpMethod.DELETE,
            headers=headers,
            response_type=response_type,
            error_model=error_model,
        )

    def clear_cache(self) -> None:
        cache = self._snapshot()[1].cache
        if cache is not None:
            cache.clear()

    def cache_size_bytes(self) -> int:
        cache = self._snapshot()[1].cache
        return cache.size_bytes() if cache is not None else 0

    def remove_cached_response(self, url: str) -> None:
        """Drop the cached response for ``url``.

        ``url`` may be absolute or a path relative to the base URL.
        """
        config, transport, _ = self._snapshot()
        if transport.cache is None:
            return
        if "://" not in url:
            url = join_url(config.base_url, url)
        transport.cache.remove(url)

    def lookup_cached_response(
        self, request: WireRequest | RequestDescriptor
    ) -> TransportResponse | None:
        """Return the cached response for ``request`` without sending it."""
        config, transport, _ = self._snapshot()
        if transport.cache is None:
            return None
        if isinstance(request, RequestDescriptor):
            request = build_wire_request(request, config, self._codec)
        return transport.cache.lookup(request)
