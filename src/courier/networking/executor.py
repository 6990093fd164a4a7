"""Request execution pipeline.

``RequestExecutor`` runs the full pipeline: build the wire request, apply
``will_send`` hooks, call the transport, apply ``did_receive`` hooks, offer
the response to ``on_error`` hooks, classify the status and decode the body.

``RawExecutor`` skips every hook. Recovering interceptors receive one so a
retry after token refresh terminates after a single attempt instead of
re-entering ``on_error``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from requests.structures import CaseInsensitiveDict

from .classifier import classify
from .codec import Codec, JsonCodec
from .config import ClientConfig
from .empty import EmptyValueFactory, default_empty_values
from .errors import (
    EmptyResponseError,
    HttpClientError,
    RequestEncodeError,
    ResponseDecodeError,
    TransportError,
    UnknownResponseError,
)
from .interceptors import InterceptorChain
from .request import RequestDescriptor, WireRequest, join_url
from .response import ResponseEnvelope, TransportResponse
from .transport import Transport
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)

CONFIG_ERROR_MODEL: Any = object()
"""Marker for "decode 4xx bodies with ``ClientConfig.error_model``"."""

_REDACTED_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})


def build_wire_request(
    descriptor: RequestDescriptor, config: ClientConfig, codec: Codec
) -> WireRequest:
    """Turn a descriptor into a wire request using ``config`` defaults.

    Per-request headers override default headers case-insensitively. When
    parameters are present they become a JSON body, and ``Content-Type``
    defaults to ``application/json``.

    Raises:
        InvalidPathError: If the path cannot be joined onto the base URL.
        RequestEncodeError: If the parameters are not JSON serializable.
    """
    headers: CaseInsensitiveDict = CaseInsensitiveDict(config.default_headers)
    if descriptor.headers:
        headers.update(descriptor.headers)

    body: bytes | None = None
    if descriptor.parameters is not None:
        body = codec.encode(dict(descriptor.parameters))
        headers.setdefault("Content-Type", "application/json")

    return WireRequest(
        method=descriptor.method,
        url=join_url(config.base_url, descriptor.path),
        headers=headers,
        body=body,
        timeout_seconds=config.timeout_seconds,
    )


def _redact(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: "<redacted>" if key.lower() in _REDACTED_HEADERS else value
        for key, value in headers.items()
    }


class RawExecutor:
    """Executes requests without any interceptor hooks."""

    is_raw = True

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        *,
        codec: Codec | None = None,
        empty_values: EmptyValueFactory | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._codec = codec or JsonCodec()
        self._empty_values = empty_values or default_empty_values

    @property
    def config(self) -> ClientConfig:
        return self._config

    def send(
        self,
        descriptor: RequestDescriptor,
        response_type: Any = Any,
        *,
        error_model: Any = CONFIG_ERROR_MODEL,
    ) -> Result[ResponseEnvelope[Any], HttpClientError]:
        """Execute ``descriptor`` and decode the body as ``response_type``.

        Args:
            descriptor: The logical request.
            response_type: Type the success body is decoded into.
            error_model: Type 4xx bodies are decoded into; defaults to the
                configured error model, ``None`` disables decoding.

        Returns:
            ``Ok`` with a ``ResponseEnvelope`` or ``Err`` with a typed error.
        """
        try:
            request = build_wire_request(descriptor, self._config, self._codec)
        except RequestEncodeError as exc:
            return Err(
                exc,
                meta={
                    "method": descriptor.method.value,
                    "path": descriptor.path,
                    "final_error": type(exc).__name__,
                },
            )
        return self._dispatch(descriptor, request, response_type, error_model)

    def _dispatch(
        self,
        descriptor: RequestDescriptor,
        request: WireRequest,
        response_type: Any,
        error_model: Any,
    ) -> Result[ResponseEnvelope[Any], HttpClientError]:
        response = self._transmit(request)
        if isinstance(response, Err):
            return response
        return self._complete(request, response, response_type, error_model)

    def _transmit(
        self, request: WireRequest
    ) -> TransportResponse | Err[HttpClientError]:
        self._log(
            "sending %s %s headers=%s",
            request.method.value,
            request.url,
            _redact(request.headers),
        )
        try:
            return self._transport.send(request)
        except TransportError as exc:
            self._log(
                "%s %s failed: %s",
                request.method.value,
                request.url,
                type(exc).__name__,
            )
            return Err(
                exc,
                meta=self._build_meta(
                    request, None, final_error=type(exc).__name__
                ),
            )

    def _complete(
        self,
        request: WireRequest,
        response: TransportResponse,
        response_type: Any,
        error_model: Any,
    ) -> Result[ResponseEnvelope[Any], HttpClientError]:
        """Classify and decode a response that no interceptor recovered."""
        self._log(
            "%s %s -> %s",
            request.method.value,
            request.url,
            response.status_code,
        )
        if response.status_code is None:
            return self._complete_unclassified(request, response, response_type)

        if error_model is CONFIG_ERROR_MODEL:
            error_model = self._config.error_model
        error = classify(
            response.status_code, response.content, error_model, self._codec
        )
        if error is not None:
            return self._fail(request, response, error)

        if response.status_code == 204 or not response.content:
            empty = self._empty_values.make_empty(response_type)
            if empty is None:
                return self._fail(request, response, EmptyResponseError())
            return Ok(
                ResponseEnvelope(empty, response),
                meta=self._build_meta(request, response),
            )

        try:
            data = self._codec.decode(response.content, response_type)
        except ResponseDecodeError as exc:
            return self._fail(request, response, exc)
        return Ok(
            ResponseEnvelope(data, response),
            meta=self._build_meta(request, response),
        )

    def _complete_unclassified(
        self,
        request: WireRequest,
        response: TransportResponse,
        response_type: Any,
    ) -> Result[ResponseEnvelope[Any], HttpClientError]:
        expected_length = response.expected_content_length
        if expected_length is None:
            expected_length = len(response.content)
        if expected_length == 0:
            empty = self._empty_values.make_empty(response_type)
            if empty is not None:
                return Ok(
                    ResponseEnvelope(empty, response),
                    meta=self._build_meta(request, response),
                )
        return self._fail(request, response, UnknownResponseError())

    def _fail(
        self,
        request: WireRequest,
        response: TransportResponse,
        error: HttpClientError,
    ) -> Err[HttpClientError]:
        return Err(
            error,
            meta=self._build_meta(
                request, response, final_error=type(error).__name__
            ),
        )

    def _build_meta(
        self,
        request: WireRequest,
        response: TransportResponse | None,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary from request and response."""
        meta: dict[str, Any] = {}
        meta["method"] = request.method.value
        meta["url"] = request.url
        meta["timeout_s"] = request.timeout_seconds
        meta["raw"] = self.is_raw
        if response is not None:
            meta["status_code"] = response.status_code
            meta["url"] = response.url or request.url
            meta["reason"] = response.reason
            if response.elapsed_s is not None:
                meta["elapsed_s"] = response.elapsed_s
        if final_error is not None:
            meta["final_error"] = final_error
        return meta

    def _log(self, message: str, *args: Any) -> None:
        level = logging.INFO if self._config.enable_logging else logging.DEBUG
        logger.log(level, message, *args)


class RequestExecutor(RawExecutor):
    """Executes requests through an interceptor chain."""

    is_raw = False

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        chain: InterceptorChain,
        *,
        codec: Codec | None = None,
        empty_values: EmptyValueFactory | None = None,
    ) -> None:
        super().__init__(
            config, transport, codec=codec, empty_values=empty_values
        )
        self._chain = chain

    def raw(self) -> RawExecutor:
        """Return a chain-free executor sharing this executor's snapshot."""
        return RawExecutor(
            self._config,
            self._transport,
            codec=self._codec,
            empty_values=self._empty_values,
        )

    def _dispatch(
        self,
        descriptor: RequestDescriptor,
        request: WireRequest,
        response_type: Any,
        error_model: Any,
    ) -> Result[ResponseEnvelope[Any], HttpClientError]:
        request = self._chain.will_send(request)

        response = self._transmit(request)
        if isinstance(response, Err):
            # No response exists, so recovery hooks are not consulted.
            return response

        self._chain.did_receive(response)

        if response.status_code is not None:
            recovery = self._chain.recover(
                response, descriptor, self.raw(), response_type
            )
            if recovery is not None:
                envelope, interceptor = recovery
                self._log(
                    "%s %s -> %s recovered by %s",
                    request.method.value,
                    request.url,
                    response.status_code,
                    type(interceptor).__name__,
                )
                meta = self._build_meta(request, envelope.response)
                meta["recovered_by"] = type(interceptor).__name__
                meta["original_status_code"] = response.status_code
                return Ok(envelope, meta=meta)

        return self._complete(request, response, response_type, error_model)
