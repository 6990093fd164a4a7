"""Interceptor protocol and chain for the request pipeline.

Interceptors hook into three points of a request:

- ``will_send`` rewrites the wire request before it reaches the transport.
- ``did_receive`` observes the transport response. It cannot change it.
- ``on_error`` may recover from a response by returning a substitute
  ``ResponseEnvelope``, for example after refreshing a token and retrying.

Hooks run in insertion order. ``did_receive`` and ``on_error`` failures are
logged and swallowed so a faulty interceptor cannot break the response path.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING, Any, Iterable, Iterator

from .request import RequestDescriptor, WireRequest
from .response import ResponseEnvelope, TransportResponse

if TYPE_CHECKING:
    from .executor import RawExecutor

logger = logging.getLogger(__name__)


class Interceptor:
    """Base interceptor whose hooks all do nothing.

    Subclasses override only the hooks they need.
    """

    def will_send(self, request: WireRequest) -> WireRequest:
        """Return the request to send, mutated or replaced as needed.

        Args:
            request: The wire request produced by the previous interceptor.

        Returns:
            The request the next interceptor (or the transport) receives.
        """
        return request

    def did_receive(self, response: TransportResponse) -> None:
        """Observe a transport response."""

    def on_error(
        self,
        response: TransportResponse,
        original: RequestDescriptor,
        executor: RawExecutor,
        response_type: Any,
    ) -> ResponseEnvelope[Any] | None:
        """Offer a substitute result for ``response``.

        Called for every classifiable response, before status classification.
        Any retry must go through ``executor``, which bypasses the interceptor
        chain; calling back into the client would re-enter this hook.

        Args:
            response: The response as received from the transport.
            original: The descriptor the caller sent, before any
                ``will_send`` mutation.
            executor: Chain-free executor bound to the same configuration.
            response_type: The type the caller expects ``data`` to decode as.

        Returns:
            A response envelope to use as the request result, or ``None`` if
            this interceptor does not handle the response.
        """
        return None


class InterceptorChain:
    """Ordered, append-only collection of interceptors."""

    def __init__(self, interceptors: Iterable[Interceptor] = ()) -> None:
        self._interceptors: list[Interceptor] = list(interceptors)
        self._lock = Lock()

    def append(self, interceptor: Interceptor) -> None:
        with self._lock:
            self._interceptors.append(interceptor)

    def snapshot(self) -> InterceptorChain:
        """Return a chain frozen at the current membership."""
        with self._lock:
            return InterceptorChain(tuple(self._interceptors))

    def __iter__(self) -> Iterator[Interceptor]:
        with self._lock:
            return iter(tuple(self._interceptors))

    def __len__(self) -> int:
        with self._lock:
            return len(self._interceptors)

    def will_send(self, request: WireRequest) -> WireRequest:
        """Thread ``request`` through every ``will_send`` hook in order."""
        for interceptor in self:
            request = interceptor.will_send(request)
        return request

    def did_receive(self, response: TransportResponse) -> None:
        for interceptor in self:
            try:
                interceptor.did_receive(response)
            except Exception:
                logger.warning(
                    "did_receive hook of %s failed; ignoring",
                    type(interceptor).__name__,
                    exc_info=True,
                )

    def recover(
        self,
        response: TransportResponse,
        original: RequestDescriptor,
        executor: RawExecutor,
        response_type: Any,
    ) -> tuple[ResponseEnvelope[Any], Interceptor] | None:
        """Return the first recovery result and the interceptor that produced it."""
        for interceptor in self:
            try:
                recovered = interceptor.on_error(
                    response, original, executor, response_type
                )
            except Exception:
                logger.warning(
                    "on_error hook of %s failed; treating as not recovered",
                    type(interceptor).__name__,
                    exc_info=True,
                )
                continue
            if recovered is not None:
                return recovered, interceptor
        return None
