"""Bearer-token interceptors.

``AuthInterceptor`` only decorates outgoing requests. ``TokenRefreshInterceptor``
also recovers from 401 responses: it exchanges the stored refresh token for a
new token pair and retries the original request once through the raw
executor it is handed.

Example:
    store = InMemoryTokenStore(access_token="a", refresh_token="r")
    client = HttpClient(config, interceptors=[TokenRefreshInterceptor(store)])
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .errors import HttpClientError
from .interceptors import Interceptor
from .request import HttpMethod, RequestDescriptor, WireRequest
from .response import ResponseEnvelope, TransportResponse

if TYPE_CHECKING:
    from .executor import RawExecutor

logger = logging.getLogger(__name__)


def bearer(token: str) -> str:
    return f"Bearer {token}"


class AuthInterceptor(Interceptor):
    """Adds ``Authorization: Bearer <token>`` when a token is available."""

    def __init__(self, access_token_provider: Callable[[], str | None]) -> None:
        self._access_token_provider = access_token_provider

    def will_send(self, request: WireRequest) -> WireRequest:
        token = self._access_token_provider()
        if token:
            request.headers["Authorization"] = bearer(token)
        return request


class TokenStore(Protocol):
    """Storage for the access/refresh token pair."""

    def get_access_token(self) -> str | None:
        ...

    def get_refresh_token(self) -> str | None:
        ...

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryTokenStore:
    """Thread-safe ``TokenStore`` kept in process memory."""

    def __init__(
        self,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._lock = Lock()

    def get_access_token(self) -> str | None:
        with self._lock:
            return self._access_token

    def get_refresh_token(self) -> str | None:
        with self._lock:
            return self._refresh_token

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token

    def clear(self) -> None:
        with self._lock:
            self._access_token = None
            self._refresh_token = None


class TokenPair(BaseModel):
    """Body of a successful token refresh response."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class TokenRefreshInterceptor(Interceptor):
    """Refreshes the access token on 401 and retries the request once.

    Both the refresh call and the retry go through the raw executor, so the
    retry carries only this interceptor's ``Authorization`` header and never
    re-enters the chain. A failed refresh clears the store and raises; the
    chain logs the failure and continues to the next interceptor.
    """

    def __init__(
        self,
        token_store: TokenStore,
        refresh_path: str = "/auth/refresh",
        *,
        refresh_status_codes: frozenset[int] = frozenset({401}),
    ) -> None:
        self._token_store = token_store
        self._refresh_path = refresh_path
        self._refresh_status_codes = refresh_status_codes
        self._refresh_lock = Lock()

    def will_send(self, request: WireRequest) -> WireRequest:
        token = self._token_store.get_access_token()
        if token:
            request.headers["Authorization"] = bearer(token)
        return request

    def on_error(
        self,
        response: TransportResponse,
        original: RequestDescriptor,
        executor: RawExecutor,
        response_type: Any,
    ) -> ResponseEnvelope[Any] | None:
        if response.status_code not in self._refresh_status_codes:
            return None

        seen_token = self._token_store.get_access_token()
        access_token = self.refresh(executor, seen_token)
        retry = original.with_headers({"Authorization": bearer(access_token)})
        return executor.send(retry, response_type).unwrap()

    def refresh(
        self, executor: RawExecutor, seen_token: str | None = None
    ) -> str:
        """Exchange the stored refresh token for a new pair.

        When ``seen_token`` is given and the store already holds a different
        access token, another request refreshed while this one waited for the
        lock; that token is returned and the refresh token is not spent again.

        Raises:
            HttpClientError: If the refresh request fails; the store is
                cleared first.
        """
        with self._refresh_lock:
            current = self._token_store.get_access_token()
            if seen_token is not None and current and current != seen_token:
                return current
            descriptor = RequestDescriptor(
                self._refresh_path,
                HttpMethod.POST,
                parameters={
                    "refreshToken": self._token_store.get_refresh_token() or ""
                },
            )
            try:
                result = executor.send(descriptor, TokenPair)
                pair: TokenPair = result.unwrap().data
            except HttpClientError:
                logger.info("token refresh failed; clearing stored tokens")
                self._token_store.clear()
                raise
            self._token_store.set_tokens(pair.access_token, pair.refresh_token)
            return pair.access_token
