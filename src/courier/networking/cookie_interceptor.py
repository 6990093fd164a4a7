"""Cookie capture interceptor."""

from __future__ import annotations

from threading import Lock

from .interceptors import Interceptor
from .request import WireRequest
from .response import TransportResponse


class CookieInterceptor(Interceptor):
    """Remembers response cookies and replays them on later requests.

    The ``refreshToken`` cookie, when seen, is also exposed as
    ``refresh_token`` for token refresh flows.
    """

    refresh_token_key = "refreshToken"

    def __init__(self) -> None:
        self._cookies: dict[str, str] = {}
        self._refresh_token: str | None = None
        self._lock = Lock()

    @property
    def cookies(self) -> dict[str, str]:
        with self._lock:
            return dict(self._cookies)

    @property
    def refresh_token(self) -> str | None:
        with self._lock:
            return self._refresh_token

    def will_send(self, request: WireRequest) -> WireRequest:
        with self._lock:
            if self._cookies:
                request.headers["Cookie"] = "; ".join(
                    f"{key}={value}" for key, value in self._cookies.items()
                )
        return request

    def did_receive(self, response: TransportResponse) -> None:
        if not response.cookies:
            return
        with self._lock:
            self._cookies.update(response.cookies)
            if self.refresh_token_key in response.cookies:
                self._refresh_token = response.cookies[self.refresh_token_key]
