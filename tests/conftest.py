# pyright: reportUnknownParameterType=false, reportMissingParameterType=false
import json
from dataclasses import replace
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit

import pytest
from requests.structures import CaseInsensitiveDict

from courier.networking.client import HttpClient
from courier.networking.config import ClientConfig
from courier.networking.request import WireRequest
from courier.networking.response import TransportResponse


class FakeTransport:
    """In-process transport that replays queued responses per URL path.

    Each path keeps a queue; the last queued item is repeated once the queue
    is down to one entry. Items may be responses or exceptions to raise.
    """

    def __init__(self) -> None:
        self.sent: list[WireRequest] = []
        self.cache: Any = None
        self.closed = False
        self._routes: dict[str | None, list[Any]] = {}

    def reply(
        self,
        status: int | None,
        body: Any = b"",
        *,
        path: str | None = None,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        reason: str = "",
    ) -> None:
        content = body if isinstance(body, bytes) else json.dumps(body).encode()
        self._routes.setdefault(path, []).append(
            TransportResponse(
                status_code=status,
                content=content,
                headers=MappingProxyType(headers or {}),
                reason=reason,
                elapsed_s=0.1,
                cookies=MappingProxyType(cookies or {}),
            )
        )

    def fail(self, error: Exception, *, path: str | None = None) -> None:
        self._routes.setdefault(path, []).append(error)

    def send(self, request: WireRequest) -> TransportResponse:
        self.sent.append(
            WireRequest(
                method=request.method,
                url=request.url,
                headers=CaseInsensitiveDict(request.headers),
                body=request.body,
                timeout_seconds=request.timeout_seconds,
            )
        )
        path = urlsplit(request.url).path
        queue = self._routes.get(path) or self._routes.get(None)
        if not queue:
            raise AssertionError(f"unexpected request to {request.url}")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return replace(item, url=request.url)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def config():
    return ClientConfig(
        base_url="https://api.example.com/v1",
        default_headers={"Accept": "application/json", "X-Client": "courier"},
        timeout_seconds=5.0,
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(config, transport):
    return HttpClient(config, transport_factory=lambda _config: transport)
