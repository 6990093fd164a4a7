"""Request descriptors and wire requests."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import unquote, urlsplit, urlunsplit

from requests.structures import CaseInsensitiveDict

from .errors import InvalidPathError

_ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


class HttpMethod(str, Enum):
    """HTTP verbs supported by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def coerce(cls, value: HttpMethod | str) -> HttpMethod:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"unsupported HTTP method: {value!r}") from None


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one logical request.

    The descriptor is what recovering interceptors receive as the original
    request, so a retry can be rebuilt with fresh headers and body instead of
    replaying the already-mutated wire request.
    """

    path: str
    method: HttpMethod = HttpMethod.GET
    parameters: Mapping[str, Any] | None = None
    headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod.coerce(self.method))
        if self.parameters is not None:
            object.__setattr__(
                self, "parameters", MappingProxyType(dict(self.parameters))
            )
        if self.headers is not None:
            object.__setattr__(
                self, "headers", MappingProxyType(dict(self.headers))
            )

    def with_headers(self, headers: Mapping[str, str]) -> RequestDescriptor:
        """Return a copy whose headers are overlaid with ``headers``."""
        merged = CaseInsensitiveDict(self.headers or {})
        merged.update(headers)
        return replace(self, headers=dict(merged.items()))


@dataclass
class WireRequest:
    """Concrete request handed to ``will_send`` hooks and the transport."""

    method: HttpMethod
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes | None = None
    timeout_seconds: float | None = None


def join_url(base_url: str, path: str) -> str:
    """Join ``path`` onto ``base_url`` without escaping the base path.

    Dot segments are resolved, empty segments dropped, and a query string or
    trailing slash on ``path`` is kept. Absolute URLs and ``..`` segments that
    climb above the base path raise ``InvalidPathError``.
    """
    if _ABSOLUTE_URL.match(path) or path.startswith("//"):
        raise InvalidPathError(f"path must be relative to the base URL: {path!r}")
    # A leading "." segment keeps "items:batch" from parsing as a scheme.
    relative = path
    if relative and relative[0] not in "/?#":
        relative = "./" + relative
    target = urlsplit(relative)

    base = urlsplit(base_url)
    segments = [segment for segment in base.path.split("/") if segment]
    floor = len(segments)

    for segment in target.path.split("/"):
        decoded = unquote(segment)
        if decoded in {"", "."}:
            continue
        if decoded == "..":
            if len(segments) <= floor:
                raise InvalidPathError(f"path escapes the base URL: {path!r}")
            segments.pop()
            continue
        segments.append(segment)

    joined = "/" + "/".join(segments)
    if target.path.endswith("/") and segments:
        joined += "/"
    return urlunsplit(
        (base.scheme, base.netloc, joined, target.query, target.fragment)
    )
