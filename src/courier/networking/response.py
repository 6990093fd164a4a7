"""Transport responses and decoded response envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, Mapping, TypeVar

DataT = TypeVar("DataT")


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class TransportResponse:
    """Raw response metadata and body as produced by a transport.

    ``status_code`` is ``None`` when the transport produced something that is
    not a classifiable HTTP response.
    """

    status_code: int | None
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=_empty_mapping)
    url: str = ""
    reason: str | None = None
    elapsed_s: float | None = None
    cookies: Mapping[str, str] = field(default_factory=_empty_mapping)

    @classmethod
    def from_requests(cls, response: Any) -> TransportResponse:
        """Build from a ``requests.Response`` or a cached equivalent."""
        try:
            elapsed_s: float | None = response.elapsed.total_seconds()
        except AttributeError:
            elapsed_s = None  # Cached and adapter-built responses may lack it
        cookies = getattr(response, "cookies", None)
        return cls(
            status_code=response.status_code,
            content=response.content or b"",
            headers=MappingProxyType(dict(response.headers)),
            url=response.url or "",
            reason=response.reason,
            elapsed_s=elapsed_s,
            cookies=MappingProxyType(
                cookies.get_dict() if cookies is not None else {}
            ),
        )

    @property
    def expected_content_length(self) -> int | None:
        for key, value in self.headers.items():
            if key.lower() == "content-length":
                try:
                    return int(value)
                except (TypeError, ValueError):
                    return None
        return None


@dataclass(frozen=True)
class ResponseEnvelope(Generic[DataT]):
    """Decoded payload together with the response it came from."""

    data: DataT
    response: TransportResponse

    @property
    def status_code(self) -> int | None:
        return self.response.status_code
