"""Error taxonomy for the courier networking layer.

Per-request failures are returned to callers inside ``Err`` results. Two errors
are raised directly: ``ConfigurationError`` when a ``ClientConfig`` is built
with invalid values, and ``InvalidPathError`` when a request path is absolute
or escapes the base URL. ``RequestEncodeError`` depends on the parameter values
of one call and is returned inside ``Err`` like a transport or status error.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

UNKNOWN_CLIENT_ERROR = "Unknown client error"
EMPTY_RESPONSE_ERROR = "Empty response"
CLIENT_ERROR_OCCURRED = "Client error occurred"
SERVER_ERROR_OCCURRED = "Server error occurred"


class ApiErrorResponse(BaseModel):
    """Default error model decoded from 4xx response bodies."""

    message: str | None = None
    code: str | None = None


class HttpClientError(Exception):
    """Base class for all courier client errors."""

    default_message = UNKNOWN_CLIENT_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(HttpClientError, ValueError):
    """Raised when a client configuration is invalid."""


class InvalidPathError(HttpClientError, ValueError):
    """Raised when a request path cannot be joined onto the base URL."""


class UnknownResponseError(HttpClientError):
    """No classifiable HTTP response was obtained."""


class TransportError(UnknownResponseError):
    """The transport failed before producing a response."""


class RequestTimeoutError(TransportError):
    """The transport call exceeded its timeout."""


class ConnectionFailedError(TransportError):
    """The transport could not connect to the remote host."""


class UnexpectedStatusError(UnknownResponseError):
    """A status code outside the success and error ranges (1xx, 3xx)."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"{UNKNOWN_CLIENT_ERROR}, Status Code: {status_code}")
        self.status_code = status_code


class EmptyResponseError(HttpClientError):
    """A success response had no body and the target type has no empty value."""

    default_message = EMPTY_RESPONSE_ERROR


class StatusError(HttpClientError):
    """Base class for errors classified from an HTTP status code."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ClientError(StatusError):
    """4xx response, with the decoded error model when one was available."""

    def __init__(self, status_code: int, model: Any | None = None) -> None:
        message = getattr(model, "message", None) if model is not None else None
        super().__init__(status_code, message or CLIENT_ERROR_OCCURRED)
        self.model = model


class ServerError(StatusError):
    """5xx response."""

    def __init__(self, status_code: int) -> None:
        super().__init__(
            status_code,
            f"{SERVER_ERROR_OCCURRED}, Status Code: {status_code}",
        )


class ResponseDecodeError(HttpClientError):
    """A response body did not match the expected type."""

    def __init__(self, message: str, target: Any = None) -> None:
        super().__init__(message)
        self.target = target


class RequestEncodeError(HttpClientError):
    """Request parameters could not be serialized."""
