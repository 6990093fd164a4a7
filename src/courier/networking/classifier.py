"""Status code classification."""

from __future__ import annotations

import logging
from typing import Any

from .codec import Codec, JsonCodec
from .errors import (
    ClientError,
    HttpClientError,
    ResponseDecodeError,
    ServerError,
    UnexpectedStatusError,
)

logger = logging.getLogger(__name__)

_default_codec = JsonCodec()


def decode_error_model(
    body: bytes, error_model: Any, codec: Codec | None = None
) -> Any | None:
    """Decode a 4xx body, returning ``None`` when it does not fit the model."""
    if error_model is None or not body:
        return None
    try:
        return (codec or _default_codec).decode(body, error_model)
    except ResponseDecodeError:
        logger.debug("error body did not decode as %r", error_model)
        return None


def classify(
    status_code: int,
    body: bytes,
    error_model: Any = None,
    codec: Codec | None = None,
) -> HttpClientError | None:
    """Map a status code to an error, or ``None`` for success.

    3xx codes are not client errors: a redirect that reaches this point was
    not followed by the transport, so it is reported as an unexpected status.
    """
    if 200 <= status_code < 300:
        return None
    if 400 <= status_code < 500:
        return ClientError(
            status_code, decode_error_model(body, error_model, codec)
        )
    if 500 <= status_code < 600:
        return ServerError(status_code)
    return UnexpectedStatusError(status_code)
