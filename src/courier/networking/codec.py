"""JSON codec used to encode request parameters and decode response bodies."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Protocol

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from .errors import RequestEncodeError, ResponseDecodeError


class Codec(Protocol):
    """Encodes request parameters and decodes response bodies."""

    def encode(self, value: Any) -> bytes:
        """Serialize ``value`` or raise ``RequestEncodeError``."""
        ...

    def decode(self, data: bytes, target: Any) -> Any:
        """Decode ``data`` as ``target`` or raise ``ResponseDecodeError``."""
        ...


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _adapter_for(target: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(target)
    except TypeError:
        # Unhashable type expressions cannot be memoized.
        return TypeAdapter(target)


class JsonCodec:
    """Codec backed by ``json`` for encoding and pydantic for typed decoding.

    ``bytes`` targets receive the raw body untouched; every other target is
    validated with a pydantic ``TypeAdapter``, so models, dataclasses,
    ``TypedDict`` and plain containers all work.
    """

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise RequestEncodeError(
                f"request parameters are not JSON serializable: {exc}"
            ) from exc

    def decode(self, data: bytes, target: Any) -> Any:
        if target is bytes:
            return data
        try:
            adapter = _adapter_for(target)
        except PydanticUserError as exc:
            raise ResponseDecodeError(
                f"cannot decode into {_type_name(target)}: {exc}",
                target=target,
            ) from exc
        try:
            return adapter.validate_json(data)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"response body does not match {_type_name(target)}: "
                f"{exc.error_count()} validation error(s)",
                target=target,
            ) from exc


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))
