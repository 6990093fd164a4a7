"""Empty-value registry for responses that carry no body."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable


@dataclass(frozen=True)
class EmptyResponse:
    """Decode target for endpoints that answer without a body."""


class EmptyValueFactory:
    """Maps decode targets to zero-argument constructors of empty values.

    Constructors must not return ``None``; ``make_empty`` uses ``None`` to
    signal that a target has no registered empty value.
    """

    def __init__(
        self, constructors: dict[Any, Callable[[], Any]] | None = None
    ) -> None:
        self._constructors: dict[Any, Callable[[], Any]] = dict(
            constructors or {}
        )
        self._lock = Lock()

    def register(self, target: Any, constructor: Callable[[], Any]) -> None:
        with self._lock:
            self._constructors[target] = constructor

    def unregister(self, target: Any) -> None:
        with self._lock:
            self._constructors.pop(target, None)

    def supports(self, target: Any) -> bool:
        with self._lock:
            return target in self._constructors

    def make_empty(self, target: Any) -> Any | None:
        with self._lock:
            constructor = self._constructors.get(target)
        if constructor is None:
            return None
        return constructor()

    def copy(self) -> EmptyValueFactory:
        with self._lock:
            return EmptyValueFactory(self._constructors)


default_empty_values = EmptyValueFactory({EmptyResponse: EmptyResponse})
