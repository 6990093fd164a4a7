"""Result values returned by the courier networking layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, NoReturn, TypeVar, Union

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[ValueT]):
    """Successful outcome carrying a value and request metadata."""

    value: ValueT
    meta: Mapping[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> ValueT:
        return self.value


@dataclass(frozen=True)
class Err(Generic[ErrorT]):
    """Failed outcome carrying a typed error and request metadata."""

    error: ErrorT
    meta: Mapping[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    def unwrap(self) -> NoReturn:
        """Raise the carried error.

        Recovering interceptors use this to turn a failed raw retry into an
        exception that the interceptor chain treats as "not recovered".
        """
        raise self.error


Result = Union[Ok[ValueT], Err[ErrorT]]
