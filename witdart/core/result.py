"""
Result type — explicit success/error values for every fallible operation.

Pipeline stages never raise for expected failures.  They return ``Ok``
or ``Err`` and callers chain them:

    resolve_inputs(inputs).and_then(parse_documents).map(emit)

``unwrap()`` is the only raising path and is meant for tests and for
states that are genuinely unrecoverable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class UnwrapError(Exception):
    """Raised when unwrapping the wrong side of a Result."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result wrapping ``value``."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], F]) -> Ok[T]:
        return self

    def and_then(self, fn: Callable[[T], Result[U, Any]]) -> Result[U, Any]:
        return fn(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise UnwrapError(f"Called unwrap_err() on Ok({self.value!r})")

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result wrapping ``error``."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        return self

    def map_err(self, fn: Callable[[E], F]) -> Err[F]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Result[U, Any]]) -> Err[E]:
        return self

    def unwrap(self) -> Any:
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrapError(f"Called unwrap() on Err({self.error!r})")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: U) -> U:
        return default


Result = Union[Ok[T], Err[E]]
