"""Fetch results: a success payload or a tagged failure.

Fetchers return a `FetchResult` instead of raising. `unwrap_or_else` is the
single place a failure turns into fallback data, so nothing past it can
throw.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful fetch carrying its value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> FetchResult[U]:
        """Apply `fn` to the value; an exception inside `fn` becomes a Failure."""
        try:
            return Success(fn(self.value))
        except Exception as e:
            return Failure(e)

    def unwrap_or_else(self, fallback: Callable[[Exception], T]) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed fetch carrying the error that caused it."""

    error: Exception

    @property
    def ok(self) -> bool:
        return False

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    def map(self, fn: Callable) -> Failure:
        return self

    def unwrap_or_else(self, fallback: Callable[[Exception], T]) -> T:
        return fallback(self.error)


FetchResult = Union[Success[T], Failure]
