"""
Two-variant outcome type for fallible operations.

Expected failures inside neo are returned, not raised:

    result = adapter.save()
    if is_failure(result):
        presenter.print_error(result.error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

from .exceptions import AppError

T = TypeVar("T")
E = TypeVar("E", bound=AppError)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying data."""

    data: T

    @property
    def success(self) -> Literal[True]:
        return True


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed outcome carrying an AppError."""

    error: E

    @property
    def success(self) -> Literal[False]:
        return False


Result = Union[Success[T], Failure[E]]


def success(data: T = None) -> Success[T]:  # type: ignore[assignment]
    """Create a success result."""
    return Success(data)


def failure(error: E) -> Failure[E]:
    """Create a failure result."""
    return Failure(error)


def is_success(result: Result) -> bool:
    return isinstance(result, Success)


def is_failure(result: Result) -> bool:
    return isinstance(result, Failure)
