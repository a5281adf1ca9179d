"""Result values for lookups that may fail.

``ParentResolver.try_resolve`` hands store failures back as a ``Failure``
instead of raising them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, cast

T = TypeVar('T')
E = TypeVar('E', bound=Exception)


class Result(ABC, Generic[T, E]):
    """Either a resolved value or the error that prevented it."""

    @abstractmethod
    def is_success(self) -> bool:
        ...

    def is_failure(self) -> bool:
        return not self.is_success()

    @abstractmethod
    def value(self) -> T:
        """Raises ValueError on a Failure."""
        ...

    @abstractmethod
    def error(self) -> E:
        """Raises ValueError on a Success."""
        ...


@dataclass(frozen=True, slots=True)
class Success(Result[T, E]):
    _value: T

    def __repr__(self) -> str:
        return f"Success({self._value!r})"

    def is_success(self) -> bool:
        return True

    def value(self) -> T:
        return self._value

    def error(self) -> E:
        raise ValueError("Cannot get error from Success result")


@dataclass(frozen=True, slots=True)
class Failure(Result[T, E]):
    _error: E

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"

    def is_success(self) -> bool:
        return False

    def value(self) -> T:
        raise ValueError(f"Cannot get value from Failure result: {self._error}")

    def error(self) -> E:
        return self._error


def try_catch(fn: Callable[[], T], error_class: type[E] | tuple[type[E], ...] = Exception) -> Result[T, E]:
    """Run ``fn``, turning exceptions of ``error_class`` into a Failure.

    Other exceptions propagate.
    """
    try:
        return Success(fn())
    except error_class as e:
        return Failure(cast(E, e))
