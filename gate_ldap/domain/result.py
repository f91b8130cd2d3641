"""
Result Variants - Explicit success/failure values.

Used where a caller must handle a failure path instead of relying on an
exception unwinding through it.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union


T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result carrying the error; unwrap() raises it."""
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err[E]]
