"""
Success-or-failure values for calls that must never abort the main flow.

Generators return `Ok(value)` or `Err(reason)`; the call site decides the
fallback with `unwrap_or`.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default):
        return default


Result = Union[Ok[T], Err[E]]
