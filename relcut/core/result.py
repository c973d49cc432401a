"""Result type for explicit error handling.

Every fallible relcut operation returns ``Ok(value)`` or ``Err(error)``
rather than raising, so the orchestrator can see exactly which step of a
release failed and decide whether the repository is still consistent.

Usage:
    match store.read():
        case Ok(version):
            print(f"current version: {version}")
        case Err(error):
            print(f"cannot read version: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result containing a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result containing an error."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
