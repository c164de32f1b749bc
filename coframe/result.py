"""Result storage disciplines for tasks.

A task stores its return value in one of three slot kinds, chosen by the
task's :class:`ResultDiscipline`:

- OwnedResult: the task owns the value; it can be read any number of times
  and moved out once with ``take()``
- BorrowedResult: the value belongs to someone else; the task only keeps a
  reference and never gives up the slot
- TransientResult: the value is handed over exactly once; the first read
  releases it

The transient discipline is inherently fragile: the value is only available
to the first party that observes the task, so the consumer must take it before
anything else reads the task. Use it only when the task is awaited by exactly
one consumer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from coframe.errors import ResultNotReadyError

T = TypeVar("T")


class ResultSlot(Generic[T]):
    """Sum type for a stored task result."""

    __slots__ = ()

    def is_available(self) -> bool:
        """Return ``True`` while the slot still holds a value."""
        raise NotImplementedError

    def get(self) -> T:
        """Return the stored value."""
        raise NotImplementedError

    def take(self) -> T:
        """Return the stored value, giving up ownership where the slot has it."""
        raise NotImplementedError


@dataclass
class OwnedResult(ResultSlot[T]):
    value: T | None
    moved: bool = False

    def is_available(self) -> bool:
        return not self.moved

    def get(self) -> T:
        if self.moved:
            raise ResultNotReadyError("task result was moved out")
        return self.value  # type: ignore[return-value]

    def take(self) -> T:
        value = self.get()
        self.value = None
        self.moved = True
        return value


@dataclass
class BorrowedResult(ResultSlot[T]):
    referent: T

    def is_available(self) -> bool:
        return True

    def get(self) -> T:
        return self.referent

    def take(self) -> T:
        return self.referent


@dataclass
class TransientResult(ResultSlot[T]):
    value: T | None
    consumed: bool = False

    def is_available(self) -> bool:
        return not self.consumed

    def get(self) -> T:
        return self.take()

    def take(self) -> T:
        if self.consumed:
            raise ResultNotReadyError("transient task result was already consumed")
        value = self.value
        self.value = None
        self.consumed = True
        return value  # type: ignore[return-value]


class ResultDiscipline(Enum):
    """How a task keeps the value its body returns."""

    VALUE = "value"
    REFERENCE = "reference"
    TRANSIENT = "transient"

    def store(self, value: Any) -> ResultSlot[Any]:
        """Wrap ``value`` in the slot kind for this discipline."""
        match self:
            case ResultDiscipline.VALUE:
                return OwnedResult(value)
            case ResultDiscipline.REFERENCE:
                return BorrowedResult(value)
            case ResultDiscipline.TRANSIENT:
                return TransientResult(value)
        raise ValueError(f"Unknown result discipline: {self!r}")


__all__ = [
    "BorrowedResult",
    "OwnedResult",
    "ResultDiscipline",
    "ResultSlot",
    "TransientResult",
]
