"""Trivial suspension points.

``await suspend_always()`` hands control back to whoever resumed the frame;
the frame continues at the next resume. ``await suspend_never()`` does not
suspend at all.
"""

from __future__ import annotations

from collections.abc import Generator, Iterator
from typing import Any

from coframe.instructions import SUSPEND, Instruction


class SuspendAlways:
    __slots__ = ()

    def __await__(self) -> Generator[Instruction, Any, None]:
        yield SUSPEND

    def __repr__(self) -> str:
        return "suspend_always()"


class SuspendNever:
    __slots__ = ()

    def __await__(self) -> Iterator[Instruction]:
        return iter(())

    def __repr__(self) -> str:
        return "suspend_never()"


def suspend_always() -> SuspendAlways:
    return SuspendAlways()


def suspend_never() -> SuspendNever:
    return SuspendNever()


__all__ = ["SuspendAlways", "SuspendNever", "suspend_always", "suspend_never"]
