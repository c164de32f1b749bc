"""Suspension instructions.

A frame body never talks to the driver directly. Whenever it suspends, the
awaitable it is waiting on yields one of these instructions up through the
Python coroutine machinery, and :func:`coframe.step.dispatch` decides which
frame runs next:

- Suspend: hand control back to whoever resumed the frame
- Transfer: symmetric transfer to another frame, recording the suspending
  frame as that frame's continuation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from coframe.frames import Linkable


@dataclass(frozen=True)
class Suspend:
    """Return control to the resumer.

    The suspending frame stays suspended until someone resumes it again.
    """


@dataclass(frozen=True)
class Transfer:
    """Run ``target`` next and make the suspending frame its continuation.

    When ``target`` completes (or, for an async generator, yields) it hands
    control back to the suspending frame instead of returning to a caller.
    """

    target: Linkable


Instruction: TypeAlias = Suspend | Transfer

SUSPEND = Suspend()


__all__ = ["Instruction", "SUSPEND", "Suspend", "Transfer"]
