"""Error types raised by coframe.

Failures raised by user code inside a task or generator body are never wrapped:
they are captured when they escape the body and re-raised unchanged at the next
point where the caller observes the computation. The classes below only report
structural misuse of the primitives themselves.
"""

from __future__ import annotations


class CoframeError(RuntimeError):
    """Base class for misuse of coframe primitives."""


class EmptyComputationError(CoframeError):
    """Raised when an operation needs a frame but the owner holds none.

    This happens for default-constructed owners, for owners whose frame was
    moved out with ``move()``, and for owners that were explicitly destroyed.
    """


class BadResultAccessError(CoframeError):
    """Raised when a result is read that is not available."""


class ResultNotReadyError(BadResultAccessError):
    """Raised when a result is requested before it was produced.

    Also raised when a task's result has already been moved out with
    ``take_result()`` or consumed under the transient discipline.
    """


class PastEndAccessError(BadResultAccessError):
    """Raised when a cursor at the end of a sequence is read or advanced."""


class ReentrantResumeError(CoframeError):
    """Raised when a frame is resumed while it is already running."""


class InvalidSuspensionError(CoframeError, TypeError):
    """Raised inside a body that awaited something coframe cannot drive.

    Only coframe awaitables (tasks, advance operations, ``suspend_always()``
    and friends) may suspend a frame. Event-loop futures are not supported.
    """

    def __init__(self, instruction: object) -> None:
        self.instruction = instruction
        super().__init__(
            f"Cannot suspend on {instruction!r}\n"
            "Hint: only coframe awaitables (Task, AdvanceOp, suspend_always()) can be awaited "
            "inside a coframe body; event-loop futures need an event loop"
        )


class StalledBridgeError(CoframeError):
    """Raised when a synchronous adapter cannot finish an advance.

    The producer suspended on something that nothing will resume, so running
    the advance to completion synchronously is impossible.
    """


__all__ = [
    "BadResultAccessError",
    "CoframeError",
    "EmptyComputationError",
    "InvalidSuspensionError",
    "PastEndAccessError",
    "ReentrantResumeError",
    "ResultNotReadyError",
    "StalledBridgeError",
]
