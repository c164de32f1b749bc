"""Driving frame bodies and handing control between frames.

This module provides:
- StepOutput: what one resumption of a body produced (Suspended, Yielded,
  Returned, Raised)
- drive_coroutine / drive_generator: resume a Python body once and classify
  the result
- dispatch: turn a suspension instruction into the next frame to run
- resume_chain: the trampoline that keeps running frames until one hands
  control back to the caller
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from loguru import logger

from coframe.config import settings
from coframe.errors import InvalidSuspensionError
from coframe.instructions import Instruction, Suspend, Transfer

if TYPE_CHECKING:
    from coframe.frames import Resumable

logger = logger.bind(component="coframe.step")


# ============================================================================
# Step Outputs
# ============================================================================


@dataclass(frozen=True)
class Suspended:
    """The body stopped at an await and handed over an instruction."""

    instruction: Instruction


@dataclass(frozen=True)
class Yielded:
    """A synchronous generator body produced a value."""

    value: Any


@dataclass(frozen=True)
class Returned:
    """The resumed awaitable finished with ``value``.

    For a coroutine this is the return value of the body. For the ``asend``
    awaitable of an async generator it is the value the body yielded.
    """

    value: Any


@dataclass(frozen=True)
class Raised:
    """An exception escaped the body."""

    error: Exception


StepOutput: TypeAlias = Suspended | Yielded | Returned | Raised


# ============================================================================
# Body Drivers
# ============================================================================


def drive_coroutine(
    send: Callable[[None], Any],
    throw: Callable[[BaseException], Any],
) -> Suspended | Returned | Raised:
    """Resume a coroutine-like awaitable until it suspends or finishes.

    Anything the body suspends on that is not a coframe instruction is thrown
    back into the body as :class:`InvalidSuspensionError`, so the body gets the
    chance to handle it at the offending ``await``.

    Exceptions that are not ``Exception`` subclasses (``KeyboardInterrupt``,
    ``SystemExit``) are not captured and propagate to the caller.
    """
    try:
        item = send(None)
        while not isinstance(item, (Suspend, Transfer)):
            item = throw(InvalidSuspensionError(item))
    except StopIteration as stop:
        return Returned(stop.value)
    except Exception as error:
        return Raised(error)
    return Suspended(item)


def drive_generator(body: Generator[Any, Any, Any]) -> Yielded | Returned | Raised:
    """Resume a synchronous generator up to its next ``yield``."""
    try:
        return Yielded(next(body))
    except StopIteration as stop:
        return Returned(stop.value)
    except Exception as error:
        return Raised(error)


# ============================================================================
# Control Transfer
# ============================================================================


def dispatch(awaiting: Resumable, instruction: Instruction) -> Resumable | None:
    """Return the frame that runs after ``awaiting`` suspended on ``instruction``.

    ``None`` means control goes back to whoever started the current chain.
    """
    match instruction:
        case Transfer(target=target):
            if target.is_terminal():
                return awaiting
            target.set_continuation(awaiting)
            if settings.debug:
                logger.debug("transfer {} -> {}", _describe(awaiting), _describe(target))
            return target
        case Suspend():
            if settings.debug:
                logger.debug("suspend {}", _describe(awaiting))
            return None
        case _:
            raise InvalidSuspensionError(instruction)


def resume_chain(frame: Resumable) -> None:
    """Run ``frame`` and every frame control is transferred to.

    Each frame step returns the next frame to run instead of calling it, so a
    chain of any depth runs in constant Python stack depth. The loop ends when
    a frame hands control back (suspends without a target, or completes with
    no continuation).
    """
    current: Resumable | None = frame
    while current is not None:
        if settings.debug:
            logger.debug("resume {} ({})", _describe(current), current.state.value)
        current = current.step()


def _describe(frame: Resumable) -> str:
    return f"{type(frame).__name__}@{id(frame):#x}"


__all__ = [
    "Raised",
    "Returned",
    "StepOutput",
    "Suspended",
    "Yielded",
    "dispatch",
    "drive_coroutine",
    "drive_generator",
    "resume_chain",
]
