"""Suspended computation frames.

This module provides:
- FrameState: lifecycle of a frame
- Resumable / Linkable protocols: the capability a frame offers to the driver
  (``step``, ``is_terminal``) and, for awaitable frames, to its awaiters
  (``set_continuation``)
- Concrete frames: TaskFrame, GeneratorFrame, AsyncGeneratorFrame
- Readiness helpers shared by owners and cursors

A frame wraps exactly one Python coroutine, generator or async generator
object. The Python object holds the body's locals across suspension points;
the frame record adds the lifecycle state, the produced-value slot, the
captured-exception slot and the continuation link. Frames are owned by a
single handle (see :mod:`coframe._handle`); cursors and awaiters reference
them without owning them.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Coroutine, Generator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

from loguru import logger

from coframe.errors import EmptyComputationError, ReentrantResumeError, ResultNotReadyError
from coframe.result import ResultDiscipline, ResultSlot
from coframe.step import (
    Raised,
    Returned,
    Suspended,
    Yielded,
    dispatch,
    drive_coroutine,
    drive_generator,
)

logger = logger.bind(component="coframe.frames")

F = TypeVar("F", bound="Resumable")


class FrameState(Enum):
    CREATED = "created"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    FAILED = "failed"
    DESTROYED = "destroyed"


TERMINAL_STATES = frozenset({FrameState.COMPLETED, FrameState.FAILED, FrameState.DESTROYED})


# ============================================================================
# Frame Protocols
# ============================================================================


@runtime_checkable
class Resumable(Protocol):
    """A frame the driver can run."""

    state: FrameState

    def step(self) -> Resumable | None:
        """Run until the next suspension point.

        Returns the frame that runs next, or ``None`` to hand control back to
        whoever started the chain.
        """
        ...

    def is_terminal(self) -> bool: ...

    def destroy(self) -> None: ...


@runtime_checkable
class Linkable(Resumable, Protocol):
    """A frame that can be awaited and therefore resumes a continuation."""

    def set_continuation(self, frame: Resumable) -> None: ...


# ============================================================================
# Readiness Helpers
# ============================================================================


def is_good(frame: Resumable | None) -> bool:
    """True when the frame exists and can still be resumed."""
    return frame is not None and not frame.is_terminal()


def is_ready(frame: Resumable | None) -> bool:
    """True when the frame is absent or has reached a terminal state."""
    return not is_good(frame)


def check_frame(frame: F | None, what: str) -> F:
    if frame is None:
        raise EmptyComputationError(f"{what} is empty or destroyed")
    return frame


def same_position(left: Resumable | None, right: Resumable | None) -> bool:
    """Cursor equality: same frame, or both at the end."""
    return left is right or (not is_good(left) and not is_good(right))


def _enter(frame: Resumable) -> None:
    if frame.state is FrameState.RUNNING:
        raise ReentrantResumeError(f"{type(frame).__name__} is already running")
    frame.state = FrameState.RUNNING


def _release_continuation(frame: TaskFrame | AsyncGeneratorFrame) -> Resumable | None:
    continuation, frame.continuation = frame.continuation, None
    return continuation


# ============================================================================
# Concrete Frames
# ============================================================================


@dataclass(eq=False)
class TaskFrame:
    """Frame of a single-result computation.

    Completion hands control to the continuation recorded by the last
    awaiter. The captured error is replayed once, by the first result read.
    """

    body: Coroutine[Any, Any, Any]
    discipline: ResultDiscipline = ResultDiscipline.VALUE
    state: FrameState = FrameState.CREATED
    result: ResultSlot[Any] | None = None
    error: Exception | None = None
    continuation: Resumable | None = field(default=None, repr=False)

    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def set_continuation(self, frame: Resumable) -> None:
        self.continuation = frame

    def step(self) -> Resumable | None:
        if self.is_terminal():
            return None
        _enter(self)
        try:
            output = drive_coroutine(self.body.send, self.body.throw)
        except BaseException:
            self.state = FrameState.FAILED
            raise

        match output:
            case Suspended(instruction=instruction):
                self.state = FrameState.SUSPENDED
                return dispatch(self, instruction)
            case Returned(value=value):
                self.result = self.discipline.store(value)
                self.state = FrameState.COMPLETED
            case Raised(error=error):
                self.error = error
                self.state = FrameState.FAILED
        return _release_continuation(self)

    def read_result(self) -> Any:
        return self._slot().get()

    def take_result(self) -> Any:
        return self._slot().take()

    def _slot(self) -> ResultSlot[Any]:
        self.rethrow_if_failed()
        if self.result is not None:
            return self.result
        if self.state is FrameState.FAILED:
            raise ResultNotReadyError("task failed and its error was already observed")
        raise ResultNotReadyError("task result accessed before it was set")

    def rethrow_if_failed(self) -> None:
        error, self.error = self.error, None
        if error is not None:
            raise error

    def destroy(self) -> None:
        if self.state is FrameState.DESTROYED:
            return
        if self.state is FrameState.RUNNING:
            raise ReentrantResumeError("cannot destroy a running task frame")
        try:
            self.body.close()
        finally:
            self.state = FrameState.DESTROYED
            self.result = None
            self.error = None
            self.continuation = None


@dataclass(eq=False)
class GeneratorFrame:
    """Frame of a synchronous lazy sequence.

    Has no continuation: a generator is driven only by its cursors, never
    awaited.
    """

    body: Generator[Any, Any, Any]
    state: FrameState = FrameState.CREATED
    value: Any = None
    has_value: bool = False
    error: Exception | None = None

    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def step(self) -> None:
        if self.is_terminal():
            return None
        _enter(self)
        try:
            output = drive_generator(self.body)
        except BaseException:
            self._clear(FrameState.FAILED)
            raise

        match output:
            case Yielded(value=value):
                self.value = value
                self.has_value = True
                self.state = FrameState.SUSPENDED
            case Returned():
                self._clear(FrameState.COMPLETED)
            case Raised(error=error):
                self._clear(FrameState.FAILED)
                self.error = error
        return None

    def advance(self) -> None:
        """Produce the next value, re-raising a failure of the body at once."""
        self.step()
        self.rethrow_if_failed()

    def current(self) -> Any:
        if not self.has_value:
            raise ResultNotReadyError("generator has not produced a value yet")
        return self.value

    def rethrow_if_failed(self) -> None:
        error, self.error = self.error, None
        if error is not None:
            raise error

    def destroy(self) -> None:
        if self.state is FrameState.DESTROYED:
            return
        if self.state is FrameState.RUNNING:
            raise ReentrantResumeError("cannot destroy a running generator frame")
        try:
            self.body.close()
        finally:
            self._clear(FrameState.DESTROYED)
            self.error = None

    def _clear(self, state: FrameState) -> None:
        self.value = None
        self.has_value = False
        self.state = state


@dataclass(eq=False)
class AsyncGeneratorFrame:
    """Frame of a lazy sequence whose production steps may await.

    ``continuation`` is the consumer currently waiting for the next value.
    Every yield, and the end of the body, hands control to the consumer.
    ``pending`` is the in-flight ``asend`` awaitable while the body is
    between two yields.
    """

    body: AsyncGenerator[Any, Any]
    state: FrameState = FrameState.CREATED
    value: Any = None
    has_value: bool = False
    error: Exception | None = None
    continuation: Resumable | None = field(default=None, repr=False)
    pending: Any = field(default=None, repr=False)

    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def set_continuation(self, frame: Resumable) -> None:
        self.continuation = frame

    def step(self) -> Resumable | None:
        if self.is_terminal():
            return None
        _enter(self)
        if self.pending is None:
            self.pending = self.body.asend(None)
        pending = self.pending
        try:
            output = drive_coroutine(pending.send, pending.throw)
        except BaseException:
            self._clear(FrameState.FAILED)
            raise

        match output:
            case Suspended(instruction=instruction):
                self.state = FrameState.SUSPENDED
                return dispatch(self, instruction)
            case Returned(value=value):
                self.pending = None
                self.value = value
                self.has_value = True
                self.state = FrameState.SUSPENDED
            case Raised(error=StopAsyncIteration()):
                self._clear(FrameState.COMPLETED)
            case Raised(error=error):
                self._clear(FrameState.FAILED)
                self.error = error
        return _release_continuation(self)

    def current(self) -> Any:
        if not self.has_value:
            raise ResultNotReadyError("async generator has not produced a value yet")
        return self.value

    def rethrow_if_failed(self) -> None:
        error, self.error = self.error, None
        if error is not None:
            raise error

    def destroy(self) -> None:
        if self.state is FrameState.DESTROYED:
            return
        if self.state is FrameState.RUNNING:
            raise ReentrantResumeError("cannot destroy a running async generator frame")
        pending = self.pending
        try:
            _close_async_body(self.body, pending)
        finally:
            self._clear(FrameState.DESTROYED)
            self.error = None
            self.continuation = None

    def _clear(self, state: FrameState) -> None:
        self.pending = None
        self.value = None
        self.has_value = False
        self.state = state


def _close_async_body(body: AsyncGenerator[Any, Any], pending: Any) -> None:
    """Unwind an async generator body synchronously.

    A body suspended inside an await is unwound through its in-flight
    ``asend`` awaitable; a body suspended at a yield is closed with
    ``aclose()``. A body that awaits again while unwinding cannot be finished
    without a driver and is reported as an error.
    """
    if pending is not None:
        try:
            instruction = pending.throw(GeneratorExit())
        except (GeneratorExit, StopAsyncIteration):
            return
        except StopIteration:
            logger.debug("async generator {!r} yielded while being destroyed", body)
        else:
            pending.close()
            raise RuntimeError(f"async generator {body!r} suspended on {instruction!r} while being destroyed")

    closer = body.aclose()
    try:
        instruction = closer.send(None)
    except StopIteration:
        return
    closer.close()
    raise RuntimeError(f"async generator {body!r} suspended on {instruction!r} while being destroyed")


__all__ = [
    "AsyncGeneratorFrame",
    "FrameState",
    "GeneratorFrame",
    "Linkable",
    "Resumable",
    "TERMINAL_STATES",
    "TaskFrame",
    "check_frame",
    "is_good",
    "is_ready",
    "same_position",
]
