"""Fire-and-forget computations.

An eager computation starts running as soon as it is created and is never
awaited by anyone. Nobody can observe its failure, so an exception escaping
its body is logged and the process is aborted.
"""

from __future__ import annotations

import inspect
import os
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from typing import Any, NoReturn, ParamSpec

from loguru import logger

from coframe.frames import TERMINAL_STATES, FrameState, Resumable
from coframe.step import Raised, Returned, Suspended, dispatch, drive_coroutine, resume_chain

logger = logger.bind(component="coframe.eager")

P = ParamSpec("P")


@dataclass(eq=False)
class EagerFrame:
    """Frame of a fire-and-forget computation. Cannot be awaited."""

    body: Coroutine[Any, Any, Any]
    state: FrameState = FrameState.CREATED

    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def step(self) -> Resumable | None:
        if self.is_terminal():
            return None
        self.state = FrameState.RUNNING
        try:
            output = drive_coroutine(self.body.send, self.body.throw)
        except BaseException:
            self.state = FrameState.FAILED
            raise

        match output:
            case Suspended(instruction=instruction):
                self.state = FrameState.SUSPENDED
                return dispatch(self, instruction)
            case Returned():
                self.state = FrameState.COMPLETED
            case Raised(error=error):
                self.state = FrameState.FAILED
                _terminate(error)
        return None

    def destroy(self) -> None:
        self.body.close()
        self.state = FrameState.DESTROYED


def _terminate(error: Exception) -> NoReturn:
    logger.opt(exception=error).critical(
        "Unhandled exception in fire-and-forget computation: {!r}", error
    )
    os.abort()


class EagerTask:
    """Handle on a running fire-and-forget computation.

    The handle does not own the computation: dropping it does not stop it.
    """

    __slots__ = ("_frame",)

    def __init__(self, body: Coroutine[Any, Any, Any]) -> None:
        if not inspect.iscoroutine(body):
            raise TypeError(f"EagerTask body must be a coroutine, got {type(body).__name__}")
        self._frame = EagerFrame(body)
        resume_chain(self._frame)

    @property
    def done(self) -> bool:
        """True once the body has run to completion."""
        return self._frame.is_terminal()

    def __repr__(self) -> str:
        return f"EagerTask({self._frame.state.value})"


def run_awaitable(function: Callable[P, Awaitable[Any]], /, *args: P.args, **kwargs: P.kwargs) -> EagerTask:
    """Start ``await function(*args, **kwargs)`` right away.

    Returns once the computation finishes or first suspends on something that
    does not resume it synchronously.
    """

    async def run() -> None:
        await function(*args, **kwargs)

    return EagerTask(run())


def eager(func: Callable[P, Coroutine[Any, Any, Any]]) -> Callable[P, EagerTask]:
    """Make calling an ``async def`` function start it as a fire-and-forget computation."""
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"@eager expects an async def function, got {func!r}")

    @wraps(func)
    def start(*args: P.args, **kwargs: P.kwargs) -> EagerTask:
        return EagerTask(func(*args, **kwargs))

    return start


__all__ = ["EagerFrame", "EagerTask", "eager", "run_awaitable"]
