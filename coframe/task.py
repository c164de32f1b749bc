"""Task: a lazily started computation producing a single result.

A task wraps an ``async def`` coroutine. Nothing runs until the task is
resumed or awaited. Awaiting a task from another coframe body transfers
control to it directly; when it finishes, control comes straight back to the
awaiting body.

Example:
    >>> @task
    ... async def value(n):
    ...     return n
    >>>
    >>> @task
    ... async def add():
    ...     return await value(123) + await value(456)
    >>>
    >>> t = add()
    >>> t.resume()
    False
    >>> t.result_value()
    579
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Coroutine, Generator
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar, overload

from coframe._handle import FrameOwner
from coframe.frames import TaskFrame, check_frame, is_good, is_ready
from coframe.instructions import Instruction, Transfer
from coframe.result import ResultDiscipline
from coframe.step import resume_chain

T = TypeVar("T")
P = ParamSpec("P")


class Task(FrameOwner[TaskFrame], Generic[T]):
    def __init__(
        self,
        body: Coroutine[Any, Any, T] | None = None,
        *,
        discipline: ResultDiscipline = ResultDiscipline.VALUE,
    ) -> None:
        if body is None:
            self._frame = None
            return
        if not inspect.iscoroutine(body):
            hint = "; call the async function to get one" if inspect.iscoroutinefunction(body) else ""
            raise TypeError(f"Task body must be a coroutine, got {type(body).__name__}{hint}")
        self._frame = TaskFrame(body, discipline)

    @property
    def discipline(self) -> ResultDiscipline | None:
        frame = self._frame
        return None if frame is None else frame.discipline

    def is_ready(self) -> bool:
        """True if the task is empty or finished."""
        return is_ready(self._frame)

    def resume(self) -> bool:
        """Run the task until it suspends or finishes.

        Returns ``True`` if the task still has work left.
        """
        frame = self._frame
        if is_good(frame):
            resume_chain(frame)
        return not self.is_ready()

    def result_value(self) -> T:
        """Return the result, re-raising the body's failure the first time."""
        return check_frame(self._frame, "task").read_result()

    def take_result(self) -> T:
        """Return the result and move it out of the task."""
        return check_frame(self._frame, "task").take_result()

    def __await__(self) -> Generator[Instruction, Any, T]:
        frame = self._frame
        if is_good(frame):
            yield Transfer(frame)
        return check_frame(frame, "task").read_result()


@overload
def task(func: Callable[P, Coroutine[Any, Any, T]], /) -> Callable[P, Task[T]]: ...


@overload
def task(
    *, discipline: ResultDiscipline = ...
) -> Callable[[Callable[P, Coroutine[Any, Any, T]]], Callable[P, Task[T]]]: ...


def task(func=None, /, *, discipline=ResultDiscipline.VALUE):
    """Turn an ``async def`` function into a factory of :class:`Task`.

    Usable bare (``@task``) or with a result discipline
    (``@task(discipline=ResultDiscipline.REFERENCE)``).
    """

    def decorate(fn: Callable[P, Coroutine[Any, Any, T]]) -> Callable[P, Task[T]]:
        if not inspect.iscoroutinefunction(fn):
            raise TypeError(f"@task expects an async def function, got {fn!r}")

        @wraps(fn)
        def factory(*args: P.args, **kwargs: P.kwargs) -> Task[T]:
            return Task(fn(*args, **kwargs), discipline=discipline)

        return factory

    if func is None:
        return decorate
    return decorate(func)


__all__ = ["Task", "task"]
