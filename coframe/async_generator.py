"""AsyncGenerator: a lazy sequence whose production steps may await.

The body is an ``async def`` function containing ``yield``. Between two
yields it can await tasks and other coframe awaitables. Consumers live in
coframe bodies and obtain each position by awaiting an :class:`AdvanceOp`:

    >>> @async_generator
    ... async def counter(limit):
    ...     for i in range(limit):
    ...         yield await value(i)
    >>>
    >>> @task
    ... async def consume():
    ...     gen = counter(3)
    ...     it = await gen.begin()
    ...     while it != gen.end():
    ...         print(it.value)
    ...         await it.advance()

``begin()`` is itself awaitable: the first value may take suspensions to
produce, so obtaining the first position is a suspension point too.
"""

from __future__ import annotations

import collections.abc
import inspect
from collections.abc import AsyncIterator, Callable, Generator
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar

from coframe._handle import FrameOwner
from coframe.errors import PastEndAccessError
from coframe.frames import AsyncGeneratorFrame, is_good, same_position
from coframe.instructions import Instruction, Transfer

T = TypeVar("T")
P = ParamSpec("P")


class AsyncCursor(Generic[T]):
    """Position in an :class:`AsyncGenerator`. Does not own the frame."""

    __slots__ = ("_frame",)

    def __init__(self, frame: AsyncGeneratorFrame | None = None) -> None:
        self._frame = frame

    @property
    def at_end(self) -> bool:
        return not is_good(self._frame)

    @property
    def value(self) -> T:
        frame = self._frame
        if not is_good(frame):
            raise PastEndAccessError("access past the end of the async generator")
        return frame.current()

    def advance(self) -> AdvanceOp[T]:
        frame = self._frame
        if not is_good(frame):
            raise PastEndAccessError("incrementing past the end of the async generator")
        return AdvanceOp(frame)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AsyncCursor):
            return NotImplemented
        return same_position(self._frame, other._frame)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "AsyncCursor(end)" if self.at_end else f"AsyncCursor({self._frame.value!r})"


class AdvanceOp(Generic[T]):
    """Awaitable that produces the next value of an async generator.

    Awaiting it makes the awaiting frame the producer's consumer and transfers
    control to the producer. It resolves to a cursor at the new value, or to
    the end cursor once the producer has finished. A failure of the producer
    is re-raised in the awaiting body. The same operation can be awaited again
    to advance once more.
    """

    __slots__ = ("_frame",)

    def __init__(self, frame: AsyncGeneratorFrame | None) -> None:
        self._frame = frame

    def __await__(self) -> Generator[Instruction, Any, AsyncCursor[T]]:
        frame = self._frame
        if frame is None:
            return AsyncCursor()
        if not frame.is_terminal():
            yield Transfer(frame)
        if not frame.has_value:
            frame.rethrow_if_failed()
            return AsyncCursor()
        return AsyncCursor(frame)


class AsyncGenerator(FrameOwner[AsyncGeneratorFrame], Generic[T]):
    def __init__(self, body: collections.abc.AsyncGenerator[T, Any] | None = None) -> None:
        if body is None:
            self._frame = None
            return
        if not inspect.isasyncgen(body):
            raise TypeError(
                f"AsyncGenerator body must be an async generator, got {type(body).__name__}"
            )
        self._frame = AsyncGeneratorFrame(body)

    def begin(self) -> AdvanceOp[T]:
        frame = self._frame
        return AdvanceOp(frame if is_good(frame) else None)

    def end(self) -> AsyncCursor[T]:
        return AsyncCursor()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        cursor = await self.begin()
        end = self.end()
        while cursor != end:
            yield cursor.value
            await cursor.advance()


def async_generator(
    func: Callable[P, collections.abc.AsyncGenerator[T, Any]],
) -> Callable[P, AsyncGenerator[T]]:
    """Turn an async generator function into a factory of :class:`AsyncGenerator`."""
    if not inspect.isasyncgenfunction(func):
        raise TypeError(f"@async_generator expects an async generator function, got {func!r}")

    @wraps(func)
    def factory(*args: P.args, **kwargs: P.kwargs) -> AsyncGenerator[T]:
        return AsyncGenerator(func(*args, **kwargs))

    return factory


__all__ = ["AdvanceOp", "AsyncCursor", "AsyncGenerator", "async_generator"]
