"""Generator: a lazy synchronous sequence.

The body is a plain generator function. Values are produced one at a time,
on demand, by advancing a :class:`Cursor`; an infinite body is fine as long
as the consumer stops.

Example:
    >>> @generator
    ... def fibonacci():
    ...     a, b = 0, 1
    ...     while True:
    ...         yield a
    ...         a, b = b, a + b
    >>>
    >>> gen = fibonacci()
    >>> it = gen.begin()
    >>> [it.value, it.advance().value, it.advance().value]
    [0, 1, 1]
"""

from __future__ import annotations

import collections.abc
import inspect
from collections.abc import Callable, Iterator
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar

from coframe._handle import FrameOwner
from coframe.errors import PastEndAccessError
from coframe.frames import GeneratorFrame, is_good, same_position

T = TypeVar("T")
P = ParamSpec("P")


class Cursor(Generic[T]):
    """Position in a :class:`Generator`. Does not own the frame."""

    __slots__ = ("_frame",)

    def __init__(self, frame: GeneratorFrame | None = None) -> None:
        self._frame = frame

    @property
    def at_end(self) -> bool:
        return not is_good(self._frame)

    @property
    def value(self) -> T:
        frame = self._frame
        if not is_good(frame):
            raise PastEndAccessError("access past the end of the generator")
        return frame.current()

    def advance(self) -> Cursor[T]:
        frame = self._frame
        if not is_good(frame):
            raise PastEndAccessError("incrementing past the end of the generator")
        frame.advance()
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return same_position(self._frame, other._frame)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "Cursor(end)" if self.at_end else f"Cursor({self._frame.value!r})"


class Generator(FrameOwner[GeneratorFrame], Generic[T]):
    def __init__(self, body: collections.abc.Generator[T, Any, Any] | None = None) -> None:
        if body is None:
            self._frame = None
            return
        self._frame = GeneratorFrame(_check_body(body))

    def begin(self) -> Cursor[T]:
        """Advance to the next value and return a cursor at it.

        Never rewinds: on a sequence that has already started this produces
        the following value.
        """
        frame = self._frame
        if is_good(frame):
            frame.advance()
        return Cursor(frame)

    def end(self) -> Cursor[T]:
        return Cursor()

    def __iter__(self) -> Iterator[T]:
        cursor = self.begin()
        end = self.end()
        while cursor != end:
            yield cursor.value
            cursor.advance()


def _check_body(body: Any) -> collections.abc.Generator[Any, Any, Any]:
    if inspect.iscoroutine(body) or inspect.isasyncgen(body):
        kind = type(body).__name__
        if inspect.iscoroutine(body):
            body.close()
        raise TypeError(f"Generator body cannot await (got {kind}); use AsyncGenerator instead")
    if not inspect.isgenerator(body):
        raise TypeError(f"Generator body must be a generator, got {type(body).__name__}")
    return body


def generator(func: Callable[P, collections.abc.Generator[T, Any, Any]]) -> Callable[P, Generator[T]]:
    """Turn a generator function into a factory of :class:`Generator`."""
    if not inspect.isgeneratorfunction(func):
        raise TypeError(f"@generator expects a generator function, got {func!r}")

    @wraps(func)
    def factory(*args: P.args, **kwargs: P.kwargs) -> Generator[T]:
        return Generator(func(*args, **kwargs))

    return factory


__all__ = ["Cursor", "Generator", "generator"]
