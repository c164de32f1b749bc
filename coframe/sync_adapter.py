"""Iterate an AsyncGenerator from plain synchronous code.

Each advance runs the generator's :class:`~coframe.AdvanceOp` to completion
through :func:`~coframe.run_awaitable`. This works as long as everything the
producer awaits finishes synchronously, which holds for coframe tasks and
async generators; a producer that parks on ``suspend_always()`` cannot be
finished this way and raises :class:`StalledBridgeError`.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from coframe.async_generator import AdvanceOp, AsyncCursor, AsyncGenerator
from coframe.eager import run_awaitable
from coframe.errors import PastEndAccessError, StalledBridgeError

T = TypeVar("T")


class SyncCursor(Generic[T]):
    """Synchronous position in an adapted async generator."""

    def __init__(self, op: AdvanceOp[T] | None = None) -> None:
        self._op = op
        self._cursor: AsyncCursor[T] = AsyncCursor()
        if op is not None:
            self._settle()

    def _settle(self) -> SyncCursor[T]:
        op = self._op
        failure: Exception | None = None

        async def settle() -> None:
            nonlocal failure
            try:
                self._cursor = await op
            except Exception as error:
                failure = error

        runner = run_awaitable(settle)
        if failure is not None:
            raise failure
        if not runner.done:
            raise StalledBridgeError("async generator suspended without finishing the advance")
        return self

    @property
    def at_end(self) -> bool:
        return self._cursor.at_end

    @property
    def value(self) -> T:
        return self._cursor.value

    def advance(self) -> SyncCursor[T]:
        if self._cursor.at_end:
            raise PastEndAccessError("incrementing past the end of the async generator")
        return self._settle()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SyncCursor):
            return NotImplemented
        return self._cursor == other._cursor

    __hash__ = None  # type: ignore[assignment]


class SyncGeneratorAdapter(Generic[T]):
    """Owns an :class:`AsyncGenerator` and exposes it as a synchronous sequence.

    The generator passed in is moved from and left empty.
    """

    def __init__(self, generator: AsyncGenerator[T]) -> None:
        self._generator = generator.move()

    def begin(self) -> SyncCursor[T]:
        return SyncCursor(self._generator.begin())

    def end(self) -> SyncCursor[T]:
        return SyncCursor()

    def destroy(self) -> bool:
        return self._generator.destroy()

    def __iter__(self) -> Iterator[T]:
        cursor = self.begin()
        end = self.end()
        while cursor != end:
            yield cursor.value
            cursor.advance()


__all__ = ["SyncCursor", "SyncGeneratorAdapter"]
