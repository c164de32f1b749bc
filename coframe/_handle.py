"""Single-owner handles for frames.

Every frame is owned by exactly one handle. Ownership can be moved to a new
handle (``move()``) or into an existing one (``move_from()``) but never
shared: copying a handle raises ``TypeError``. Dropping the last reference to
a handle destroys its frame.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from coframe.frames import FrameState, Resumable

F = TypeVar("F", bound=Resumable)
O = TypeVar("O", bound="FrameOwner[Any]")


class FrameOwner(Generic[F]):
    _frame: F | None = None

    @classmethod
    def _adopt(cls: type[O], frame: Any) -> O:
        owner = cls.__new__(cls)
        owner._frame = frame
        return owner

    def move(self: O) -> O:
        """Return a new handle owning this frame; this handle becomes empty."""
        frame, self._frame = self._frame, None
        return type(self)._adopt(frame)

    def move_from(self: O, other: O) -> O:
        """Destroy the current frame and take over the frame of ``other``."""
        if other is self:
            return self
        if not isinstance(other, type(self)):
            raise TypeError(f"cannot move a {type(other).__name__} into a {type(self).__name__}")
        self.destroy()
        self._frame, other._frame = other._frame, None
        return self

    def destroy(self) -> bool:
        """Destroy the owned frame. Returns whether there was one."""
        frame = self._frame
        if frame is None:
            return False
        frame.destroy()
        self._frame = None
        return True

    def __del__(self) -> None:
        frame = self._frame
        if frame is not None and frame.state is not FrameState.RUNNING:
            self.destroy()

    def __copy__(self) -> Any:
        raise TypeError(f"{type(self).__name__} cannot be copied; use move()")

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        raise TypeError(f"{type(self).__name__} cannot be copied; use move()")

    def __repr__(self) -> str:
        frame = self._frame
        state = "empty" if frame is None else frame.state.value
        return f"{type(self).__name__}({state})"


__all__ = ["FrameOwner"]
