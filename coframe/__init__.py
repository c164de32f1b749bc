"""
coframe - Suspended computations driven without an event loop.

Tasks, generators and async generators built on native Python coroutines and
generators. Awaiting a task from another coframe body hands control to it
directly and control comes straight back when it finishes; no scheduler, no
executor, no event loop is involved.

Example:
    >>> from coframe import task, async_generator, SyncGeneratorAdapter
    >>>
    >>> @task
    ... async def next_value(n):
    ...     return n + 1
    >>>
    >>> @async_generator
    ... async def count(limit):
    ...     v = 0
    ...     while v < limit:
    ...         yield v
    ...         v = await next_value(v)
    >>>
    >>> list(SyncGeneratorAdapter(count(5)))
    [0, 1, 2, 3, 4]
"""

from coframe.async_generator import AdvanceOp, AsyncCursor, AsyncGenerator, async_generator
from coframe.awaitables import suspend_always, suspend_never
from coframe.config import configure, settings
from coframe.eager import EagerTask, eager, run_awaitable
from coframe.errors import (
    BadResultAccessError,
    CoframeError,
    EmptyComputationError,
    InvalidSuspensionError,
    PastEndAccessError,
    ReentrantResumeError,
    ResultNotReadyError,
    StalledBridgeError,
)
from coframe.frames import FrameState
from coframe.generator import Cursor, Generator, generator
from coframe.result import ResultDiscipline
from coframe.sync_adapter import SyncCursor, SyncGeneratorAdapter
from coframe.task import Task, task

__version__ = "0.1.0"

__all__ = [
    # Primitives
    "Task",
    "task",
    "Generator",
    "generator",
    "Cursor",
    "AsyncGenerator",
    "async_generator",
    "AsyncCursor",
    "AdvanceOp",
    # Fire-and-forget and bridging
    "EagerTask",
    "eager",
    "run_awaitable",
    "SyncGeneratorAdapter",
    "SyncCursor",
    # Suspension points
    "suspend_always",
    "suspend_never",
    # Types
    "ResultDiscipline",
    "FrameState",
    # Errors
    "CoframeError",
    "EmptyComputationError",
    "BadResultAccessError",
    "ResultNotReadyError",
    "PastEndAccessError",
    "ReentrantResumeError",
    "InvalidSuspensionError",
    "StalledBridgeError",
    # Configuration
    "configure",
    "settings",
]
