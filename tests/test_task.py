"""
Tests for Task: lazy start, continuation hand-off, failure replay,
ownership and result disciplines.
"""

import copy
import types

import pytest

from computations import pause_then, value
from coframe import (
    EmptyComputationError,
    InvalidSuspensionError,
    ReentrantResumeError,
    ResultDiscipline,
    ResultNotReadyError,
    Task,
    suspend_always,
    suspend_never,
    task,
)


# ============================================================================
# Basic Completion
# ============================================================================


def test_awaited_values_are_summed():
    @task
    async def add():
        return await value(123) + await value(456)

    t = add()
    assert not t.is_ready()
    assert t.resume() is False
    assert t.is_ready()
    assert t.result_value() == 579


def test_nothing_runs_at_construction():
    calls = []

    @task
    async def body():
        calls.append("ran")
        return 1

    t = body()
    assert calls == []
    t.resume()
    assert calls == ["ran"]


def test_never_resumed_task_is_not_ready():
    t = value(1)
    assert not t.is_ready()
    with pytest.raises(ResultNotReadyError):
        t.result_value()


def test_completed_task_can_be_awaited_repeatedly():
    inner = value(7)
    inner.resume()

    @task
    async def outer():
        return [await inner, await inner]

    t = outer()
    t.resume()
    assert t.result_value() == [7, 7]
    assert inner.result_value() == 7


def test_resume_on_ready_task_is_noop():
    t = value(3)
    t.resume()
    assert t.resume() is False
    assert t.result_value() == 3


# ============================================================================
# Failure Replay
# ============================================================================


@task
async def boom():
    raise ValueError("boom")


def test_failure_is_replayed_once():
    t = boom()
    t.resume()
    assert t.is_ready()
    with pytest.raises(ValueError, match="boom"):
        t.result_value()
    with pytest.raises(ResultNotReadyError):
        t.result_value()
    assert t.is_ready()


def test_failure_propagates_to_awaiter():
    @task
    async def outer():
        try:
            await boom()
        except ValueError as error:
            return f"caught {error}"
        return "not caught"

    t = outer()
    t.resume()
    assert t.result_value() == "caught boom"


def test_base_exception_propagates_to_resumer():
    class Stop(BaseException):
        pass

    @task
    async def interrupted():
        raise Stop()

    t = interrupted()
    with pytest.raises(Stop):
        t.resume()
    assert t.is_ready()
    with pytest.raises(ResultNotReadyError):
        t.result_value()


def test_awaiting_foreign_awaitable_raises_invalid_suspension():
    @types.coroutine
    def foreign():
        yield "not a coframe instruction"

    @task
    async def body():
        await foreign()

    t = body()
    t.resume()
    with pytest.raises(InvalidSuspensionError) as excinfo:
        t.result_value()
    assert isinstance(excinfo.value, TypeError)
    assert excinfo.value.instruction == "not a coframe instruction"


def test_invalid_suspension_can_be_handled_in_body():
    @types.coroutine
    def foreign():
        yield object()

    @task
    async def body():
        try:
            await foreign()
        except InvalidSuspensionError:
            return "recovered"
        return "unexpected"

    t = body()
    t.resume()
    assert t.result_value() == "recovered"


def test_resuming_running_task_from_inside_raises():
    holder = {}

    @task
    async def selfish():
        holder["task"].resume()

    t = selfish()
    holder["task"] = t
    t.resume()
    with pytest.raises(ReentrantResumeError):
        t.result_value()


def test_destroying_running_task_from_inside_raises():
    holder = {}

    @task
    async def selfish():
        holder["task"].destroy()

    t = selfish()
    holder["task"] = t
    t.resume()
    with pytest.raises(ReentrantResumeError):
        t.result_value()


# ============================================================================
# Suspension Points
# ============================================================================


def test_task_resumed_step_by_step():
    @task
    async def steps():
        await suspend_always()
        await suspend_never()
        await suspend_always()
        return "done"

    t = steps()
    assert t.resume() is True
    assert t.resume() is True
    assert t.resume() is False
    assert t.result_value() == "done"


def test_resuming_inner_task_continues_awaiter():
    inner = pause_then(10)

    @task
    async def outer():
        return await inner + 1

    t = outer()
    assert t.resume() is True
    assert not inner.is_ready()

    assert inner.resume() is False
    assert t.is_ready()
    assert t.result_value() == 11


def test_deep_await_chain_does_not_recurse():
    @task
    async def nested(depth):
        if depth == 0:
            return 0
        return await nested(depth - 1) + 1

    t = nested(10_000)
    t.resume()
    assert t.result_value() == 10_000


def test_long_await_loop_does_not_recurse():
    @task
    async def loop(n):
        total = 0
        for _ in range(n):
            total += await value(1)
        return total

    t = loop(100_000)
    t.resume()
    assert t.result_value() == 100_000


# ============================================================================
# Ownership
# ============================================================================


def test_empty_task():
    t = Task()
    assert t.is_ready()
    assert t.resume() is False
    assert t.discipline is None
    with pytest.raises(EmptyComputationError):
        t.result_value()


def test_awaiting_empty_task_raises_in_awaiter():
    @task
    async def outer():
        return await Task()

    t = outer()
    t.resume()
    with pytest.raises(EmptyComputationError):
        t.result_value()


def test_move_leaves_source_empty():
    source = value(5)
    moved = source.move()

    assert source.is_ready()
    with pytest.raises(EmptyComputationError):
        source.result_value()
    moved.resume()
    assert moved.result_value() == 5


def test_move_from_replaces_frame():
    target = value(1)
    source = value(2)

    assert target.move_from(source) is target
    assert source.is_ready()
    target.resume()
    assert target.result_value() == 2


def test_move_from_self_is_noop():
    t = value(4)
    t.move_from(t)
    t.resume()
    assert t.result_value() == 4


def test_move_from_destroys_previous_frame():
    log = []

    @task
    async def guarded():
        try:
            await suspend_always()
        finally:
            log.append("cleanup")

    target = guarded()
    target.resume()
    target.move_from(value(9))
    assert log == ["cleanup"]


def test_double_destroy_is_noop():
    t = value(1)
    assert t.destroy() is True
    assert t.destroy() is False
    assert t.is_ready()


def test_destroy_runs_finally_of_suspended_task():
    log = []

    @task
    async def body():
        try:
            await suspend_always()
            log.append("resumed")
        finally:
            log.append("cleanup")

    t = body()
    assert t.resume() is True
    assert log == []
    t.destroy()
    assert log == ["cleanup"]


def test_task_cannot_be_copied():
    t = value(1)
    with pytest.raises(TypeError):
        copy.copy(t)
    with pytest.raises(TypeError):
        copy.deepcopy(t)


def test_body_must_be_a_coroutine():
    async def raw():
        return 1

    with pytest.raises(TypeError, match="call the async function"):
        Task(raw)
    with pytest.raises(TypeError):
        Task(42)


def test_task_decorator_rejects_plain_function():
    with pytest.raises(TypeError):

        @task
        def plain():
            return 1


# ============================================================================
# Result Disciplines
# ============================================================================


def test_value_discipline_take_moves_result_out():
    t = value([1, 2])
    t.resume()
    assert t.discipline is ResultDiscipline.VALUE
    assert t.result_value() == [1, 2]
    assert t.take_result() == [1, 2]
    with pytest.raises(ResultNotReadyError):
        t.result_value()


def test_reference_discipline_returns_same_object():
    shared = []

    @task(discipline=ResultDiscipline.REFERENCE)
    async def borrowed():
        return shared

    t = borrowed()
    t.resume()
    assert t.discipline is ResultDiscipline.REFERENCE
    assert t.result_value() is shared
    assert t.take_result() is shared
    assert t.result_value() is shared


def test_transient_discipline_hands_result_over_once():
    @task(discipline=ResultDiscipline.TRANSIENT)
    async def once():
        return "payload"

    inner = once()

    @task
    async def consumer():
        return await inner

    t = consumer()
    t.resume()
    assert t.result_value() == "payload"
    with pytest.raises(ResultNotReadyError):
        inner.result_value()
