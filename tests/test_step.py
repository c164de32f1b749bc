"""
Tests for the frame driver: body stepping, instruction dispatch and the
resume_chain trampoline, plus debug tracing through loguru.
"""

import types

import pytest

from computations import value
from coframe import InvalidSuspensionError, configure, settings, suspend_always
from coframe.config import CoframeSettings
from coframe.frames import FrameState, GeneratorFrame, Linkable, Resumable, TaskFrame
from coframe.instructions import SUSPEND, Suspend, Transfer
from coframe.step import (
    Raised,
    Returned,
    Suspended,
    Yielded,
    dispatch,
    drive_coroutine,
    drive_generator,
    resume_chain,
)


async def finished(v):
    return v


async def parked():
    await suspend_always()
    return "after"


# ============================================================================
# Body Drivers
# ============================================================================


def test_drive_coroutine_classifies_outcomes():
    body = finished(5)
    assert drive_coroutine(body.send, body.throw) == Returned(5)

    body = parked()
    assert drive_coroutine(body.send, body.throw) == Suspended(SUSPEND)
    assert drive_coroutine(body.send, body.throw) == Returned("after")


def test_drive_coroutine_captures_exceptions():
    async def failing():
        raise RuntimeError("inside")

    body = failing()
    outcome = drive_coroutine(body.send, body.throw)
    assert isinstance(outcome, Raised)
    assert str(outcome.error) == "inside"


def test_drive_coroutine_throws_back_foreign_suspensions():
    @types.coroutine
    def foreign():
        try:
            yield "foreign"
        except InvalidSuspensionError as error:
            return f"rejected {error.instruction}"

    async def body_fn():
        return await foreign()

    body = body_fn()
    assert drive_coroutine(body.send, body.throw) == Returned("rejected foreign")


def test_drive_generator_classifies_outcomes():
    def body_fn():
        yield 1
        return "end"

    body = body_fn()
    assert drive_generator(body) == Yielded(1)
    assert drive_generator(body) == Returned("end")


# ============================================================================
# Dispatch
# ============================================================================


def test_suspend_returns_control_to_resumer():
    frame = TaskFrame(finished(1))
    assert dispatch(frame, Suspend()) is None
    frame.destroy()


def test_transfer_links_continuation():
    awaiting = TaskFrame(finished(1))
    target = TaskFrame(finished(2))

    assert dispatch(awaiting, Transfer(target)) is target
    assert target.continuation is awaiting

    awaiting.destroy()
    target.destroy()


def test_transfer_to_terminal_target_resumes_awaiter():
    awaiting = TaskFrame(finished(1))
    target = TaskFrame(finished(2))
    target.step()
    assert target.state is FrameState.COMPLETED

    assert dispatch(awaiting, Transfer(target)) is awaiting
    assert target.continuation is None
    awaiting.destroy()


def test_unknown_instruction_is_rejected():
    frame = TaskFrame(finished(1))
    with pytest.raises(InvalidSuspensionError):
        dispatch(frame, "jump")
    frame.destroy()


def test_continuation_released_on_completion():
    awaiting = TaskFrame(finished(1))
    target = TaskFrame(finished(2))
    target.set_continuation(awaiting)

    assert target.step() is awaiting
    assert target.continuation is None
    awaiting.destroy()


def test_resume_chain_runs_until_control_returns():
    t = value(3)
    resume_chain(t._frame)
    assert t.result_value() == 3


def test_frame_protocols():
    task_frame = TaskFrame(finished(1))
    generator_frame = GeneratorFrame(x for x in ())

    assert isinstance(task_frame, Linkable)
    assert isinstance(generator_frame, Resumable)
    assert not isinstance(generator_frame, Linkable)

    task_frame.destroy()
    generator_frame.destroy()


# ============================================================================
# Debug Tracing
# ============================================================================


def test_transfers_are_traced_when_debug_enabled(debug_tracing, log_records):
    inner = value(1)

    async def outer_fn():
        await inner

    t = TaskFrame(outer_fn())
    resume_chain(t)

    messages = [record["message"] for record in log_records if record["extra"].get("component") == "coframe.step"]
    assert any(message.startswith("transfer") for message in messages)
    assert any(message.startswith("resume") for message in messages)


def test_nothing_traced_when_debug_disabled(log_records):
    previous = settings.debug
    configure(debug=False)
    try:
        t = value(1)
        t.resume()
    finally:
        configure(debug=previous)

    assert [r for r in log_records if r["extra"].get("component") == "coframe.step"] == []


def test_debug_flag_read_from_environment(monkeypatch):
    monkeypatch.setenv("COFRAME_DEBUG", "yes")
    assert CoframeSettings().debug is True
    monkeypatch.setenv("COFRAME_DEBUG", "0")
    assert CoframeSettings().debug is False
    monkeypatch.delenv("COFRAME_DEBUG")
    assert CoframeSettings().debug is False


def test_configure_returns_settings():
    previous = settings.debug
    try:
        assert configure(debug=True) is settings
        assert settings.debug is True
        assert configure() is settings
        assert settings.debug is True
    finally:
        configure(debug=previous)
