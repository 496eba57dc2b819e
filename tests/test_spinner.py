import asyncio
import io
import sys

import pytest

from promptkit.abort_signal import create_abort_signal
from promptkit.spinner import SpinnerState, abortable_run_with_spinner, spawn_spinner


class _FakeTerminal(io.StringIO):
    def isatty(self):
        return True


def test_frame_starts_with_first_glyph_and_message():
    state = SpinnerState(io.StringIO(), enabled=False)
    state.set_message("Loading")
    line = state.frame()
    assert line.startswith(SpinnerState.FRAMES[0] + " Loading")
    assert line == "⠋ Loading   "


def test_frame_width_is_constant_across_steps():
    state = SpinnerState(io.StringIO(), enabled=False)
    state.set_message("Work")
    widths = set()
    for index in range(40):
        state.index = index
        line = state.frame()
        assert line[0] in SpinnerState.FRAMES
        widths.add(len(line))
    assert widths == {1 + len(" Work") + 3}


def test_frame_glyph_cycles():
    state = SpinnerState(io.StringIO(), enabled=False)
    state.set_message("x")
    state.index = len(SpinnerState.FRAMES)
    assert state.frame()[0] == SpinnerState.FRAMES[0]


def test_set_message_prefixes_space_and_empty_clears():
    state = SpinnerState(io.StringIO(), enabled=False)
    state.set_message("Working")
    assert state.message == " Working"
    state.set_message("")
    assert state.message == ""


def test_clear_message_writes_only_when_enabled():
    shown = io.StringIO()
    state = SpinnerState(shown, enabled=True)
    state.set_message("Hi")
    state.clear_message()
    assert state.message == ""
    assert shown.getvalue().endswith("\x1b[?25h")

    hidden = io.StringIO()
    quiet = SpinnerState(hidden, enabled=False)
    quiet.set_message("Hi")
    quiet.clear_message()
    assert hidden.getvalue() == ""


def test_disabled_by_default_for_non_terminal():
    state = SpinnerState(io.StringIO())
    assert state.enabled is False
    assert SpinnerState(_FakeTerminal()).enabled is True


def test_spawn_spinner_stop_ends_thread():
    spinner = spawn_spinner("Loading")
    spinner.set_message("Working")
    spinner.stop()
    assert spinner._thread is not None
    assert not spinner._thread.is_alive()
    assert spinner.state.message == ""


@pytest.mark.asyncio
async def test_abortable_run_without_terminal_returns_value():
    async def work():
        return 42

    result = await abortable_run_with_spinner(work(), "Loading", create_abort_signal())
    assert result == 42


@pytest.mark.asyncio
async def test_abortable_run_propagates_task_error():
    async def work():
        raise KeyError("bad")

    with pytest.raises(KeyError):
        await abortable_run_with_spinner(work(), "Loading", create_abort_signal())


@pytest.mark.asyncio
async def test_abortable_run_on_terminal_draws_spinner(monkeypatch):
    terminal = _FakeTerminal()
    monkeypatch.setattr(sys, "stdout", terminal)

    async def work():
        await asyncio.sleep(0.15)
        return "done"

    result = await abortable_run_with_spinner(work(), "Loading", create_abort_signal())
    assert result == "done"
    output = terminal.getvalue()
    assert " Loading" in output
    assert output.endswith("\x1b[?25h")


@pytest.mark.asyncio
async def test_abortable_run_aborts_when_signal_set(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _FakeTerminal())
    abort_signal = create_abort_signal()
    abort_signal.set_ctrld()
    finished = []

    async def work():
        await asyncio.sleep(5)
        finished.append(True)

    with pytest.raises(RuntimeError, match="Aborted"):
        await abortable_run_with_spinner(work(), "Loading", abort_signal)
    assert finished == []