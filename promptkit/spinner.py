"""A terminal spinner, and running awaitables with one that can be aborted."""

from __future__ import annotations

import asyncio
import queue
import signal
import sys
import threading
import time
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Awaitable, TextIO, TypeVar

from promptkit.abort_signal import AbortSignal, wait_abort_signal

T = TypeVar("T")

_TICK = 0.05
_POLL = 0.025
_SEND_PAUSE = 0.01

_MOVE_TO_LINE_START = "\x1b[1G"
_CLEAR_DOWN = "\x1b[J"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"


def _is_terminal(stream: Any) -> bool:
    if stream is None:
        return False
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


class SpinnerState:
    """The frame counter and message of a spinner, drawn on a terminal stream."""

    FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

    def __init__(self, output: TextIO | None = None, enabled: bool | None = None) -> None:
        self.output = output if output is not None else sys.stdout
        self.enabled = _is_terminal(self.output) if enabled is None else enabled
        self.index = 0
        self.message = ""

    def frame(self) -> str:
        """The line shown at the current step."""
        glyph = self.FRAMES[self.index % len(self.FRAMES)]
        dots = "." * ((self.index // 5) % 4)
        return f"{glyph}{self.message}{dots:<3}"

    def _step(self) -> None:
        if not self.enabled or not self.message:
            return
        text = _MOVE_TO_LINE_START + self.frame()
        if self.index == 0:
            text += _HIDE_CURSOR
        self.output.write(text)
        self.output.flush()
        self.index += 1

    def set_message(self, message: str) -> None:
        """Replace the message; an empty one leaves the spinner blank."""
        self.clear_message()
        if message:
            self.message = f" {message}"

    def clear_message(self) -> None:
        """Remove the message and erase the spinner line."""
        if not self.message:
            return
        self.message = ""
        if self.enabled:
            self.output.write(_MOVE_TO_LINE_START + _CLEAR_DOWN + _SHOW_CURSOR)
            self.output.flush()


@dataclass(frozen=True)
class _SetMessage:
    message: str


class _Stop:
    pass


class Spinner:
    """Handle to a spinner animated on a background thread."""

    def __init__(self, message: str = "", output: TextIO | None = None) -> None:
        self.state = SpinnerState(output)
        self._events: queue.Queue[_SetMessage | _Stop] = queue.Queue()
        self._thread: threading.Thread | None = None
        self.set_message(message)

    def set_message(self, message: str) -> None:
        """Show ``message`` next to the spinner."""
        self._events.put(_SetMessage(message))
        time.sleep(_SEND_PAUSE)

    def stop(self) -> None:
        """Erase the spinner and end its thread."""
        self._events.put(_Stop())
        time.sleep(_SEND_PAUSE)
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)

    def _start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="spinner", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        next_tick = time.monotonic() + _TICK
        while True:
            timeout = max(0.0, next_tick - time.monotonic())
            try:
                event = self._events.get(timeout=timeout)
            except queue.Empty:
                with suppress(OSError, ValueError):
                    self.state._step()
                next_tick = time.monotonic() + _TICK
                continue
            try:
                if isinstance(event, _Stop):
                    self.state.clear_message()
                    return
                self.state.set_message(event.message)
            except (OSError, ValueError):
                return


def spawn_spinner(message: str) -> Spinner:
    """Start a spinner showing ``message`` on standard output."""
    spinner = Spinner(message)
    spinner._start()
    return spinner


async def abortable_run_with_spinner(
    task: Awaitable[T], message: str, abort_signal: AbortSignal
) -> T:
    """Await ``task`` while showing a spinner; raise ``RuntimeError`` when aborted.

    Without a terminal on standard output the task is simply awaited.
    """
    if not _is_terminal(sys.stdout):
        return await task

    state = SpinnerState(sys.stdout, enabled=True)
    state.set_message(message)
    interrupted = False

    def on_interrupt() -> None:
        nonlocal interrupted
        interrupted = True
        abort_signal.set_ctrlc()

    loop = asyncio.get_running_loop()
    handler_installed = False
    with suppress(NotImplementedError, RuntimeError, ValueError):
        loop.add_signal_handler(signal.SIGINT, on_interrupt)
        handler_installed = True

    task_future = asyncio.ensure_future(task)
    abort_future = asyncio.ensure_future(wait_abort_signal(abort_signal))
    try:
        while True:
            done, _ = await asyncio.wait(
                {task_future, abort_future}, timeout=_POLL, return_when=asyncio.FIRST_COMPLETED
            )
            if task_future in done:
                return task_future.result()
            if abort_future in done:
                task_future.cancel()
                raise RuntimeError("Aborted!" if interrupted else "Aborted.")
            with suppress(OSError, ValueError):
                state._step()
    finally:
        abort_future.cancel()
        if not task_future.done():
            task_future.cancel()
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
        with suppress(OSError, ValueError):
            state.clear_message()