"""A shared flag telling running work that the user asked it to stop."""

from __future__ import annotations

import asyncio
import threading

_POLL_INTERVAL = 0.025


class AbortSignal:
    """Thread-safe record of a Ctrl-C or Ctrl-D request."""

    def __init__(self) -> None:
        self._ctrlc = threading.Event()
        self._ctrld = threading.Event()

    def aborted(self) -> bool:
        """Whether either kind of abort was requested."""
        return self.aborted_ctrlc() or self.aborted_ctrld()

    def aborted_ctrlc(self) -> bool:
        return self._ctrlc.is_set()

    def aborted_ctrld(self) -> bool:
        return self._ctrld.is_set()

    def reset(self) -> None:
        """Clear both flags."""
        self._ctrlc.clear()
        self._ctrld.clear()

    def set_ctrlc(self) -> None:
        self._ctrlc.set()

    def set_ctrld(self) -> None:
        self._ctrld.set()


def create_abort_signal() -> AbortSignal:
    """A fresh, unset abort signal."""
    return AbortSignal()


async def wait_abort_signal(abort_signal: AbortSignal) -> None:
    """Return once ``abort_signal`` has been set."""
    while not abort_signal.aborted():
        await asyncio.sleep(_POLL_INTERVAL)