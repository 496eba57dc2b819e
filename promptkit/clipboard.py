"""Copy text to the clipboard through the terminal's OSC 52 escape sequence."""

from __future__ import annotations

import sys

from promptkit.crypto import base64_encode


def set_text(text: str) -> None:
    """Put ``text`` on the clipboard; raises ``RuntimeError`` when that fails.

    Works in many modern terminals, including over SSH.
    """
    sequence = f"\x1b]52;c;{base64_encode(text)}\x07"
    stream = sys.stdout
    if stream is None:
        raise RuntimeError("Failed to copy") from RuntimeError("No output stream for OSC52 sequence")
    try:
        stream.write(sequence)
    except (OSError, ValueError) as exc:
        raise RuntimeError("Failed to copy") from RuntimeError(f"Failed to send OSC52 sequence: {exc}")
    try:
        stream.flush()
    except (OSError, ValueError) as exc:
        raise RuntimeError("Failed to copy") from RuntimeError(f"Failed to flush OSC52 sequence: {exc}")