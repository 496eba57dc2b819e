"""General helpers: time, environment names, text shaping, colours, temp files."""

from __future__ import annotations

import math
import os
import re
import sys
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")

_APP_NAME = "promptkit"

_CODE_BLOCK_RE = re.compile(r"```\w*(.*)```", re.MULTILINE | re.DOTALL)
_THINK_TAG_RE = re.compile(r"^\s*<think>.*?</think>(\s*|$)", re.DOTALL)

# Scripts whose characters are each a word of their own (ideographs, hiragana).
_SPLIT_CHARS = "\u3040-\u309f\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002fa1f"
_WORD_CHAR = rf"(?:(?![{_SPLIT_CHARS}])\w)"
_WORD_RE = re.compile(rf"[{_SPLIT_CHARS}]|{_WORD_CHAR}+(?:['\u2019.:,]{_WORD_CHAR}+)*")

_COLORS = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "purple": 35,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}
_RESET = "\x1b[0m"

_SCORE_MATCH = 16
_BONUS_BOUNDARY = 8
_BONUS_CAMEL = 7
_BONUS_CONSECUTIVE = 12
_PENALTY_GAP = 3


def now() -> str:
    """Current local time as RFC 3339 with second precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def now_timestamp() -> int:
    """Current Unix timestamp in seconds."""
    return int(datetime.now().timestamp())


def get_env_name(key: str) -> str:
    """Name of the application-scoped environment variable for ``key``."""
    return _ascii_upper(f"{_APP_NAME}_{key}")


def normalize_env_name(value: str) -> str:
    """Turn ``value`` into an environment-variable style name."""
    return _ascii_upper(value.replace("-", "_"))


def _ascii_upper(value: str) -> str:
    return "".join(ch.upper() if ch.isascii() else ch for ch in value)


def parse_bool(value: str) -> bool | None:
    """Parse ``1``/``true``/``0``/``false``; anything else gives ``None``."""
    if value in ("1", "true"):
        return True
    if value in ("0", "false"):
        return False
    return None


def _unicode_words(text: str) -> Iterable[str]:
    return (m.group() for m in _WORD_RE.finditer(text) if any(c.isalnum() for c in m.group()))


def estimate_token_length(text: str) -> int:
    """Rough estimate of how many LLM tokens ``text`` takes."""
    tenths = 0
    for word in _unicode_words(text):
        if word.isascii():
            tenths += 13
        elif len(word) == 1:
            tenths += 10
        else:
            tenths += len(word) * 5
    return math.ceil(tenths / 10)


def strip_think_tag(text: str) -> str:
    """Remove a leading ``<think>...</think>`` section."""
    return _THINK_TAG_RE.sub("", text)


def extract_code_block(text: str) -> str:
    """Return the body of the fenced code block in ``text``, or ``text`` itself."""
    match = _CODE_BLOCK_RE.search(text)
    if match is None:
        return text
    return match.group(1).strip()


def convert_option_string(value: str) -> str | None:
    """Map an empty string to ``None``."""
    return value or None


def _char_bonus(choice: str, index: int) -> int:
    if index == 0:
        return _BONUS_BOUNDARY
    prev, cur = choice[index - 1], choice[index]
    if not prev.isalnum():
        return _BONUS_BOUNDARY
    if prev.islower() and cur.isupper():
        return _BONUS_CAMEL
    return 0


def _fuzzy_score(choice: str, pattern: str) -> int | None:
    if not pattern:
        return 0
    case_sensitive = any(c.isupper() for c in pattern)
    hay = choice if case_sensitive else choice.lower()
    pat = pattern if case_sensitive else pattern.lower()
    previous: dict[int, int] | None = None
    for pc in pat:
        current: dict[int, int] = {}
        for j, hc in enumerate(hay):
            if hc != pc:
                continue
            gain = _SCORE_MATCH + _char_bonus(choice, j)
            if previous is None:
                current[j] = gain
                continue
            candidates = [
                score + (_BONUS_CONSECUTIVE if k == j - 1 else -_PENALTY_GAP * (j - k - 1))
                for k, score in previous.items()
                if k < j
            ]
            if candidates:
                current[j] = max(candidates) + gain
        if not current:
            return None
        previous = current
    assert previous is not None
    return max(previous.values())


def fuzzy_filter(values: Iterable[T], get: Callable[[T], str], pattern: str) -> list[T]:
    """Keep the values whose key fuzzily matches ``pattern``, best match first."""
    scored = [(value, score) for value in values if (score := _fuzzy_score(get(value), pattern)) is not None]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [value for value, _ in scored]


def _error_causes(err: BaseException) -> list[BaseException]:
    causes = []
    seen = {id(err)}
    current: BaseException | None = err
    while current is not None:
        nxt = current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            break
        seen.add(id(nxt))
        causes.append(nxt)
        current = nxt
    return causes


def pretty_error(err: BaseException) -> str:
    """Format an exception and the chain of its causes."""
    output = [f"Error: {err}"]
    causes = _error_causes(err)
    if causes:
        output.append("\nCaused by:")
        if len(causes) == 1:
            output.append(f"    {indent_text(causes[0], 4).strip()}")
        else:
            output.extend(f"{i:5}: {indent_text(cause, 7).strip()}" for i, cause in enumerate(causes))
    return "\n".join(output)


def indent_text(s: Any, size: int) -> str:
    """Indent every line of ``str(s)`` by ``size`` spaces."""
    indent = " " * size
    return "\n".join(f"{indent}{line}" for line in str(s).split("\n"))


def _is_stdout_terminal() -> bool:
    stream = sys.stdout
    if stream is None:
        return False
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def _no_color() -> bool:
    value = os.environ.get("NO_COLOR")
    if value is not None and parse_bool(value):
        return True
    return not _is_stdout_terminal()


def error_text(text: str) -> str:
    """Paint ``text`` red when colours are enabled."""
    return color_text(text, "red")


def warning_text(text: str) -> str:
    """Paint ``text`` yellow when colours are enabled."""
    return color_text(text, "yellow")


def color_text(text: str, color: str) -> str:
    """Paint ``text`` in the named foreground colour when colours are enabled."""
    try:
        code = _COLORS[color.lower()]
    except KeyError:
        raise ValueError(f"Unknown color '{color}'") from None
    if _no_color():
        return text
    return f"\x1b[{code}m{text}{_RESET}"


def dimmed_text(text: str) -> str:
    """Render ``text`` dimmed when colours are enabled."""
    if _no_color():
        return text
    return f"\x1b[2m{text}{_RESET}"


def multiline_text(text: str) -> str:
    """Prefix every line after the first with ``.. ``."""
    first, *rest = text.split("\n")
    return "\n".join([first, *(f".. {line}" for line in rest)])


def temp_file(prefix: str, suffix: str) -> Path:
    """A unique path in the system temporary directory."""
    name = f"{_APP_NAME.lower()}-{os.getpid()}{prefix}{uuid.uuid4()}{suffix}"
    return Path(tempfile.gettempdir()) / name


def is_url(path: str) -> bool:
    """Whether ``path`` is an http(s) URL."""
    return path.startswith(("http://", "https://"))