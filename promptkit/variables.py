"""Expand ``{{__name__}}`` system variables in prompt text."""

from __future__ import annotations

import locale
import os
import platform
import re
import sys

from promptkit.command import detect_shell
from promptkit.common import now

_VARIABLE_RE = re.compile(r"\{\{(\w+)\}\}")

_ARCH_ALIASES = {"amd64": "x86_64", "x64": "x86_64", "arm64": "aarch64", "i386": "x86", "i686": "x86"}


def _os_name() -> str:
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "macos"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    return sys.platform


def _os_distro() -> str:
    name = _os_name()
    if name == "linux":
        try:
            release = platform.freedesktop_os_release()
        except OSError:
            release = {}
        pretty = release.get("PRETTY_NAME") or " ".join(
            part for part in (release.get("NAME", "Linux"), release.get("VERSION_ID", "")) if part
        )
        return f"{pretty} (linux)"
    if name == "macos":
        version = platform.mac_ver()[0]
        return f"Mac OS {version}".strip()
    if name == "windows":
        return f"Windows {platform.version()}".strip()
    return f"{platform.system()} {platform.release()}".strip()


def _arch() -> str:
    machine = platform.machine()
    return _ARCH_ALIASES.get(machine.lower(), machine)


def _locale() -> str:
    try:
        code = locale.getlocale()[0]
    except ValueError:
        code = None
    if not code:
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            value = os.environ.get(var)
            if value and value not in ("C", "POSIX"):
                code = value.split(".", 1)[0]
                break
    return code.replace("_", "-") if code else ""


def _cwd() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""


_RESOLVERS = {
    "__os__": _os_name,
    "__os_distro__": _os_distro,
    "__os_family__": lambda: "windows" if os.name == "nt" else "unix",
    "__arch__": _arch,
    "__shell__": lambda: detect_shell().name,
    "__locale__": _locale,
    "__now__": now,
    "__cwd__": _cwd,
}


def interpolate_variables(text: str) -> str:
    """Return ``text`` with known ``{{__var__}}`` placeholders replaced; others are kept."""

    def replace(match: re.Match[str]) -> str:
        resolver = _RESOLVERS.get(match.group(1))
        return resolver() if resolver is not None else match.group(0)

    return _VARIABLE_RE.sub(replace, text)