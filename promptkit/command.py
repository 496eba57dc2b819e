"""Shell detection, running external commands and writing shell history."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Mapping, Sequence

from promptkit.common import get_env_name, now_timestamp, temp_file


@dataclass(frozen=True)
class Shell:
    """A shell: its short name, the executable and the flag that passes a command."""

    name: str
    cmd: str
    arg: str


def _windows_shell_from_env() -> str | None:
    ps_module_path = os.environ.get("PSModulePath")
    if ps_module_path is None:
        return None
    ps_module_path = ps_module_path.lower()
    if ps_module_path.startswith("c:\\users"):
        return "pwsh.exe" if "\\powershell\\7\\" in ps_module_path else "powershell.exe"
    return None


def detect_shell() -> Shell:
    """Work out which shell the user runs."""
    cmd = os.environ.get(get_env_name("shell"))
    if cmd is None:
        cmd = _windows_shell_from_env() if os.name == "nt" else os.environ.get("SHELL")
    name: str | None = None
    if cmd:
        stem = PurePath(cmd).stem
        if stem:
            name = "nushell" if stem == "nu" else stem.lower()
    if not cmd or not name:
        cmd, name = ("cmd.exe", "cmd") if os.name == "nt" else ("/bin/sh", "sh")
    arg = "/C" if name == "cmd" else "-c"
    return Shell(name, cmd, arg)


def _merged_env(envs: Mapping[str, str] | None) -> dict[str, str] | None:
    if not envs:
        return None
    return {**os.environ, **envs}


def run_command(cmd: str, args: Sequence[str], envs: Mapping[str, str] | None = None) -> int:
    """Run ``cmd`` with ``args`` attached to the terminal and return its exit code."""
    completed = subprocess.run([cmd, *args], env=_merged_env(envs), check=False)
    code = completed.returncode
    return 0 if code < 0 else code


def run_command_with_output(
    cmd: str, args: Sequence[str], envs: Mapping[str, str] | None = None
) -> tuple[bool, str, str]:
    """Run ``cmd`` and return ``(success, stdout, stderr)``."""
    completed = subprocess.run([cmd, *args], env=_merged_env(envs), capture_output=True, check=False)
    try:
        stdout = completed.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("Invalid UTF-8 in stdout") from exc
    try:
        stderr = completed.stderr.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("Invalid UTF-8 in stderr") from exc
    return completed.returncode == 0, stdout, stderr


def run_loader_command(path: str, extension: str, loader_command: str) -> str:
    """Run a document loader command and return the text it produced.

    ``$1`` in the command stands for ``path``; ``$2``, if present, for an output file
    the loader writes to instead of standard output.
    """
    invalid = f"Invalid document loader '{extension}': `{loader_command}`"
    try:
        raw_args = shlex.split(loader_command)
    except ValueError as exc:
        raise ValueError(invalid) from exc
    if not raw_args:
        raise ValueError(invalid)

    outpath = str(temp_file("-output-", ""))
    use_stdout = True
    cmd_args = []
    for arg in raw_args:
        arg = arg.replace("$1", path)
        if "$2" in arg:
            use_stdout = False
            arg = arg.replace("$2", outpath)
        cmd_args.append(arg)

    cmd_eval = shlex.join(cmd_args)
    cmd, *args = cmd_args
    unable = f"Unable to run `{cmd_eval}`, Perhaps '{cmd}' is not installed?"

    if use_stdout:
        try:
            success, stdout, stderr = run_command_with_output(cmd, args)
        except OSError as exc:
            raise RuntimeError(unable) from exc
        if not success:
            raise RuntimeError(stderr or f"The command `{cmd_eval}` exited with non-zero.")
        return stdout

    try:
        status = run_command(cmd, args)
    except OSError as exc:
        raise RuntimeError(unable) from exc
    if status != 0:
        raise RuntimeError(f"The command `{cmd_eval}` exited with non-zero.")
    output = Path(outpath)
    try:
        return output.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError("Failed to read file generated by the loader") from exc
    finally:
        output.unlink(missing_ok=True)


def edit_file(editor: str, path: str | os.PathLike[str]) -> None:
    """Open ``path`` in ``editor`` and wait for it to exit."""
    subprocess.run([editor, os.fspath(path)], check=False)


def _home() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def _config_dir(home: Path | None) -> Path | None:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" if home else None
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return home / ".config" if home else None


def _history_file(shell: str) -> Path | None:
    home = _home()
    if shell in ("bash", "sh", "zsh"):
        histfile = os.environ.get("HISTFILE")
        if histfile is not None:
            return Path(histfile)
        if home is None:
            return None
        return home / (".zsh_history" if shell == "zsh" else ".bash_history")
    if shell == "nushell":
        config = _config_dir(home)
        return config / "nushell" / "history.txt" if config else None
    if home is None and shell != "powershell" and shell != "pwsh":
        return None
    if shell == "fish":
        return home / ".local" / "share" / "fish" / "fish_history"
    if shell in ("powershell", "pwsh"):
        if os.name == "nt":
            appdata = os.environ.get("APPDATA")
            if not appdata:
                return None
            base = Path(appdata) / "Microsoft" / "Windows" / "PowerShell"
        else:
            if home is None:
                return None
            base = home / ".local" / "share" / "powershell"
        return base / "PSReadLine" / "ConsoleHost_history.txt"
    if shell == "ksh":
        return home / ".ksh_history"
    if shell == "tcsh":
        return home / ".history"
    return None


def append_to_shell_history(shell: str, command: str, exit_code: int) -> None:
    """Append ``command`` to the history file of ``shell``, in that shell's format."""
    history_file = _history_file(shell)
    if history_file is None:
        return
    command = command.replace("\n", " ")
    now = now_timestamp()
    if shell == "fish":
        entry = f"- cmd: {command}\n  when: {now}"
    elif shell == "zsh":
        entry = f": {now}:{exit_code};{command}"
    else:
        entry = command
    with open(history_file, "a", encoding="utf-8", newline="") as handle:
        handle.write(f"{entry}\n")