"""Path helpers: safe joins, simple glob expansion, extensions and home directories."""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Iterable


def safe_join_path(base_path: str | os.PathLike[str], sub_path: str | os.PathLike[str]) -> Path | None:
    """Join ``sub_path`` onto ``base_path`` unless it would escape the base."""
    sub = PurePath(sub_path)
    if sub.is_absolute() or sub.anchor:
        return None
    if ".." in sub.parts:
        return None
    base = Path(base_path)
    joined = base.joinpath(*sub.parts)
    try:
        joined.relative_to(base)
    except ValueError:
        return None
    return joined


def _find_any(text: str, first: str, second: str) -> int | None:
    index = text.find(first)
    if index < 0:
        index = text.find(second)
    return None if index < 0 else index


def _locate_glob(path_str: str) -> tuple[int, int, bool] | None:
    start = _find_any(path_str, "/**/*.", "\\**\\*.")
    if start is not None:
        return start, 6, False
    start = _find_any(path_str, "**/*.", "**\\*.")
    if start is not None:
        return (start, 5, False) if start == 0 else None
    start = _find_any(path_str, "/*.", "\\*.")
    if start is not None:
        return start, 3, True
    start = path_str.find("*.")
    if start == 0:
        return 0, 2, True
    return None


def parse_glob(path_str: str) -> tuple[str, list[str] | None, bool]:
    """Split a path pattern into base path, allowed extensions and a current-dir-only flag.

    Raises ``ValueError`` on a malformed ``{...}`` extension list.
    """
    located = _locate_glob(path_str)
    if located is None:
        if path_str.endswith(("/**", "\\**")):
            return path_str[:-3], None, False
        return path_str, None, False

    start, offset, current_only = located
    base_path = path_str[:start]
    if not base_path:
        base_path = "/" if path_str.startswith("/") else "."

    brace = path_str.find("}", start)
    if brace >= 0:
        extensions_str = path_str[start + offset : brace + 1]
        if not (extensions_str.startswith("{") and extensions_str.endswith("}")):
            raise ValueError(f"Invalid path '{path_str}'")
        extensions = extensions_str[1:-1].split(",")
    else:
        extensions = [path_str[start + offset :]]
    return base_path, extensions or None, current_only


def _raw_extension(name: str) -> str | None:
    if name in ("", ".", ".."):
        return None
    before, dot, after = name.rpartition(".")
    if not dot or not before:
        return None
    return after


def _is_valid_extension(suffixes: list[str] | None, path: str) -> bool:
    if not suffixes:
        return True
    extension = _raw_extension(os.path.basename(path))
    return extension is not None and extension in suffixes


def _list_files(
    files: dict[str, None],
    entry_path: str,
    suffixes: list[str] | None,
    current_only: bool,
    bail_non_exist: bool,
) -> None:
    if not os.path.exists(entry_path):
        if bail_non_exist:
            raise FileNotFoundError(f"Not found '{entry_path}'")
        return
    if not os.path.isdir(entry_path):
        _add_file(files, suffixes, entry_path)
        return
    with os.scandir(entry_path) as entries:
        for entry in entries:
            if entry.is_dir():
                if not current_only:
                    _list_files(files, entry.path, suffixes, current_only, bail_non_exist)
            else:
                _add_file(files, suffixes, entry.path)


def _add_file(files: dict[str, None], suffixes: list[str] | None, path: str) -> None:
    if _is_valid_extension(suffixes, path):
        files.setdefault(path, None)


def expand_glob_paths(paths: Iterable[str], bail_non_exist: bool) -> list[str]:
    """Expand each path pattern into the files it names, in order and without duplicates.

    Raises ``FileNotFoundError`` for a missing path when ``bail_non_exist`` is true.
    """
    files: dict[str, None] = {}
    for path in paths:
        base_path, suffixes, current_only = parse_glob(path)
        _list_files(files, base_path, suffixes, current_only, bail_non_exist)
    return list(files)


def list_file_names(directory: str | os.PathLike[str], ext: str) -> list[str]:
    """Sorted names of the entries of ``directory`` ending in ``ext``, with ``ext`` removed."""
    try:
        names = os.listdir(directory)
    except OSError:
        return []
    return sorted(name[: len(name) - len(ext)] for name in names if name.endswith(ext))


def get_patch_extension(path: str) -> str | None:
    """Lowercased extension of ``path``, or ``None`` when it has none."""
    extension = _raw_extension(PurePath(path).name)
    return extension.lower() if extension is not None else None


def to_absolute_path(path: str) -> str:
    """Absolute, normalised form of ``path`` without resolving symlinks."""
    return os.path.abspath(path)


def resolve_home_dir(path: str) -> str:
    """Replace a leading ``~`` in ``~/...`` or ``~\\...`` with the home directory."""
    if path.startswith(("~/", "~\\")):
        try:
            home = Path.home()
        except RuntimeError:
            return path
        return f"{home}{path[1:]}"
    return path