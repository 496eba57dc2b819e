import os
from pathlib import Path

import pytest

from promptkit.paths import (
    expand_glob_paths,
    get_patch_extension,
    list_file_names,
    parse_glob,
    resolve_home_dir,
    safe_join_path,
    to_absolute_path,
)


def test_safe_join_path():
    assert safe_join_path("/home/user/dir1", "files/file1") == Path("/home/user/dir1/files/file1")
    assert safe_join_path("/home/user/dir1", "/files/file1") is None
    assert safe_join_path("/home/user/dir1", "../file1") is None


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("dir", ("dir", None, False)),
        ("dir/**", ("dir", None, False)),
        ("dir/file.md", ("dir/file.md", None, False)),
        ("**/*.md", (".", ["md"], False)),
        ("/**/*.md", ("/", ["md"], False)),
        ("dir/**/*.md", ("dir", ["md"], False)),
        ("dir/**/*.{md,txt}", ("dir", ["md", "txt"], False)),
        ("C:\\dir\\**\\*.{md,txt}", ("C:\\dir", ["md", "txt"], False)),
        ("*.md", (".", ["md"], True)),
        ("/*.md", ("/", ["md"], True)),
        ("dir/*.md", ("dir", ["md"], True)),
        ("dir/*.{md,txt}", ("dir", ["md", "txt"], True)),
        ("C:\\dir\\*.{md,txt}", ("C:\\dir", ["md", "txt"], True)),
    ],
)
def test_parse_glob(pattern, expected):
    assert parse_glob(pattern) == expected


def test_parse_glob_invalid_braces():
    with pytest.raises(ValueError, match="Invalid path"):
        parse_glob("dir/*.md}")


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.md").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.md").write_text("c")
    return tmp_path


def test_expand_recursive(tree):
    found = expand_glob_paths([f"{tree}/**/*.md"], True)
    assert sorted(found) == sorted([os.path.join(str(tree), "a.md"), os.path.join(str(tree), "sub", "c.md")])


def test_expand_current_only(tree):
    found = expand_glob_paths([f"{tree}/*.{{md,txt}}"], True)
    assert sorted(found) == sorted([os.path.join(str(tree), "a.md"), os.path.join(str(tree), "b.txt")])


def test_expand_whole_dir_and_dedup(tree):
    single = os.path.join(str(tree), "a.md")
    found = expand_glob_paths([single, str(tree), single], True)
    assert len(found) == 3
    assert found[0] == single
    assert len(set(found)) == len(found)


def test_expand_missing(tmp_path):
    missing = str(tmp_path / "nope")
    assert expand_glob_paths([missing], False) == []
    with pytest.raises(FileNotFoundError, match="Not found"):
        expand_glob_paths([missing], True)


def test_list_file_names(tmp_path):
    for name in ["y.yaml", "x.yaml", "z.txt"]:
        (tmp_path / name).write_text("")
    assert list_file_names(tmp_path, ".yaml") == ["x", "y"]
    assert list_file_names(tmp_path / "missing", ".yaml") == []


def test_get_patch_extension():
    assert get_patch_extension("dir/README.MD") == "md"
    assert get_patch_extension("archive.tar.gz") == "gz"
    assert get_patch_extension(".bashrc") is None
    assert get_patch_extension("noext") is None


def test_to_absolute_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert to_absolute_path(os.path.join("a", "..", "b")) == os.path.join(os.getcwd(), "b")


def test_resolve_home_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert resolve_home_dir("~/notes") == f"{tmp_path}/notes"
    assert resolve_home_dir("/abs/~/x") == "/abs/~/x"
    assert resolve_home_dir("~user/x") == "~user/x"