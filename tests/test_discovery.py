"""Tests for target directory checks and regular-file enumeration."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from common.errors import ErrorCode, PathError
from core.counting import list_regular_files, resolve_directory


def test_resolve_directory_accepts_directory(tmp_path: Path) -> None:
    assert resolve_directory(str(tmp_path)) == tmp_path


def test_resolve_directory_rejects_missing(tmp_path: Path) -> None:
    with pytest.raises(PathError) as exc:
        resolve_directory(tmp_path / "nope")
    assert exc.value.code == ErrorCode.PATH_ERROR
    assert exc.value.message == "Path does not exist"


def test_resolve_directory_rejects_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x\n", encoding="utf-8")
    with pytest.raises(PathError) as exc:
        resolve_directory(target)
    assert exc.value.message == "Not a directory"


def test_only_regular_files_are_listed(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("b\n", encoding="utf-8")
    (tmp_path / "a.txt").write_text("a\n", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "inner.txt").write_text("skip\n", encoding="utf-8")

    assert list_regular_files(tmp_path) == [tmp_path / "a.txt", tmp_path / "b.txt"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlinks_are_excluded(tmp_path: Path) -> None:
    real = tmp_path / "real.txt"
    real.write_text("1\n2\n", encoding="utf-8")
    try:
        (tmp_path / "link.txt").symlink_to(real)
    except OSError:
        pytest.skip("cannot create symlinks here")

    assert list_regular_files(tmp_path) == [real]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="fifos unsupported")
def test_fifo_is_not_listed(tmp_path: Path) -> None:
    os.mkfifo(tmp_path / "pipe")
    (tmp_path / "data.txt").write_text("line\n", encoding="utf-8")

    assert list_regular_files(tmp_path) == [tmp_path / "data.txt"]


def test_empty_directory_lists_nothing(tmp_path: Path) -> None:
    assert list_regular_files(tmp_path) == []
