import os

import pytest

from sigscan.directory import get_extension, get_files, has_extension
from sigscan.errors import DirectoryError


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.exe").write_bytes(b"x")
    (tmp_path / "b.TXT").write_bytes(b"x")
    (tmp_path / "C.DLL").write_bytes(b"x")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "d.exe").write_bytes(b"x")
    (sub / "noext").write_bytes(b"x")
    return tmp_path


def test_get_extension_last_dot():
    assert get_extension("archive.tar.gz") == ".gz"
    assert get_extension("a.EXE") == ".EXE"


def test_get_extension_none():
    assert get_extension("README") == ""


def test_has_extension_ignores_case():
    assert has_extension([".exe", ".dll"], ".DLL")
    assert not has_extension([".exe", ".dll"], ".txt")
    assert not has_extension([], ".exe")


def test_get_files_recursive_filtered(tree):
    result = get_files(str(tree), [".exe", ".dll"])
    assert sorted(result) == sorted(
        [
            os.path.join(str(tree), "a.exe"),
            os.path.join(str(tree), "C.DLL"),
            os.path.join(str(tree), "sub", "d.exe"),
        ]
    )


def test_get_files_not_recursive(tree):
    result = get_files(str(tree), [".exe"], recursive=False)
    assert result == [os.path.join(str(tree), "a.exe")]


def test_get_files_no_masks_returns_all_files(tree):
    result = get_files(str(tree), [])
    assert len(result) == 5
    assert all(os.path.isfile(p) for p in result)


def test_get_files_trailing_separator(tree):
    with_sep = get_files(str(tree) + os.sep, [".exe"])
    without_sep = get_files(str(tree), [".exe"])
    assert with_sep == without_sep


def test_get_files_missing_path(tmp_path):
    with pytest.raises(DirectoryError) as info:
        get_files(str(tmp_path / "missing"), [".exe"])
    assert info.value.code == 2


def test_get_files_on_file_raises(tree):
    with pytest.raises(DirectoryError):
        get_files(str(tree / "a.exe"), [])