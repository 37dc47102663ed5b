import io
import os

import pytest

from pipetoolkit.fileutil import (
    absolute_path,
    create_file,
    create_path,
    delete_empty_dir,
    delete_file,
    file_exists,
    file_size,
    is_dir,
    is_special_dir,
    load_file,
    parent_dir,
    save_file,
    scan_dir,
    stream_size,
)


@pytest.fixture
def base(tmp_path):
    root = tmp_path.as_posix()
    # keeps the pytest directory from being removed by backtracking deletes
    (tmp_path / "sentinel.txt").write_bytes(b"x")
    return root


def test_create_path_makes_parents_only(base):
    create_path(base + "/a/b/file.txt")
    assert is_dir(base + "/a/b") is True
    assert file_exists(base + "/a/b/file.txt") is False


def test_create_path_existing_is_fine(base):
    create_path(base + "/a/")
    create_path(base + "/a/")
    assert is_dir(base + "/a")


def test_create_file_writes_and_reads_back(base):
    target = base + "/x/y/data.bin"
    handle = create_file(target, "wb")
    with handle:
        handle.write(b"payload")
    assert load_file(target) == b"payload"


def test_create_file_for_directory_returns_none(base):
    assert create_file(base + "/only/dir/", "wb") is None
    assert is_dir(base + "/only/dir")


def test_is_dir(base):
    save_file(b"1", base + "/f")
    assert is_dir(base) is True
    assert is_dir(base + "/f") is False
    assert is_dir(base + "/missing") is False


@pytest.mark.parametrize("name,expected", [(".", True), ("..", True), ("...", False), ("a", False)])
def test_is_special_dir(name, expected):
    assert is_special_dir(name) is expected


def test_save_and_load_round_trip(base):
    save_file("héllo", base + "/t.txt")
    assert load_file(base + "/t.txt") == "héllo".encode("utf-8")


def test_load_missing_returns_empty(base):
    assert load_file(base + "/nope") == b""


def test_save_into_missing_directory_raises(base):
    with pytest.raises(OSError):
        save_file(b"1", base + "/no/such/dir/file")


def test_file_exists(base):
    save_file(b"1", base + "/f")
    assert file_exists(base + "/f") is True
    assert file_exists(base + "/g") is False


def test_delete_file_removes_tree(base):
    create_path(base + "/tree/a/b/")
    save_file(b"1", base + "/tree/a/b/f1")
    save_file(b"2", base + "/tree/a/f2")
    delete_file(base + "/tree/")
    assert is_dir(base + "/tree") is False
    assert file_exists(base + "/tree/a/f2") is False
    assert file_exists(base + "/sentinel.txt") is True


def test_delete_missing_raises(base):
    with pytest.raises(FileNotFoundError):
        delete_file(base + "/missing")


def test_delete_file_with_empty_dir_cleanup(base):
    create_path(base + "/x/y/")
    save_file(b"1", base + "/x/y/f")
    delete_file(base + "/x/y/f", del_empty_dir=True)
    assert not os.path.exists(base + "/x")
    assert is_dir(base)


def test_delete_file_without_backtrace_keeps_grandparent(base):
    create_path(base + "/x/y/")
    save_file(b"1", base + "/x/y/f")
    delete_file(base + "/x/y/f", del_empty_dir=True, backtrace=False)
    assert not os.path.exists(base + "/x/y")
    assert is_dir(base + "/x")


def test_delete_empty_dir_keeps_non_empty(base):
    create_path(base + "/full/")
    save_file(b"1", base + "/full/f")
    delete_empty_dir(base + "/full")
    assert file_exists(base + "/full/f")


def test_parent_dir():
    parent = "/a/b/"
    assert parent_dir(parent + "c") == parent
    assert parent_dir(parent + "c/") == parent


def test_parent_dir_without_slash():
    assert parent_dir("name") == "name"


def test_absolute_path_basic():
    root = "/root/"
    assert absolute_path("x/./y/../z", root) == root + "x/z"


def test_absolute_path_keeps_trailing_slash():
    root = "/root/"
    assert absolute_path("sub/", root) == root + "sub/"


def test_absolute_path_cannot_escape_root():
    root = "/root/"
    assert absolute_path("../../etc/passwd", root) == root


def test_absolute_path_can_access_parent():
    assert absolute_path("../x", "/a/b/", True) == "/a/x"


def test_absolute_path_empty_returns_current():
    assert absolute_path("", "/root") == "/root"


def test_absolute_path_default_is_absolute():
    result = absolute_path("file.txt")
    assert result.startswith("/") or result[1:3] == ":/"
    assert result.endswith("/file.txt")


def _make_tree(base):
    create_path(base + "/scan/sub/")
    save_file(b"1", base + "/scan/a.txt")
    save_file(b"1", base + "/scan/.hidden")
    save_file(b"1", base + "/scan/sub/b.txt")
    save_file(b"1", base + "/scan/sub/.inner")
    return base + "/scan"


def test_scan_dir_top_level(base):
    root = _make_tree(base)
    seen = []
    scan_dir(root + "/", lambda p, d: seen.append((p, d)) or True)
    assert sorted(seen) == [(root + "/a.txt", False), (root + "/sub", True)]


def test_scan_dir_recursive_and_hidden(base):
    root = _make_tree(base)
    seen = []
    scan_dir(root, lambda p, d: seen.append(p) or True, True, True)
    assert sorted(seen) == sorted(
        [root + "/a.txt", root + "/.hidden", root + "/sub", root + "/sub/b.txt"]
    )


def test_scan_dir_stops_when_callback_false(base):
    root = _make_tree(base)
    seen = []
    scan_dir(root, lambda p, d: seen.append(p) and False, True, True)
    assert len(seen) == 1


def test_scan_dir_missing_directory(base):
    seen = []
    scan_dir(base + "/missing", lambda p, d: seen.append(p) or True)
    assert seen == []


def test_stream_size():
    data = b"0123456789"
    stream = io.BytesIO(data)
    stream.read(4)
    assert stream_size(stream) == len(data)
    assert stream_size(stream, True) == len(data) - 4
    assert stream.tell() == 4


def test_stream_size_none():
    assert stream_size(None) == 0


def test_file_size(base):
    data = b"abcdef"
    save_file(data, base + "/s")
    assert file_size(base + "/s") == len(data)
    assert file_size(base + "/missing") == 0
    assert file_size("") == 0