import os
import tempfile

from fuzzysift.tempfiles import remove_files, write_temporary_file


def _read(path):
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def test_round_trip_with_newline():
    data = ["foo", "bar baz", "qux"]
    path = write_temporary_file(data, "\n")
    try:
        assert _read(path).split("\n") == data + [""]
        assert os.path.basename(path).startswith("fuzzysift-temp-")
    finally:
        remove_files([path])


def test_round_trip_with_nul_separator():
    data = ["line\nwith newline", "second"]
    path = write_temporary_file(data, "\x00")
    try:
        assert _read(path).split("\x00") == data + [""]
    finally:
        remove_files([path])


def test_empty_data_writes_only_separator():
    path = write_temporary_file([], "\n")
    try:
        assert _read(path) == "\n"
    finally:
        remove_files([path])


def test_remove_files_removes_and_ignores_missing(tmp_path):
    path = write_temporary_file(["x"], "\n")
    assert _read(path) == "x\n"
    missing = str(tmp_path / "does-not-exist")
    remove_files([missing, path])
    assert not os.path.exists(path)
    assert not os.path.exists(missing)


def test_write_fails_without_temp_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "missing"))
    assert write_temporary_file(["x"], "\n") is None