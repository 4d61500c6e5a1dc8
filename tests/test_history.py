import pytest

from fuzzysift.history import History, HistoryError

MAX_HISTORY = 50


def test_directory_is_invalid(tmp_path):
    with pytest.raises(HistoryError):
        History(str(tmp_path), MAX_HISTORY)


def test_missing_parent_directory_is_invalid(tmp_path):
    with pytest.raises(HistoryError):
        History(str(tmp_path / "missing" / "history"), MAX_HISTORY)


def test_new_file_is_created(tmp_path):
    path = tmp_path / "history"
    history = History(str(path), MAX_HISTORY)
    assert path.exists()
    assert history.lines == [""]
    assert history.current() == ""


def test_history_carried_cases(tmp_path):
    path = str(tmp_path / "fzf-history")
    open(path, "w").close()

    history = History(path, MAX_HISTORY)
    for _ in range(MAX_HISTORY + 10):
        history.append("foobar")

    history = History(path, MAX_HISTORY)
    assert len(history.lines) == MAX_HISTORY + 1
    assert history.lines[:MAX_HISTORY] == ["foobar"] * MAX_HISTORY

    history = History(path, MAX_HISTORY)
    history.append("barfoo")
    history.append("")
    history.append("foobarbaz")

    history = History(path, MAX_HISTORY)
    assert len(history.lines) == MAX_HISTORY + 1
    assert history.lines[MAX_HISTORY - 3] == "foobar"
    assert history.lines[MAX_HISTORY - 2] == "barfoo"
    assert history.lines[MAX_HISTORY - 1] == "foobarbaz"


def test_navigation_and_override(tmp_path):
    path = tmp_path / "history"
    path.write_text("a\nb\n")
    history = History(str(path), MAX_HISTORY)
    assert history.lines == ["a", "b", ""]

    assert history.previous() == "b"
    assert history.previous() == "a"
    assert history.previous() == "a"
    assert history.next() == "b"

    history.override("B")
    assert history.current() == "B"
    assert history.next() == ""

    history.override("typed")
    assert history.current() == "typed"
    assert history.previous() == "B"
    assert history.next() == "typed"
    assert history.next() == "typed"

    # Overrides are never written to the file
    assert path.read_text() == "a\nb\n"


def test_append_writes_file(tmp_path):
    path = tmp_path / "history"
    history = History(str(path), 2)
    history.append("one")
    history.append("two")
    history.append("three")
    assert path.read_text() == "two\nthree\n"
    assert history.lines == ["two", "three", ""]