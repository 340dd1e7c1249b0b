import pytest

from fuzzyseek.history import History, HistoryError

MAX_HISTORY = 50


def test_directory_is_rejected(tmp_path):
    with pytest.raises(HistoryError):
        History(str(tmp_path), MAX_HISTORY)


def test_missing_parent_is_rejected(tmp_path):
    with pytest.raises(HistoryError):
        History(str(tmp_path / "no" / "such" / "file"), MAX_HISTORY)


def test_missing_file_is_created(tmp_path):
    path = tmp_path / "history"
    h = History(str(path), MAX_HISTORY)
    assert path.exists()
    assert path.read_text() == ""
    assert h.lines == [""]
    assert h.current() == ""


def test_append_and_reload(tmp_path):
    path = tmp_path / "history"
    path.write_text("")

    h = History(str(path), MAX_HISTORY)
    for _ in range(MAX_HISTORY + 10):
        h.append("foobar")

    h = History(str(path), MAX_HISTORY)
    assert len(h.lines) == MAX_HISTORY + 1
    assert h.lines[:MAX_HISTORY] == ["foobar"] * MAX_HISTORY

    h = History(str(path), MAX_HISTORY)
    h.append("barfoo")
    h.append("")
    h.append("foobarbaz")

    h = History(str(path), MAX_HISTORY)
    assert len(h.lines) == MAX_HISTORY + 1
    assert h.lines[MAX_HISTORY - 3] == "foobar"
    assert h.lines[MAX_HISTORY - 2] == "barfoo"
    assert h.lines[MAX_HISTORY - 1] == "foobarbaz"


def test_file_contents_after_append(tmp_path):
    path = tmp_path / "history"
    h = History(str(path), 2)
    h.append("a")
    h.append("b")
    h.append("c")
    assert path.read_text() == "b\nc\n"


def test_navigation(tmp_path):
    path = tmp_path / "history"
    path.write_text("a\nb\n")
    h = History(str(path), MAX_HISTORY)
    assert h.lines == ["a", "b", ""]
    assert h.current() == ""
    assert h.previous() == "b"
    assert h.previous() == "a"
    assert h.previous() == "a"
    assert h.next() == "b"
    assert h.next() == ""
    assert h.next() == ""


def test_override(tmp_path):
    path = tmp_path / "history"
    path.write_text("a\nb\n")
    h = History(str(path), MAX_HISTORY)

    h.override("typed")
    assert h.lines[-1] == "typed"

    assert h.previous() == "b"
    h.override("edited")
    assert h.current() == "edited"
    assert h.lines[1] == "b"
    assert h.previous() == "a"
    assert h.next() == "edited"
    assert h.next() == "typed"
    assert path.read_text() == "a\nb\n"