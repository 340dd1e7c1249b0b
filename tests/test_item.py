from fuzzyseek.ansi import AnsiOffset, AnsiState, Attr
from fuzzyseek.item import Item


def test_as_string_prefers_original_text():
    orig = "\x1b[34mfoo"
    text = "\x1b[34mbar"
    item = Item(text=text, orig_text=orig)
    assert item.as_string(True) == "foo"
    assert item.as_string(False) == orig
    assert item.as_string(True) == "foo"

    item.orig_text = None
    assert item.as_string(True) == text
    assert item.as_string(False) == text


def test_as_string_plain_original():
    item = Item(text="bar", orig_text="plain line")
    assert item.as_string(True) == "plain line"
    assert item.as_string(False) == "plain line"


def test_defaults():
    item = Item(text="hello")
    assert item.colors == []
    assert item.index == -1
    assert item.orig_text is None


def test_colors_are_kept():
    span = AnsiOffset(0, 5, AnsiState(attr=Attr.BOLD))
    item = Item(text="hello", index=3, colors=[span])
    assert item.colors[0].end == 5
    assert item.index == 3