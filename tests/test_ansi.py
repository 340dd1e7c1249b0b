import random
import re

import pytest

from fuzzyseek.ansi import (
    AnsiOffset,
    AnsiState,
    Attr,
    extract_color,
    interpret_code,
    next_ansi_escape_sequence,
    parse_ansi_code,
)

REFERENCE = re.compile(
    r"(?:\x1b[\\\[()][0-9;:?]*[a-zA-Z@]"
    r"|\x1b\][0-9][;:][\x20-\x7e]+(?:\x1b\\|\x07)"
    r"|\x1b.|[\x0e\x0f]|.\x08)"
)

BENCHMARK_STRING = (
    "\x1b[38;5;81m\x1b[01;31m\x1b[Kkernel/\x1b[0m\x1b[38:5:81mbpf/"
    "\x1b[0m\x1b[38:5:81mpreload/\x1b[0m\x1b[38;5;81miterators/"
    "\x1b[0m\x1b[38:5:149mMakefile\x1b[m\x1b[K\x1b[0m"
)

SAMPLES = [
    "\x1b[0mhello world",
    "\x1b[1mhello world",
    "椙\x1b[1m椙",
    "椙\x1b[1椙m椙",
    "\x1b[1mhello \x1b[mw\x1b7o\x1b8r\x1b(Bl\x1b[2@d",
    "\x1b[1mhello \x1b[Kworld",
    "hello \x1b[34;45;1mworld",
    "hello \x1b[34;45;1mwor\x1b[34;45;1mld",
    "hello \x1b[34;45;1mwor\x1b[0mld",
    "hello \x1b[34;48;5;233;1mwo\x1b[38;5;161mr\x1b[0ml\x1b[38;5;161md",
    "hello \x1b[38;5;38;48;5;48;1mwor\x1b[38;5;48;48;5;38ml\x1b[0md",
    "hello \x1b[32;1mworld",
    "hello world",
    "hello \x1b[0;38;5;200;48;5;100mworld",
    "\x1b椙",
    "椙\x08",
    "\n\x08",
    "X\x08",
    "",
    "\x1b]4;3;rgb:aa/bb/cc\x07 ",
    "\x1b]4;3;rgb:aa/bb/cc\x1b\\ ",
    BENCHMARK_STRING,
]


def _spans(text):
    got, expected = [], []
    rest = text
    while True:
        span = next_ansi_escape_sequence(rest)
        found = REFERENCE.search(rest)
        got.append(span)
        expected.append(found.span() if found else None)
        if found is None or span != found.span():
            return got, expected
        rest = rest[found.end():]


@pytest.mark.parametrize("text", SAMPLES)
def test_next_escape_sequence_agrees_with_reference(text):
    got, expected = _spans(text)
    assert got == expected


def test_next_escape_sequence_fuzz_small_alphabet():
    rng = random.Random(1)
    alphabet = list("\x1b\x08\x0e\x0f\x07[]()\\;:?0123456789am@ \nx椙")
    for _ in range(3000):
        text = "".join(rng.choice(alphabet) for _ in range(rng.randrange(25)))
        got, expected = _spans(text)
        assert got == expected, repr(text)


def test_next_escape_sequence_fuzz_random_code_points():
    rng = random.Random(1)
    for _ in range(2000):
        chars = []
        for _ in range(rng.randrange(30)):
            code = rng.randrange(0x110000)
            while 0xD800 <= code <= 0xDFFF:
                code = rng.randrange(0x110000)
            chars.append(chr(code))
        text = "".join(chars)
        got, expected = _spans(text)
        assert got == expected


def test_next_escape_sequence_specific_spans():
    assert next_ansi_escape_sequence("hello world") is None
    assert next_ansi_escape_sequence("ab\x1b[31mcd") == (2, 7)
    assert next_ansi_escape_sequence("\x1b]4;3;rgb:aa/bb/cc\x07 ") == (0, 19)
    assert next_ansi_escape_sequence("X\x08") == (0, 2)


def _summary(offsets):
    return [
        (o.start, o.end, o.color.fg, o.color.bg, o.color.attr == Attr.BOLD)
        for o in offsets
    ]


@pytest.mark.parametrize(
    "src, expected",
    [
        ("hello world", None),
        ("\x1b[0mhello world", None),
        ("\x1b[1mhello world", [(0, 11, -1, -1, True)]),
        ("\x1b[1mhello \x1b[mw\x1b7o\x1b8r\x1b(Bl\x1b[2@d", [(0, 6, -1, -1, True)]),
        ("\x1b[1mhello \x1b[Kworld", [(0, 11, -1, -1, True)]),
        ("hello \x1b[34;45;1mworld", [(6, 11, 4, 5, True)]),
        ("hello \x1b[34;45;1mwor\x1b[34;45;1mld", [(6, 11, 4, 5, True)]),
        ("hello \x1b[34;45;1mwor\x1b[0mld", [(6, 9, 4, 5, True)]),
        (
            "hello \x1b[34;48;5;233;1mwo\x1b[38;5;161mr\x1b[0ml\x1b[38;5;161md",
            [(6, 8, 4, 233, True), (8, 9, 161, 233, True), (10, 11, 161, -1, False)],
        ),
        (
            "hello \x1b[38;5;38;48;5;48;1mwor\x1b[38;5;48;48;5;38ml\x1b[0md",
            [(6, 9, 38, 48, True), (9, 10, 48, 38, True)],
        ),
    ],
)
def test_extract_color_from_clean_state(src, expected):
    output, offsets, _ = extract_color(src, None, None)
    assert output == "hello world"
    if expected is None:
        assert offsets is None
    else:
        assert _summary(offsets) == expected


def test_extract_color_carries_state_across_lines():
    output, offsets, state = extract_color("hello \x1b[32;1mworld", None, None)
    assert output == "hello world"
    assert _summary(offsets) == [(6, 11, 2, -1, True)]
    assert (state.fg, state.bg) == (2, -1) and state.attr != 0

    output, offsets, state = extract_color("hello world", state, None)
    assert output == "hello world"
    assert _summary(offsets) == [(0, 11, 2, -1, True)]
    assert (state.fg, state.bg) == (2, -1) and state.attr != 0

    output, offsets, state = extract_color(
        "hello \x1b[0;38;5;200;48;5;100mworld", state, None
    )
    assert output == "hello world"
    assert _summary(offsets) == [(0, 6, 2, -1, True), (6, 11, 200, 100, False)]
    assert (state.fg, state.bg, state.attr) == (200, 100, 0)


def test_extract_color_calls_processor_with_runs():
    calls = []

    def proc(segment, state):
        calls.append((segment, state.attr if state else None))
        return True

    output, offsets, _ = extract_color("a\x1b[1mb", None, proc)
    assert output == "ab"
    assert calls == [("a", None), ("b", Attr.BOLD)]
    assert offsets == [AnsiOffset(1, 2, AnsiState(attr=Attr.BOLD))]


def test_extract_color_processor_can_stop():
    assert extract_color("a\x1b[1mb", None, lambda segment, state: False) == (
        "",
        None,
        None,
    )


def test_extract_color_strips_benchmark_string():
    output, offsets, state = extract_color(BENCHMARK_STRING, None, None)
    assert output == "kernel/bpf/preload/iterators/Makefile"
    assert state is None
    assert offsets[-1].color.fg == 149


@pytest.mark.parametrize(
    "code, prev, expected",
    [
        ("\x1b[m", None, ""),
        ("\x1b[m", AnsiState(0, 0, Attr.BLINK, -1), ""),
        ("\x1b[31m", None, "\x1b[31;49m"),
        ("\x1b[41m", None, "\x1b[39;41m"),
        ("\x1b[92m", None, "\x1b[92;49m"),
        ("\x1b[102m", None, "\x1b[39;102m"),
        ("\x1b[31m", AnsiState(4, 4, Attr.NONE, -1), "\x1b[31;44m"),
        ("\x1b[1;2;31m", AnsiState(2, -1, Attr.REVERSE, -1), "\x1b[1;2;7;31;49m"),
        ("\x1b[38;5;100;48;5;200m", None, "\x1b[38;5;100;48;5;200m"),
        ("\x1b[38:5:100:48:5:200m", None, "\x1b[38;5;100;48;5;200m"),
        ("\x1b[48;5;100;38;5;200m", None, "\x1b[38;5;200;48;5;100m"),
        ("\x1b[48;5;100;38;2;10;20;30;1m", None, "\x1b[1;38;2;10;20;30;48;5;100m"),
        (
            "\x1b[48;5;100;38;2;10;20;30;7m",
            AnsiState(1, 1, Attr.DIM | Attr.ITALIC, 0),
            "\x1b[2;3;7;38;2;10;20;30;48;5;100m",
        ),
    ],
)
def test_code_string_conversion(code, prev, expected):
    assert interpret_code(code, prev).to_ansi() == expected


@pytest.mark.parametrize(
    "state",
    [
        AnsiState(1, 4, Attr.BOLD),
        AnsiState(200, -1, Attr.UNDERLINE | Attr.STRIKE_THROUGH),
        AnsiState((1 << 24) | (10 << 16) | (20 << 8) | 30, 9, Attr.NONE),
    ],
)
def test_to_ansi_round_trip(state):
    assert interpret_code(state.to_ansi(), None) == state


def test_erase_line_keeps_background():
    state = interpret_code("\x1b[0K", AnsiState(bg=5))
    assert state.lbg == 5
    assert state.colored()


def test_incomplete_extended_color_resets_target():
    assert interpret_code("\x1b[38;5m", AnsiState(fg=3)).fg == -1


@pytest.mark.parametrize(
    "text, remaining, number",
    [
        ("123", "", 123),
        ("1a", "", None),
        ("1a;12", "12", None),
        ("12;a", "a", 12),
        ("-2", "", None),
    ],
)
def test_parse_ansi_code(text, remaining, number):
    got_number, _, got_remaining = parse_ansi_code(text, None)
    assert (got_number, got_remaining) == (number, remaining)


def test_parse_ansi_code_reports_delimiter():
    assert parse_ansi_code("38:5:100", None) == (38, ":", "5:100")
    assert parse_ansi_code("5;100", ":") == (None, ":", "")