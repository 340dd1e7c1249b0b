"""Recognition and interpretation of ANSI escape sequences in input lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntFlag
from typing import Callable, Optional

DEFAULT_COLOR = -1


class Attr(IntFlag):
    """Text attributes that an SGR sequence can switch on or off."""

    NONE = 0
    BOLD = 1
    DIM = 2
    ITALIC = 4
    UNDERLINE = 8
    BLINK = 16
    REVERSE = 32
    STRIKE_THROUGH = 64


_ATTR_CODES = (
    (Attr.BOLD, 1),
    (Attr.DIM, 2),
    (Attr.ITALIC, 3),
    (Attr.UNDERLINE, 4),
    (Attr.BLINK, 5),
    (Attr.REVERSE, 7),
    (Attr.STRIKE_THROUGH, 9),
)

_SET_ATTR = {code: flag for flag, code in _ATTR_CODES}

_CLEAR_ATTR = {
    22: Attr.BOLD | Attr.DIM,
    23: Attr.ITALIC,
    24: Attr.UNDERLINE,
    25: Attr.BLINK,
    27: Attr.REVERSE,
    29: Attr.STRIKE_THROUGH,
}


def _color_code(color: int, offset: int) -> str:
    if color == DEFAULT_COLOR:
        return str(offset + 9)
    if color < 8:
        return str(offset + color)
    if color < 16:
        return str(offset - 30 + 90 + color - 8)
    if color < 256:
        return f"{offset + 8};5;{color}"
    if color >= 1 << 24:
        red = (color >> 16) & 0xFF
        green = (color >> 8) & 0xFF
        blue = color & 0xFF
        return f"{offset + 8};2;{red};{green};{blue}"
    return ""


@dataclass(frozen=True)
class AnsiState:
    """Colours and attributes in effect; -1 stands for the terminal default.

    Colours below 256 are palette indices; 24-bit colours are stored with
    bit 24 set above the red, green and blue bytes.
    """

    fg: int = DEFAULT_COLOR
    bg: int = DEFAULT_COLOR
    attr: Attr = Attr.NONE
    lbg: int = DEFAULT_COLOR

    def colored(self) -> bool:
        """True if anything differs from the terminal defaults."""
        return (
            self.fg != DEFAULT_COLOR
            or self.bg != DEFAULT_COLOR
            or self.attr > 0
            or self.lbg >= 0
        )

    def to_ansi(self) -> str:
        """SGR sequence that reproduces this state, or "" when uncolored."""
        if not self.colored():
            return ""
        parts = [str(code) for flag, code in _ATTR_CODES if self.attr & flag]
        parts.append(_color_code(self.fg, 30))
        parts.append(_color_code(self.bg, 40))
        return "\x1b[" + ";".join(parts) + "m"


@dataclass
class AnsiOffset:
    """Character span ``[start, end)`` of the stripped text drawn in ``color``."""

    start: int
    end: int
    color: AnsiState


def _same_state(new: AnsiState, old: Optional[AnsiState]) -> bool:
    if old is None:
        return not new.colored()
    return new == old


_TRIGGER = re.compile("[\x08\x0e\x0f\x1b]")
_PRINTABLE_RUN = re.compile("[\x20-\x7e]*")
_CTRL_START = "\\[()"
_CTRL_BODY = "0123456789;:?"


def _is_print(char: str) -> bool:
    return "\x20" <= char <= "\x7e"


def _match_control_sequence(text: str, start: int) -> Optional[int]:
    for pos, char in enumerate(text[start:], start):
        if char in _CTRL_BODY:
            continue
        if "a" <= char <= "z" or "A" <= char <= "Z" or char == "@":
            return pos + 1
        return None
    return None


def _match_operating_system_command(text: str, start: int) -> Optional[int]:
    pos = _PRINTABLE_RUN.match(text, start).end()
    if pos < len(text):
        if text[pos] == "\x07":
            return pos + 1
        if text[pos] == "\x1b" and pos + 1 < len(text) and text[pos + 1] == "\\":
            return pos + 2
    return None


def _find_escape(text: str, pos: int) -> Optional[tuple[int, int]]:
    length = len(text)
    for found in _TRIGGER.finditer(text, pos):
        i = found.start()
        char = text[i]
        if char == "\x08":
            # A backspace overstrikes the character before it.
            if i > pos and text[i - 1] != "\n":
                return i - 1, i + 1
        elif char == "\x1b":
            if i + 2 < length and text[i + 1] in _CTRL_START:
                end = _match_control_sequence(text, i + 2)
                if end is not None:
                    return i, end
            if (
                i + 5 < length
                and text[i + 1] == "]"
                and "0" <= text[i + 2] <= "9"
                and text[i + 3] in ";:"
                and _is_print(text[i + 4])
            ):
                end = _match_operating_system_command(text, i + 5)
                if end is not None:
                    return i, end
            if i + 1 < length and text[i + 1] != "\n":
                return i, i + 2
        else:
            return i, i + 1
    return None


def next_ansi_escape_sequence(text: str) -> Optional[tuple[int, int]]:
    """Span ``(start, end)`` of the first escape sequence in ``text``, or None.

    Recognised are control sequences, operating system commands, two-character
    escapes, shift-in/shift-out and a character followed by a backspace.
    """
    return _find_escape(text, 0)


def parse_ansi_code(
    text: str, delimiter: Optional[str] = None
) -> tuple[Optional[int], Optional[str], str]:
    """Split the leading parameter off an SGR parameter list.

    Returns the parameter as an int (None if it is empty or not a plain
    non-negative number), the delimiter in use and the remaining text. With no
    delimiter given, ";" is preferred over ":".
    """
    if delimiter is None:
        idx = text.find(";")
        if idx < 0:
            idx = text.find(":")
    else:
        idx = text.find(delimiter)
    remaining = ""
    if idx >= 0:
        delimiter = text[idx]
        remaining = text[idx + 1 :]
        text = text[:idx]
    if text and text.isascii() and text.isdigit():
        return int(text), delimiter, remaining
    return None, delimiter, remaining


def interpret_code(code: str, prev_state: Optional[AnsiState] = None) -> AnsiState:
    """State that results from applying escape sequence ``code`` to ``prev_state``."""
    if prev_state is None:
        fg, bg, attr, lbg = DEFAULT_COLOR, DEFAULT_COLOR, Attr.NONE, DEFAULT_COLOR
    else:
        fg, bg = prev_state.fg, prev_state.bg
        attr, lbg = Attr(prev_state.attr), prev_state.lbg

    if not (code.startswith("\x1b[") and code.endswith("m")):
        # Erase-in-line keeps the current background to the end of the line.
        if prev_state is not None and code.endswith("0K"):
            lbg = prev_state.bg
        return AnsiState(fg, bg, attr, lbg)

    if len(code) <= 3:
        return AnsiState(DEFAULT_COLOR, DEFAULT_COLOR, Attr.NONE, lbg)

    body = code[2:-1]
    colors = {"fg": fg, "bg": bg}
    target = "fg"
    mode = 0
    delimiter: Optional[str] = None
    while body:
        num, delimiter, body = parse_ansi_code(body, delimiter)
        if num is None:
            continue
        if mode == 0:
            if num == 38:
                target, mode = "fg", 1
            elif num == 48:
                target, mode = "bg", 1
            elif num == 39:
                colors["fg"] = DEFAULT_COLOR
            elif num == 49:
                colors["bg"] = DEFAULT_COLOR
            elif num in _SET_ATTR:
                attr |= _SET_ATTR[num]
            elif num in _CLEAR_ATTR:
                attr &= ~_CLEAR_ATTR[num]
            elif num == 0:
                colors["fg"] = colors["bg"] = DEFAULT_COLOR
                attr = Attr.NONE
            elif 30 <= num <= 37:
                colors["fg"] = num - 30
            elif 40 <= num <= 47:
                colors["bg"] = num - 40
            elif 90 <= num <= 97:
                colors["fg"] = num - 90 + 8
            elif 100 <= num <= 107:
                colors["bg"] = num - 100 + 8
        elif mode == 1:
            if num == 2:
                mode = 10
            elif num == 5:
                mode = 2
            else:
                mode = 0
        elif mode == 2:
            colors[target] = num
            mode = 0
        elif mode == 10:
            colors[target] = (1 << 24) | (num << 16)
            mode = 11
        elif mode == 11:
            colors[target] |= num << 8
            mode = 12
        elif mode == 12:
            colors[target] |= num
            mode = 0

    if mode > 0:
        colors[target] = DEFAULT_COLOR
    return AnsiState(colors["fg"], colors["bg"], attr, lbg)


Processor = Callable[[str, Optional[AnsiState]], bool]


def extract_color(
    text: str,
    state: Optional[AnsiState] = None,
    proc: Optional[Processor] = None,
) -> tuple[str, Optional[list[AnsiOffset]], Optional[AnsiState]]:
    """Strip escape sequences from ``text`` and record where colours apply.

    ``state`` is the state carried over from earlier text. Returns the
    stripped text, the coloured spans (None if there are none) and the state
    at the end of the text. ``proc``, if given, is called with every run of
    plain text and the state it is drawn in; when it returns False the
    extraction stops and ``("", None, None)`` is returned.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, state))

    output: list[str] = []
    prev_idx = 0
    rune_count = 0
    idx = 0
    while idx < len(text):
        span = _find_escape(text, idx)
        if span is None:
            break
        start, idx = span

        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", None, None
        prev_idx = idx

        if prev:
            rune_count += len(prev)
            output.append(prev)

        new_state = interpret_code(text[start:idx], state)
        if not _same_state(new_state, state):
            if state is not None:
                offsets[-1].end = rune_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(rune_count, rune_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = trimmed = text
    else:
        rest = text[prev_idx:]
        output.append(rest)
        trimmed = "".join(output)
    if proc is not None:
        proc(rest, state)
    if offsets:
        if rest and state is not None:
            rune_count += len(rest)
            offsets[-1].end = rune_count
        return trimmed, offsets, state
    return trimmed, None, state