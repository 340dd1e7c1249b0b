"""Character classes and the positional bonus points used for match scoring."""

from __future__ import annotations

import os
import unicodedata
from dataclasses import dataclass
from enum import IntEnum

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Chosen so that the bonus is cancelled once the gap between acronym
# characters grows beyond about 8 characters.
BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

_ASCII_WHITE = " \t\n\v\f\r"


class CharClass(IntEnum):
    """Class of a character; classes above NON_WORD count as word characters."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


@dataclass
class _Scheme:
    bonus_boundary_white: int = BONUS_BOUNDARY + 2
    bonus_boundary_delimiter: int = BONUS_BOUNDARY + 1
    delimiter_chars: str = "/,:;|"
    initial_char_class: CharClass = CharClass.WHITE


scheme_state = _Scheme()
"""The scoring settings currently in effect, changed by :func:`init_scheme`."""


def init_scheme(scheme: str) -> None:
    """Switch the scoring settings to the named scheme.

    Known schemes are ``default``, ``path`` and ``history``; any other name
    raises :class:`ValueError`.
    """
    if scheme == "default":
        scheme_state.bonus_boundary_white = BONUS_BOUNDARY + 2
        scheme_state.bonus_boundary_delimiter = BONUS_BOUNDARY + 1
    elif scheme == "path":
        scheme_state.bonus_boundary_white = BONUS_BOUNDARY
        scheme_state.bonus_boundary_delimiter = BONUS_BOUNDARY + 1
        scheme_state.delimiter_chars = "/" if os.sep == "/" else os.sep + "/"
        scheme_state.initial_char_class = CharClass.DELIMITER
    elif scheme == "history":
        scheme_state.bonus_boundary_white = BONUS_BOUNDARY
        scheme_state.bonus_boundary_delimiter = BONUS_BOUNDARY
    else:
        raise ValueError(f"unknown scoring scheme: {scheme}")


def _char_class_of_ascii(char: str) -> CharClass:
    if "a" <= char <= "z":
        return CharClass.LOWER
    if "A" <= char <= "Z":
        return CharClass.UPPER
    if "0" <= char <= "9":
        return CharClass.NUMBER
    if char in _ASCII_WHITE:
        return CharClass.WHITE
    if char in scheme_state.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def _char_class_of_non_ascii(char: str) -> CharClass:
    category = unicodedata.category(char)
    if category == "Ll":
        return CharClass.LOWER
    if category == "Lu":
        return CharClass.UPPER
    if category.startswith("N"):
        return CharClass.NUMBER
    if category.startswith("L"):
        return CharClass.LETTER
    if char.isspace():
        return CharClass.WHITE
    if char in scheme_state.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def char_class_of(char: str) -> CharClass:
    """Return the class of a single character."""
    if ord(char) < 0x80:
        return _char_class_of_ascii(char)
    return _char_class_of_non_ascii(char)


def bonus_for(prev_class: CharClass, char_class: CharClass) -> int:
    """Bonus for a character of ``char_class`` following one of ``prev_class``."""
    if char_class > CharClass.NON_WORD:
        if prev_class == CharClass.WHITE:
            return scheme_state.bonus_boundary_white
        if prev_class == CharClass.DELIMITER:
            return scheme_state.bonus_boundary_delimiter
        if prev_class == CharClass.NON_WORD:
            return BONUS_BOUNDARY
    if (prev_class == CharClass.LOWER and char_class == CharClass.UPPER) or (
        prev_class != CharClass.NUMBER and char_class == CharClass.NUMBER
    ):
        return BONUS_CAMEL123
    if char_class == CharClass.NON_WORD:
        return BONUS_NON_WORD
    if char_class == CharClass.WHITE:
        return scheme_state.bonus_boundary_white
    return 0


def bonus_at(text: str, idx: int) -> int:
    """Bonus for the character at position ``idx`` of ``text``."""
    if idx == 0:
        return scheme_state.bonus_boundary_white
    return bonus_for(char_class_of(text[idx - 1]), char_class_of(text[idx]))