"""Fuzzy, exact, prefix, suffix and equality matching with positional scoring.

Every match function takes the same arguments and returns a pair of a
:class:`MatchResult` and, when ``with_pos`` is requested and the algorithm
tracks them, the list of matched character positions (otherwise ``None``).

Two assumptions hold for all of them: ``pattern`` is already lowercase when
``case_sensitive`` is false, and already normalized when ``normalize`` is true.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .charclass import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    bonus_at,
    bonus_for,
    char_class_of,
    scheme_state,
)
from .normalize import normalize_rune


@dataclass(frozen=True)
class MatchResult:
    """Span of a match within the text and its score; -1 bounds mean no match."""

    start: int
    end: int
    score: int

    @property
    def matched(self) -> bool:
        return self.start >= 0


NO_MATCH = MatchResult(-1, -1, 0)

Positions = Optional[list]
MatchFunction = Callable[[bool, bool, bool, str, str, bool], "tuple[MatchResult, Positions]"]


def _index_at(index: int, size: int, forward: bool) -> int:
    return index if forward else size - index - 1


def _simple_lower(char: str) -> str:
    # Single-character lowercase mapping; full mappings can expand to more.
    return char.lower()[0]


def _fold_case(char: str) -> str:
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 0x7F:
        return _simple_lower(char)
    return char


def _leading_whitespaces(text: str) -> int:
    return len(text) - len(text.lstrip())


def _trailing_whitespaces(text: str) -> int:
    return len(text) - len(text.rstrip())


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    pos = text.find(char, start)
    if pos == start:
        return start
    # Look for the uppercase letter as well; the text is known to be ASCII.
    if not case_sensitive and "a" <= char <= "z":
        end = pos if pos >= 0 else len(text)
        upper_pos = text.find(char.upper(), start, end)
        if upper_pos >= 0:
            pos = upper_pos
    return pos


def _ascii_fuzzy_index(text: str, pattern: str, case_sensitive: bool) -> int:
    """Index from which a match may start, 0 if unknown, -1 if impossible."""
    if not text.isascii():
        return 0
    if not pattern.isascii():
        return -1
    first_idx = idx = 0
    for pidx, pchar in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, pchar, idx)
        if idx < 0:
            return -1
        if pidx == 0 and idx > 0:
            # Step back to find the right bonus point
            first_idx = idx - 1
        idx += 1
    return first_idx


def _calculate_score(
    case_sensitive: bool,
    normalize: bool,
    text: str,
    pattern: str,
    sidx: int,
    eidx: int,
    with_pos: bool,
) -> tuple[int, Positions]:
    pidx = score = consecutive = first_bonus = 0
    in_gap = False
    pos: Positions = [] if with_pos else None
    prev_class = scheme_state.initial_char_class
    if sidx > 0:
        prev_class = char_class_of(text[sidx - 1])
    for idx in range(sidx, eidx):
        char = text[idx]
        char_class = char_class_of(char)
        if not case_sensitive:
            char = _fold_case(char)
        if normalize:
            char = normalize_rune(char)
        if char == pattern[pidx]:
            if pos is not None:
                pos.append(idx)
            score += SCORE_MATCH
            bonus = bonus_for(prev_class, char_class)
            if consecutive == 0:
                first_bonus = bonus
            else:
                # Break consecutive chunk
                if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            score += bonus * BONUS_FIRST_CHAR_MULTIPLIER if pidx == 0 else bonus
            in_gap = False
            consecutive += 1
            pidx += 1
        else:
            score += SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            in_gap = True
            consecutive = 0
            first_bonus = 0
        prev_class = char_class
    return score, pos


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> tuple[MatchResult, Positions]:
    """Optimal fuzzy match: a Smith-Waterman variant that allows no omissions."""
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0), ([] if with_pos else None)
    n = len(text)

    # Phase 1. Quick rejection and starting point for ASCII text
    idx = _ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return NO_MATCH, None

    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first_occurrence = [0] * m
    runes = list(text)

    # Phase 2. Bonus for each position and first occurrence of each character
    max_score = max_score_pos = 0
    pidx = last_idx = 0
    pchar0 = pchar = pattern[0]
    prev_h0 = 0
    prev_class = scheme_state.initial_char_class
    in_gap = False
    for col in range(idx, n):
        char = runes[col]
        char_class = char_class_of(char)
        if ord(char) < 0x80:
            if not case_sensitive and char_class == CharClass.UPPER:
                char = chr(ord(char) + 32)
        else:
            if not case_sensitive and char_class == CharClass.UPPER:
                char = _simple_lower(char)
            if normalize:
                char = normalize_rune(char)

        runes[col] = char
        bonus = bonus_for(prev_class, char_class)
        bonuses[col] = bonus
        prev_class = char_class

        if char == pchar:
            if pidx < m:
                first_occurrence[pidx] = col
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = col

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[col] = score
            c0[col] = 1
            if m == 1 and (
                (forward and score > max_score) or (not forward and score >= max_score)
            ):
                max_score, max_score_pos = score, col
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[col] = max(prev_h0 + gap, 0)
            c0[col] = 0
            in_gap = True
        prev_h0 = h0[col]

    if pidx != m:
        return NO_MATCH, None
    if m == 1:
        result = MatchResult(max_score_pos, max_score_pos + 1, max_score)
        return result, ([max_score_pos] if with_pos else None)

    # Phase 3. Fill in the score matrix
    f0 = first_occurrence[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0 : last_idx + 1]
    chunks = [0] * (width * m)
    chunks[:width] = c0[f0 : last_idx + 1]

    for pidx in range(1, m):
        f = first_occurrence[pidx]
        pchar = pattern[pidx]
        row = pidx * width
        in_gap = False
        scores[row + f - f0 - 1] = 0
        for col in range(f, last_idx + 1):
            cell = row + col - f0
            diag = cell - 1 - width
            s2 = scores[cell - 1] + (SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START)
            s1 = consecutive = 0
            if pchar == runes[col]:
                s1 = scores[diag] + SCORE_MATCH
                bonus = bonuses[col]
                consecutive = chunks[diag] + 1
                if consecutive > 1:
                    first_bonus = bonuses[col - consecutive + 1]
                    # Break consecutive chunk
                    if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                        consecutive = 1
                    else:
                        bonus = max(bonus, BONUS_CONSECUTIVE, first_bonus)
                if s1 + bonus < s2:
                    s1 += bonuses[col]
                    consecutive = 0
                else:
                    s1 += bonus
            chunks[cell] = consecutive

            in_gap = s1 < s2
            score = max(s1, s2, 0)
            if pidx == m - 1 and (
                (forward and score > max_score) or (not forward and score >= max_score)
            ):
                max_score, max_score_pos = score, col
            scores[cell] = score

    # Phase 4. Backtrace to find character positions
    pos: Positions = [] if with_pos else None
    j = f0
    if pos is not None:
        i = m - 1
        j = max_score_pos
        prefer_match = True
        while True:
            row = i * width
            j0 = j - f0
            s = scores[row + j0]
            s1 = scores[row - width + j0 - 1] if i > 0 and j >= first_occurrence[i] else 0
            s2 = scores[row + j0 - 1] if j > first_occurrence[i] else 0

            if s > s1 and (s > s2 or (s == s2 and prefer_match)):
                pos.append(j)
                if i == 0:
                    break
                i -= 1
            below = row + width + j0 + 1
            prefer_match = chunks[row + j0] > 1 or (below < len(chunks) and chunks[below] > 0)
            j -= 1
    # The start offset is only exact when positions were traced.
    return MatchResult(j, max_score_pos + 1, max_score), pos


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> tuple[MatchResult, Positions]:
    """Greedy fuzzy match: first occurrence, then shrunk by a backward scan."""
    if not pattern:
        return MatchResult(0, 0, 0), None
    if _ascii_fuzzy_index(text, pattern, case_sensitive) < 0:
        return NO_MATCH, None

    pidx = 0
    sidx = eidx = -1
    n = len(text)
    m = len(pattern)

    for index in range(n):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = _fold_case(char)
        if normalize:
            char = normalize_rune(char)
        if char == pattern[_index_at(pidx, m, forward)]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == m:
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return NO_MATCH, None

    pidx -= 1
    for index in range(eidx - 1, sidx - 1, -1):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = _fold_case(char)
        if char == pattern[_index_at(pidx, m, forward)]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = n - eidx, n - sidx

    score, pos = _calculate_score(case_sensitive, normalize, text, pattern, sidx, eidx, with_pos)
    return MatchResult(sidx, eidx, score), pos


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> tuple[MatchResult, Positions]:
    """Substring match choosing the occurrence with the best first-char bonus."""
    if not pattern:
        return MatchResult(0, 0, 0), None

    n = len(text)
    m = len(pattern)
    if n < m:
        return NO_MATCH, None
    if _ascii_fuzzy_index(text, pattern, case_sensitive) < 0:
        return NO_MATCH, None

    pidx = 0
    best_pos, bonus, best_bonus = -1, 0, -1
    index = 0
    while index < n:
        text_idx = _index_at(index, n, forward)
        char = text[text_idx]
        if not case_sensitive:
            char = _fold_case(char)
        if normalize:
            char = normalize_rune(char)
        pattern_idx = _index_at(pidx, m, forward)
        if pattern[pattern_idx] == char:
            if pattern_idx == 0:
                bonus = bonus_at(text, text_idx)
            pidx += 1
            if pidx == m:
                if bonus > best_bonus:
                    best_pos, best_bonus = index, bonus
                if bonus >= BONUS_BOUNDARY:
                    break
                index -= pidx - 1
                pidx, bonus = 0, 0
        else:
            index -= pidx
            pidx, bonus = 0, 0
        index += 1

    if best_pos < 0:
        return NO_MATCH, None
    if forward:
        sidx = best_pos - m + 1
        eidx = best_pos + 1
    else:
        sidx = n - (best_pos + 1)
        eidx = n - (best_pos - m + 1)
    score, _ = _calculate_score(case_sensitive, normalize, text, pattern, sidx, eidx, False)
    return MatchResult(sidx, eidx, score), None


def _chars_equal(
    case_sensitive: bool, normalize: bool, text: str, pattern: str, offset: int
) -> bool:
    for index, pchar in enumerate(pattern):
        char = text[offset + index]
        if not case_sensitive:
            char = _simple_lower(char)
        if normalize:
            char = normalize_rune(char)
        if char != pchar:
            return False
    return True


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> tuple[MatchResult, Positions]:
    """Match at the start of the text, ignoring leading whitespace."""
    if not pattern:
        return MatchResult(0, 0, 0), None

    trimmed = 0
    if not pattern[0].isspace():
        trimmed = _leading_whitespaces(text)

    if len(text) - trimmed < len(pattern):
        return NO_MATCH, None
    if not _chars_equal(case_sensitive, normalize, text, pattern, trimmed):
        return NO_MATCH, None

    end = trimmed + len(pattern)
    score, _ = _calculate_score(case_sensitive, normalize, text, pattern, trimmed, end, False)
    return MatchResult(trimmed, end, score), None


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> tuple[MatchResult, Positions]:
    """Match at the end of the text, ignoring trailing whitespace."""
    trimmed = len(text)
    if not pattern or not pattern[-1].isspace():
        trimmed -= _trailing_whitespaces(text)
    if not pattern:
        return MatchResult(trimmed, trimmed, 0), None

    diff = trimmed - len(pattern)
    if diff < 0:
        return NO_MATCH, None
    if not _chars_equal(case_sensitive, normalize, text, pattern, diff):
        return NO_MATCH, None

    score, _ = _calculate_score(case_sensitive, normalize, text, pattern, diff, trimmed, False)
    return MatchResult(diff, trimmed, score), None


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
) -> tuple[MatchResult, Positions]:
    """Match when the text, without surrounding whitespace, equals the pattern."""
    m = len(pattern)
    if m == 0:
        return NO_MATCH, None

    trimmed = 0 if pattern[0].isspace() else _leading_whitespaces(text)
    trimmed_end = 0 if pattern[-1].isspace() else _trailing_whitespaces(text)

    if len(text) - trimmed - trimmed_end != m:
        return NO_MATCH, None

    if normalize:
        match = True
        for pchar, char in zip(pattern, text[trimmed:]):
            if not case_sensitive:
                char = _simple_lower(char)
            if normalize_rune(pchar) != normalize_rune(char):
                match = False
                break
    else:
        body = text[trimmed : len(text) - trimmed_end]
        if not case_sensitive:
            body = body.lower()
        match = body == pattern

    if not match:
        return NO_MATCH, None
    boundary_white = scheme_state.bonus_boundary_white
    score = (SCORE_MATCH + boundary_white) * m + (
        BONUS_FIRST_CHAR_MULTIPLIER - 1
    ) * boundary_white
    return MatchResult(trimmed, trimmed + m, score), None