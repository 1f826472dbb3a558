"""Smith-Waterman style fuzzy matching of a pattern against text."""

from __future__ import annotations

import string
from enum import Enum, auto
from typing import Hashable, Iterable

_SCORE_MATCH = 16
_GAP_START = -3
_GAP_EXTENSION = -1
_FIRST_CHAR_MULTIPLIER = 2
_BONUS_HEAD = _SCORE_MATCH // 2
_BONUS_BREAK = _SCORE_MATCH // 2 + _GAP_EXTENSION
_BONUS_CAMEL = _SCORE_MATCH // 2 + 2 * _GAP_EXTENSION
_BONUS_CONSECUTIVE = -(_GAP_START + _GAP_EXTENSION)
_PENALTY_CASE_MISMATCH = _GAP_EXTENSION * 2

_UNREACHABLE = -(10**9)
_HARD_SEPARATORS = frozenset(" /\\|()[]{}")


class _CharType(Enum):
    EMPTY = auto()
    UPPER = auto()
    LOWER = auto()
    NUMBER = auto()
    HARD_SEP = auto()
    SOFT_SEP = auto()


def _char_type(ch: str) -> _CharType:
    if ch in _HARD_SEPARATORS or ch.isspace():
        return _CharType.HARD_SEP
    if ch in string.punctuation:
        return _CharType.SOFT_SEP
    if ch in string.digits:
        return _CharType.NUMBER
    if ch.isupper():
        return _CharType.UPPER
    return _CharType.LOWER


def _bonus(prev: _CharType, cur: _CharType) -> int:
    if prev in (_CharType.EMPTY, _CharType.HARD_SEP):
        return _BONUS_HEAD
    if prev is _CharType.SOFT_SEP and cur in (
        _CharType.UPPER,
        _CharType.LOWER,
        _CharType.NUMBER,
    ):
        return _BONUS_BREAK
    if prev in (_CharType.LOWER, _CharType.NUMBER) and cur is _CharType.UPPER:
        return _BONUS_CAMEL
    return 0


def fuzzy_match(choice: str, pattern: str) -> int | None:
    """Score ``pattern`` as a subsequence of ``choice``; None if it is not one.

    Matching ignores case unless the pattern contains an uppercase letter.
    Word starts, camel-case humps and consecutive runs score higher; gaps
    between matched characters cost points.
    """
    if not pattern:
        return 0
    if len(pattern) > len(choice):
        return None

    case_sensitive = any(ch.isupper() for ch in pattern)

    def fold(ch: str) -> str:
        return ch if case_sensitive else ch.lower()

    bonuses = []
    prev_type = _CharType.EMPTY
    for ch in choice:
        cur_type = _char_type(ch)
        bonuses.append(_bonus(prev_type, cur_type))
        prev_type = cur_type

    width = len(choice)
    prev_match = [_UNREACHABLE] * width
    prev_best = [_UNREACHABLE] * width

    for i, pattern_char in enumerate(pattern):
        wanted = fold(pattern_char)
        match_row = [_UNREACHABLE] * width
        best_row = [_UNREACHABLE] * width
        running = _UNREACHABLE
        running_is_match = False

        for j, ch in enumerate(choice):
            score = _UNREACHABLE
            if j >= i and fold(ch) == wanted:
                base = _SCORE_MATCH + (_PENALTY_CASE_MISMATCH if ch != pattern_char else 0)
                if i == 0:
                    score = base + bonuses[j] * _FIRST_CHAR_MULTIPLIER
                elif j > 0:
                    options = []
                    if prev_match[j - 1] > _UNREACHABLE:
                        options.append(
                            prev_match[j - 1] + base + max(bonuses[j], _BONUS_CONSECUTIVE)
                        )
                    if prev_best[j - 1] > _UNREACHABLE:
                        options.append(prev_best[j - 1] + base + bonuses[j])
                    if options:
                        score = max(options)
            match_row[j] = score

            if running > _UNREACHABLE:
                carried = running + (_GAP_START if running_is_match else _GAP_EXTENSION)
            else:
                carried = _UNREACHABLE
            if score > _UNREACHABLE and score >= carried:
                running, running_is_match = score, True
            else:
                running, running_is_match = carried, False
            best_row[j] = running

        prev_match, prev_best = match_row, best_row

    result = max(prev_match)
    return None if result <= _UNREACHABLE else result


def best_match(
    candidates: Iterable[tuple[Hashable, str]], pattern: str
) -> tuple[Hashable, int] | None:
    """Return ``(key, score)`` of the best-scoring ``(key, text)`` candidate.

    Ties go to the earliest candidate; None when nothing matches.
    """
    best: tuple[Hashable, int] | None = None
    for key, text in candidates:
        score = fuzzy_match(text, pattern)
        if score is not None and (best is None or score > best[1]):
            best = (key, score)
    return best