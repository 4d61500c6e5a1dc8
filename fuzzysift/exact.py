"""Exact, boundary, prefix, suffix and equality matchers.

Every matcher expects *pattern* to be lowercased already when matching
case-insensitively, and normalized already when *normalize* is set. Each
returns a MatchResult and, for interface parity with the fuzzy matchers,
a positions list that is always None here.
"""

from __future__ import annotations

from .normalize import normalize_rune
from .scoring import (
    BONUS_BOUNDARY,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Slab,
    ascii_fuzzy_index,
    bonus_at,
    boundary_white_bonus,
    calculate_score,
    char_class_of,
    fold_char,
    to_lower,
)

_MISS = MatchResult(-1, -1, 0)

# Python counts the ASCII information separators as whitespace; they are not.
_NOT_SPACE = "\x1c\x1d\x1e\x1f"


def _is_space(char: str) -> bool:
    return char.isspace() and char not in _NOT_SPACE


def _leading_whitespaces(text: str) -> int:
    count = 0
    for char in text:
        if not _is_space(char):
            break
        count += 1
    return count


def _trailing_whitespaces(text: str) -> int:
    count = 0
    for char in reversed(text):
        if not _is_space(char):
            break
        count += 1
    return count


def _index_at(index: int, length: int, forward: bool) -> int:
    return index if forward else length - index - 1


def _exact_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    boundary_check: bool,
    text: str,
    pattern: str,
) -> MatchResult:
    if not pattern:
        return MatchResult(0, 0, 0)

    length = len(text)
    pattern_length = len(pattern)
    if length < pattern_length:
        return _MISS
    if ascii_fuzzy_index(text, pattern, case_sensitive)[0] < 0:
        return _MISS

    # Only the bonus at the first character position is considered
    pidx = 0
    best_pos, bonus, best_bonus = -1, 0, -1
    index = 0
    while index < length:
        text_idx = _index_at(index, length, forward)
        char = fold_char(text[text_idx], case_sensitive, normalize)
        pattern_idx = _index_at(pidx, pattern_length, forward)
        ok = pattern[pattern_idx] == char
        if ok:
            if pattern_idx == 0:
                bonus = bonus_at(text, text_idx)
            if boundary_check:
                ok = bonus >= BONUS_BOUNDARY
                if ok and pattern_idx == 0:
                    ok = text_idx == 0 or char_class_of(text[text_idx - 1]) <= CharClass.DELIMITER
                if ok and pattern_idx == pattern_length - 1:
                    ok = (
                        text_idx == length - 1
                        or char_class_of(text[text_idx + 1]) <= CharClass.DELIMITER
                    )
        if ok:
            pidx += 1
            if pidx == pattern_length:
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
        return _MISS

    if forward:
        sidx = best_pos - pattern_length + 1
        eidx = best_pos + 1
    else:
        sidx = length - (best_pos + 1)
        eidx = length - (best_pos - pattern_length + 1)

    if boundary_check:
        # Underscore boundaries rank below the other kinds of boundaries
        score = bonus
        deduct = bonus - BONUS_BOUNDARY + 1
        if sidx > 0 and text[sidx - 1] == "_":
            score -= deduct + 1
            deduct = 1
        if eidx < length and text[eidx] == "_":
            score -= deduct
        # Base score so that this competes with other match types
        score += SCORE_MATCH * pattern_length + boundary_white_bonus() * (pattern_length + 1)
    else:
        score, _ = calculate_score(case_sensitive, normalize, text, pattern, sidx, eidx, False)
    return MatchResult(sidx, eidx, score)


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Substring match that prefers the occurrence with the highest bonus."""
    return _exact_match(case_sensitive, normalize, forward, False, text, pattern), None


def exact_match_boundary(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Substring match that must start and end on word boundaries."""
    return _exact_match(case_sensitive, normalize, forward, True, text, pattern), None


def _fold_strict(char: str, case_sensitive: bool, normalize: bool) -> str:
    if not case_sensitive:
        char = to_lower(char)
    if normalize:
        char = normalize_rune(char)
    return char


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Match *pattern* at the start of *text*, after leading whitespace."""
    if not pattern:
        return MatchResult(0, 0, 0), None

    trimmed = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    if len(text) - trimmed < len(pattern):
        return _MISS, None

    for offset, pchar in enumerate(pattern):
        if _fold_strict(text[trimmed + offset], case_sensitive, normalize) != pchar:
            return _MISS, None

    end = trimmed + len(pattern)
    score, _ = calculate_score(case_sensitive, normalize, text, pattern, trimmed, end, False)
    return MatchResult(trimmed, end, score), None


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Match *pattern* at the end of *text*, before trailing whitespace."""
    trimmed = len(text)
    if not pattern or not _is_space(pattern[-1]):
        trimmed -= _trailing_whitespaces(text)
    if not pattern:
        return MatchResult(trimmed, trimmed, 0), None

    diff = trimmed - len(pattern)
    if diff < 0:
        return _MISS, None

    for offset, pchar in enumerate(pattern):
        if _fold_strict(text[diff + offset], case_sensitive, normalize) != pchar:
            return _MISS, None

    score, _ = calculate_score(case_sensitive, normalize, text, pattern, diff, trimmed, False)
    return MatchResult(diff, trimmed, score), None


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Match when *text*, stripped of surrounding whitespace, equals *pattern*."""
    pattern_length = len(pattern)
    if pattern_length == 0:
        return _MISS, None

    lead = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    trail = 0 if _is_space(pattern[-1]) else _trailing_whitespaces(text)
    if len(text) - lead - trail != pattern_length:
        return _MISS, None

    if normalize:
        match = True
        for offset, pchar in enumerate(pattern):
            char = text[lead + offset]
            if not case_sensitive:
                char = to_lower(char)
            if normalize_rune(pchar) != normalize_rune(char):
                match = False
                break
    else:
        body = text[lead : len(text) - trail]
        if not case_sensitive:
            body = body.lower()
        match = body == pattern

    if not match:
        return _MISS, None
    white = boundary_white_bonus()
    score = (SCORE_MATCH + white) * pattern_length + (BONUS_FIRST_CHAR_MULTIPLIER - 1) * white
    return MatchResult(lead, lead + pattern_length, score), None