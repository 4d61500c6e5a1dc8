"""Fuzzy matching: a fast greedy scan and an optimal-alignment scorer.

The greedy matcher finds the first occurrence of the pattern and then looks
backwards for a shorter substring. The optimal matcher is a modified
Smith-Waterman that never omits or mismatches pattern characters and picks
the alignment with the highest score.
"""

from __future__ import annotations

from .normalize import normalize_rune
from .scoring import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Slab,
    ascii_fuzzy_index,
    bonus_for,
    calculate_score,
    char_class_of,
    fold_char,
    initial_char_class,
    to_lower,
)

_MISS = MatchResult(-1, -1, 0)


def _index_at(index: int, length: int, forward: bool) -> int:
    return index if forward else length - index - 1


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Greedy fuzzy match.

    *pattern* must already be lowercased when matching case-insensitively
    and normalized when *normalize* is set.
    """
    if not pattern:
        return MatchResult(0, 0, 0), None
    if ascii_fuzzy_index(text, pattern, case_sensitive)[0] < 0:
        return _MISS, None

    length = len(text)
    pattern_length = len(pattern)
    pidx = 0
    sidx = eidx = -1

    for index in range(length):
        char = fold_char(text[_index_at(index, length, forward)], case_sensitive, normalize)
        if char == pattern[_index_at(pidx, pattern_length, forward)]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == pattern_length:
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return _MISS, None

    pidx -= 1
    for index in range(eidx - 1, sidx - 1, -1):
        char = fold_char(text[_index_at(index, length, forward)], case_sensitive, False)
        if char == pattern[_index_at(pidx, pattern_length, forward)]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = length - eidx, length - sidx

    score, positions = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, with_pos
    )
    return MatchResult(sidx, eidx, score), positions


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    slab: Slab | None = None,
) -> tuple[MatchResult, list[int] | None]:
    """Optimal fuzzy match by dynamic programming.

    Positions, when requested, are returned from last to first. Falls back to
    the greedy matcher when the score matrix would exceed the slab budget.
    """
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0), ([] if with_pos else None)
    n = len(text)
    if m > n:
        return _MISS, None

    if slab is not None and n * m > slab.size16:
        return fuzzy_match_v1(case_sensitive, normalize, forward, text, pattern, with_pos, slab)

    # Phase 1. Narrow the search scope
    min_idx, max_idx = ascii_fuzzy_index(text, pattern, case_sensitive)
    if min_idx < 0:
        return _MISS, None

    chars = list(text[min_idx:max_idx])
    n = len(chars)
    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first = [0] * m

    # Phase 2. Bonus for each position and the first occurrence of each
    # pattern character
    max_score = max_pos = 0
    pidx = last_idx = 0
    pchar0 = pchar = pattern[0]
    prev_h0 = 0
    prev_class = initial_char_class()
    in_gap = False
    for off, char in enumerate(chars):
        char_class = char_class_of(char)
        if not case_sensitive and char_class == CharClass.UPPER:
            char = to_lower(char)
        if normalize:
            char = normalize_rune(char)
        chars[off] = char

        bonus = bonus_for(prev_class, char_class)
        bonuses[off] = bonus
        prev_class = char_class

        if char == pchar:
            if pidx < m:
                first[pidx] = off
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = off

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[off] = score
            c0[off] = 1
            if m == 1 and (forward and score > max_score or not forward and score >= max_score):
                max_score, max_pos = score, off
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[off] = max(prev_h0 + gap, 0)
            c0[off] = 0
            in_gap = True
        prev_h0 = h0[off]

    if pidx != m:
        return _MISS, None
    if m == 1:
        result = MatchResult(min_idx + max_pos, min_idx + max_pos + 1, max_score)
        return result, ([min_idx + max_pos] if with_pos else None)

    # Phase 3. Fill in the score matrix; omission is not allowed
    f0 = first[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0 : last_idx + 1]
    # Possible length of the consecutive chunk at each position
    chunks = [0] * (width * m)
    chunks[:width] = c0[f0 : last_idx + 1]

    for pidx in range(1, m):
        f = first[pidx]
        pchar = pattern[pidx]
        row = pidx * width
        in_gap = False
        scores[row + f - f0 - 1] = 0
        for col in range(f, last_idx + 1):
            cell = row + col - f0
            char = chars[col]
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            s2 = scores[cell - 1] + gap
            s1 = 0
            consecutive = 0

            if pchar == char:
                s1 = scores[cell - 1 - width] + SCORE_MATCH
                bonus = bonuses[col]
                consecutive = chunks[cell - 1 - width] + 1
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
                forward and score > max_score or not forward and score >= max_score
            ):
                max_score, max_pos = score, col
            scores[cell] = score

    # Phase 4. Backtrace to find the matched positions
    positions: list[int] | None = None
    j = f0
    if with_pos:
        positions = []
        i = m - 1
        j = max_pos
        prefer_match = True
        while True:
            base = i * width
            j0 = j - f0
            score = scores[base + j0]
            s1 = scores[base - width + j0 - 1] if i > 0 and j >= first[i] else 0
            s2 = scores[base + j0 - 1] if j > first[i] else 0

            if score > s1 and (score > s2 or score == s2 and prefer_match):
                positions.append(j + min_idx)
                if i == 0:
                    break
                i -= 1
            below = base + width + j0 + 1
            prefer_match = chunks[base + j0] > 1 or below < len(chunks) and chunks[below] > 0
            j -= 1

    # The start offset is only accurate when positions were traced.
    return MatchResult(min_idx + j, min_idx + max_pos + 1, max_score), positions