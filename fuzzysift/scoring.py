"""Character classes, bonus points and the score of an aligned match."""

from __future__ import annotations

import os
import unicodedata
from dataclasses import dataclass, field
from enum import IntEnum

from .constants import SLAB16_SIZE, SLAB32_SIZE
from .normalize import normalize_rune

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Bonus for a match at the start of a word. Chosen so that it is cancelled
# once the gap between acronym characters grows beyond about 8 characters.
BONUS_BOUNDARY = SCORE_MATCH // 2

# Non-word characters get a flat bonus, needed for consecutive chunks that
# start with one.
BONUS_NON_WORD = SCORE_MATCH // 2

# camelCase and letter123 transitions: no single-character gap is implied,
# so one point less than a word boundary.
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION

# Minimum bonus for each character inside a consecutive chunk.
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)

# The first pattern character weighs more than the rest.
BONUS_FIRST_CHAR_MULTIPLIER = 2

_WHITE_CHARS = " \t\n\v\f\r\x85\xa0"
_DEFAULT_DELIMITERS = "/,:;|"


class CharClass(IntEnum):
    """Class of a character, as far as bonus points are concerned."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


@dataclass(frozen=True)
class MatchResult:
    """Span of a match within the text and its score; (-1, -1, 0) for no match."""

    start: int
    end: int
    score: int


@dataclass(frozen=True)
class Slab:
    """Scratch-space budget of one matcher.

    The optimal-alignment matcher falls back to the greedy one when its
    score matrix would need more than ``size16`` cells.
    """

    size16: int = SLAB16_SIZE
    size32: int = SLAB32_SIZE


@dataclass
class _Scheme:
    boundary_white: int = BONUS_BOUNDARY + 2
    boundary_delimiter: int = BONUS_BOUNDARY + 1
    delimiter_chars: str = _DEFAULT_DELIMITERS
    initial_class: CharClass = CharClass.WHITE
    ascii_classes: list[CharClass] = field(default_factory=list)
    matrix: list[list[int]] = field(default_factory=list)


_scheme = _Scheme()


def _ascii_class(char: str, delimiters: str) -> CharClass:
    if "a" <= char <= "z":
        return CharClass.LOWER
    if "A" <= char <= "Z":
        return CharClass.UPPER
    if "0" <= char <= "9":
        return CharClass.NUMBER
    if char in _WHITE_CHARS:
        return CharClass.WHITE
    if char in delimiters:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def _class_of_non_ascii(char: str) -> CharClass:
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
    if char in _scheme.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def _compute_bonus(prev_class: CharClass, char_class: CharClass) -> int:
    if char_class > CharClass.NON_WORD:
        if prev_class == CharClass.WHITE:
            return _scheme.boundary_white
        if prev_class == CharClass.DELIMITER:
            return _scheme.boundary_delimiter
        if prev_class == CharClass.NON_WORD:
            return BONUS_BOUNDARY

    if (prev_class == CharClass.LOWER and char_class == CharClass.UPPER) or (
        prev_class != CharClass.NUMBER and char_class == CharClass.NUMBER
    ):
        return BONUS_CAMEL123

    if char_class in (CharClass.NON_WORD, CharClass.DELIMITER):
        return BONUS_NON_WORD
    if char_class == CharClass.WHITE:
        return _scheme.boundary_white
    return 0


def init_scheme(scheme: str) -> None:
    """Select the scoring scheme: "default", "path" or "history".

    Each call starts from the default delimiters and initial class.
    Raises ValueError for an unknown scheme and leaves the current one in place.
    """
    if scheme == "default":
        white, delimiter = BONUS_BOUNDARY + 2, BONUS_BOUNDARY + 1
        delimiters, initial = _DEFAULT_DELIMITERS, CharClass.WHITE
    elif scheme == "path":
        white, delimiter = BONUS_BOUNDARY, BONUS_BOUNDARY + 1
        delimiters = "/" if os.sep == "/" else os.sep + "/"
        initial = CharClass.DELIMITER
    elif scheme == "history":
        white, delimiter = BONUS_BOUNDARY, BONUS_BOUNDARY
        delimiters, initial = _DEFAULT_DELIMITERS, CharClass.WHITE
    else:
        raise ValueError(f"unknown scoring scheme: {scheme!r}")

    _scheme.boundary_white = white
    _scheme.boundary_delimiter = delimiter
    _scheme.delimiter_chars = delimiters
    _scheme.initial_class = initial
    _scheme.ascii_classes = [_ascii_class(chr(code), delimiters) for code in range(128)]
    _scheme.matrix = [
        [_compute_bonus(prev, current) for current in CharClass] for prev in CharClass
    ]


def boundary_white_bonus() -> int:
    """Bonus for a word boundary after whitespace or at the start of the text."""
    return _scheme.boundary_white


def initial_char_class() -> CharClass:
    """Class assumed for the position before the first character."""
    return _scheme.initial_class


def char_class_of(char: str) -> CharClass:
    """Class of a single character under the current scheme."""
    code = ord(char)
    if code < 128:
        return _scheme.ascii_classes[code]
    return _class_of_non_ascii(char)


def bonus_for(prev_class: CharClass, char_class: CharClass) -> int:
    """Bonus for a character of *char_class* that follows one of *prev_class*."""
    return _scheme.matrix[prev_class][char_class]


def bonus_at(text: str, idx: int) -> int:
    """Bonus for a match at position *idx* of *text*."""
    if idx == 0:
        return _scheme.boundary_white
    return bonus_for(char_class_of(text[idx - 1]), char_class_of(text[idx]))


def to_lower(char: str) -> str:
    """Lowercase a single character, keeping it a single character."""
    lowered = char.lower()
    return lowered[0] if lowered else char


def fold_char(char: str, case_sensitive: bool, normalize: bool) -> str:
    """Fold a text character the way patterns are prepared before matching."""
    if not case_sensitive:
        if "A" <= char <= "Z":
            char = chr(ord(char) + 32)
        elif ord(char) > 127:
            char = to_lower(char)
    if normalize:
        char = normalize_rune(char)
    return char


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    idx = text.find(char, start)
    if idx == start:
        return start
    if not case_sensitive and "a" <= char <= "z":
        limit = idx if idx >= 0 else len(text)
        upper_idx = text.find(char.upper(), start, limit)
        if upper_idx >= 0:
            idx = upper_idx
    return idx


def ascii_fuzzy_index(text: str, pattern: str, case_sensitive: bool) -> tuple[int, int]:
    """Narrow the range of *text* that can hold a fuzzy match of *pattern*.

    Returns (-1, -1) when no match is possible, and the whole text when the
    text is not ASCII.
    """
    if not text.isascii():
        return 0, len(text)
    if not pattern.isascii():
        return -1, -1

    first_idx = idx = last_idx = 0
    last_char = "\x00"
    for pidx, last_char in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, last_char, idx)
        if idx < 0:
            return -1, -1
        if pidx == 0 and idx > 0:
            # Step back to find the right bonus point
            first_idx = idx - 1
        last_idx = idx
        idx += 1

    upper = last_char
    if not case_sensitive and "a" <= last_char <= "z":
        upper = last_char.upper()
    end = max(text.rfind(last_char, last_idx + 1), text.rfind(upper, last_idx + 1))
    if end > last_idx:
        return first_idx, end + 1
    return first_idx, last_idx + 1


def calculate_score(
    case_sensitive: bool,
    normalize: bool,
    text: str,
    pattern: str,
    sidx: int,
    eidx: int,
    with_pos: bool = False,
) -> tuple[int, list[int] | None]:
    """Score the match of *pattern* laid out over text[sidx:eidx].

    Returns the score and, when *with_pos* is set, the matched positions.
    """
    pidx = score = consecutive = first_bonus = 0
    in_gap = False
    positions: list[int] | None = [] if with_pos else None
    prev_class = char_class_of(text[sidx - 1]) if sidx > 0 else _scheme.initial_class

    for idx in range(sidx, eidx):
        raw = text[idx]
        char_class = char_class_of(raw)
        char = fold_char(raw, case_sensitive, normalize)
        if char == pattern[pidx]:
            if positions is not None:
                positions.append(idx)
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
    return score, positions


init_scheme("default")