import pytest

from fuzzysift.constants import SLAB16_SIZE, SLAB32_SIZE
from fuzzysift.scoring import (
    BONUS_BOUNDARY,
    BONUS_CAMEL123,
    BONUS_FIRST_CHAR_MULTIPLIER,
    BONUS_NON_WORD,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Slab,
    ascii_fuzzy_index,
    bonus_at,
    bonus_for,
    calculate_score,
    char_class_of,
    fold_char,
    init_scheme,
    initial_char_class,
    to_lower,
)

BONUS_BOUNDARY_WHITE = BONUS_BOUNDARY + 2
BONUS_BOUNDARY_DELIMITER = BONUS_BOUNDARY + 1


@pytest.fixture
def restore_scheme():
    yield
    init_scheme("default")


def test_unknown_scheme_raises_and_keeps_state():
    with pytest.raises(ValueError):
        init_scheme("nonsense")
    assert bonus_for(CharClass.WHITE, CharClass.LOWER) == BONUS_BOUNDARY_WHITE


@pytest.mark.parametrize(
    "char, expected",
    [
        ("a", CharClass.LOWER),
        ("Z", CharClass.UPPER),
        ("5", CharClass.NUMBER),
        (" ", CharClass.WHITE),
        ("\t", CharClass.WHITE),
        ("/", CharClass.DELIMITER),
        (",", CharClass.DELIMITER),
        ("|", CharClass.DELIMITER),
        ("-", CharClass.NON_WORD),
        ("_", CharClass.NON_WORD),
    ],
)
def test_ascii_classes(char, expected):
    assert char_class_of(char) == expected


@pytest.mark.parametrize(
    "char, expected",
    [
        ("é", CharClass.LOWER),
        ("É", CharClass.UPPER),
        ("한", CharClass.LETTER),
        ("\u0663", CharClass.NUMBER),
        ("\u3000", CharClass.WHITE),
        ("→", CharClass.NON_WORD),
    ],
)
def test_non_ascii_classes(char, expected):
    assert char_class_of(char) == expected


def test_default_bonuses():
    assert bonus_for(CharClass.WHITE, CharClass.LOWER) == BONUS_BOUNDARY_WHITE
    assert bonus_for(CharClass.DELIMITER, CharClass.LOWER) == BONUS_BOUNDARY_DELIMITER
    assert bonus_for(CharClass.NON_WORD, CharClass.UPPER) == BONUS_BOUNDARY
    assert bonus_for(CharClass.LOWER, CharClass.UPPER) == BONUS_CAMEL123
    assert bonus_for(CharClass.LETTER, CharClass.NUMBER) == BONUS_CAMEL123
    assert bonus_for(CharClass.LOWER, CharClass.NON_WORD) == BONUS_NON_WORD
    assert bonus_for(CharClass.LOWER, CharClass.WHITE) == BONUS_BOUNDARY_WHITE
    assert bonus_for(CharClass.LOWER, CharClass.LOWER) == 0
    assert bonus_for(CharClass.NUMBER, CharClass.NUMBER) == 0


def test_path_scheme(restore_scheme):
    init_scheme("path")
    assert bonus_for(CharClass.WHITE, CharClass.LOWER) == BONUS_BOUNDARY
    assert bonus_for(CharClass.DELIMITER, CharClass.LOWER) == BONUS_BOUNDARY + 1
    assert char_class_of("/") == CharClass.DELIMITER
    assert char_class_of(",") == CharClass.NON_WORD
    assert initial_char_class() == CharClass.DELIMITER


def test_history_scheme(restore_scheme):
    init_scheme("history")
    assert bonus_for(CharClass.WHITE, CharClass.LOWER) == BONUS_BOUNDARY
    assert bonus_for(CharClass.DELIMITER, CharClass.LOWER) == BONUS_BOUNDARY
    assert initial_char_class() == CharClass.WHITE


def test_default_restores_after_path(restore_scheme):
    init_scheme("path")
    init_scheme("default")
    assert char_class_of(",") == CharClass.DELIMITER
    assert initial_char_class() == CharClass.WHITE


def test_bonus_at():
    assert bonus_at("abc", 0) == BONUS_BOUNDARY_WHITE
    assert bonus_at("fooBar", 3) == BONUS_CAMEL123
    assert bonus_at("foo bar", 4) == BONUS_BOUNDARY_WHITE
    assert bonus_at("foo/bar", 4) == BONUS_BOUNDARY_DELIMITER
    assert bonus_at("foobar", 2) == 0


def test_ascii_fuzzy_index_non_ascii_text():
    text = "Só Danço"
    assert ascii_fuzzy_index(text, "so", False) == (0, len(text))


@pytest.mark.parametrize(
    "text, pattern, case_sensitive",
    [
        ("foo bar baz", "fbb", False),
        ("/AutomatorDocument.icns", "rdoc", False),
        ("xFoo-Bar Baz", "foo-b", False),
        ("FooBarBaz", "FBB", True),
        ("foobar fb", "fb", False),
    ],
)
def test_ascii_fuzzy_index_contains_match(text, pattern, case_sensitive):
    lo, hi = ascii_fuzzy_index(text, pattern, case_sensitive)
    assert 0 <= lo < hi <= len(text)
    window = text[lo:hi] if case_sensitive else text[lo:hi].lower()
    remaining = iter(window)
    assert all(char in remaining for char in pattern)
    last = pattern[-1]
    haystack = text if case_sensitive else text.lower()
    assert hi == haystack.rfind(last) + 1


def test_calculate_score_prefix():
    expected = (
        SCORE_MATCH * 3
        + BONUS_BOUNDARY_WHITE * BONUS_FIRST_CHAR_MULTIPLIER
        + BONUS_BOUNDARY_WHITE * 2
    )
    score, positions = calculate_score(False, False, "fooBarbaz", "foo", 0, 3, True)
    assert score == expected
    assert positions == [0, 1, 2]
    score2, positions2 = calculate_score(False, False, "fooBarbaz", "foo", 0, 3, False)
    assert score2 == expected
    assert positions2 is None


def test_fold_char():
    assert fold_char("A", False, False) == "a"
    assert fold_char("A", True, False) == "A"
    assert fold_char("É", False, True) == "e"
    assert fold_char("É", True, True) == "E"
    assert to_lower("İ") == "i"


def test_result_and_slab_fields():
    result = MatchResult(1, 4, 30)
    assert (result.start, result.end, result.score) == (1, 4, 30)
    slab = Slab()
    assert (slab.size16, slab.size32) == (SLAB16_SIZE, SLAB32_SIZE)