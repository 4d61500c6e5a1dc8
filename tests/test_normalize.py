import pytest

from fuzzysift.normalize import normalize_rune, normalize_text


def test_source_phrase_is_folded():
    assert normalize_text("Só Danço Samba") == "So Danco Samba"


def test_danco_matches_lowercased_pattern():
    assert normalize_text("Danço").lower() == "danco"


def test_cedilla_rune():
    assert normalize_rune("ç") == "c"


@pytest.mark.parametrize("char", ["a", "Z", "0", " ", "/", "~"])
def test_ascii_rune_is_unchanged(char):
    assert normalize_rune(char) == char


@pytest.mark.parametrize("char", ["椙", "\u00d7", "\u2185", "\u00bf"])
def test_unmapped_rune_is_unchanged(char):
    assert normalize_rune(char) == char


def test_ascii_text_is_unchanged():
    text = "hello world /usr/bin 123"
    assert normalize_text(text) == text


def test_length_is_preserved():
    text = "Ắấ Ếề Ốớ Ứừ Só Danço"
    assert len(normalize_text(text)) == len(text)


def test_vietnamese_letters_become_ascii():
    result = normalize_text("ẮấẾềỐớỨừ")
    assert result.isascii()
    assert result.lower() == "aaeeoouu"


def test_normalize_is_idempotent():
    text = "Só Danço Samba ǎǝɐ ẞ ꝏ"
    once = normalize_text(text)
    assert normalize_text(once) == once


def test_text_and_rune_agree():
    text = "àéîõüçñ ĀĒĪŌŪ ẠẸỊỌỤ"
    assert normalize_text(text) == "".join(normalize_rune(c) for c in text)


def test_rune_rejects_multiple_characters():
    with pytest.raises(ValueError):
        normalize_rune("ab")


def test_rune_rejects_empty_string():
    with pytest.raises(ValueError):
        normalize_rune("")


def test_case_is_kept():
    result = normalize_text("ÁÉÍÓÚ")
    assert result.isupper()
    assert result.isascii()