import pytest

from globalmenu.mnemonic import swap_mnemonic_char


def test_plain_text_is_unchanged():
    text = "Open Recent"
    assert swap_mnemonic_char(text, "_", "&") == text


def test_first_marker_becomes_mnemonic():
    assert swap_mnemonic_char("_File", "_", "&") == "&File"


def test_doubled_source_is_literal():
    assert swap_mnemonic_char("__x", "_", "&") == "_x"


def test_destination_char_is_escaped():
    assert swap_mnemonic_char("a&b", "_", "&") == "a&&b"


def test_trailing_source_is_dropped():
    text = "abc_"
    assert swap_mnemonic_char(text, "_", "&") == text[:-1]


def test_only_first_mnemonic_is_kept():
    text = "_a_b_c"
    result = swap_mnemonic_char(text, "_", "&")
    assert result.count("&") == 1
    assert result.startswith("&")
    assert result.replace("&", "") == text.replace("_", "")


@pytest.mark.parametrize("text", ["_File", "E_dit", "Help", "Save _As", "View_"[:-1]])
def test_round_trip(text):
    there = swap_mnemonic_char(text, "_", "&")
    assert swap_mnemonic_char(there, "&", "_") == text


def test_empty_string():
    assert swap_mnemonic_char("", "_", "&") == ""


@pytest.mark.parametrize("src,dst", [("", "&"), ("__", "&"), ("_", ""), ("_", "&&")])
def test_markers_must_be_single_characters(src, dst):
    with pytest.raises(ValueError):
        swap_mnemonic_char("_File", src, dst)