"""Tests for the narrow/wide encoding converter."""

import pytest

from id3field.constants import TextEncoding
from id3field.encoding import (
    convert,
    decode,
    encode,
    find_terminator,
    is_representable,
    split_items,
    terminator,
    to_narrow,
    to_wide,
    unit_size,
)
from id3field.errors import MalformedInput


class TestConversion:
    """Test narrow/wide conversion."""

    def test_narrow_text_is_unchanged(self):
        """Test that representable text converts without loss."""
        result = to_narrow("Hello, World")
        assert result.text == "Hello, World"
        assert result.lossy is False

    def test_unmappable_character_is_replaced(self):
        """Test that characters outside ASCII are replaced and reported."""
        result = to_narrow("café")
        assert result.text == "caf?"
        assert result.lossy is True

    def test_one_replacement_per_character(self):
        """Test that characters outside the BMP count as one character."""
        result = to_narrow("a😀b")
        assert result.text == "a?b"
        assert result.lossy is True

    def test_custom_replacement(self):
        """Test passing an explicit replacement character."""
        assert to_narrow("日本", replacement="*").text == "**"

    def test_configured_replacement(self, isolated_config):
        """Test that the configured replacement character is used."""
        isolated_config.set_replacement("_")
        assert to_narrow("naïve").text == "na_ve"

    def test_latin1_charset_keeps_accents(self, isolated_config):
        """Test that ISO-8859-1 characters survive with the latin-1 charset."""
        isolated_config.set_narrow_charset("latin-1")
        result = to_narrow("café")
        assert result.text == "café"
        assert result.lossy is False
        assert to_narrow("日本").lossy is True

    def test_wide_conversion_is_lossless(self):
        """Test that narrow to wide never reports loss."""
        result = to_wide("caf?")
        assert result.text == "caf?"
        assert result.lossy is False

    def test_convert_between_encodings(self):
        """Test convert() picks the direction from the encodings."""
        assert convert("日本", TextEncoding.UTF16, TextEncoding.LATIN1).lossy is True
        assert convert("日本", TextEncoding.UTF16, TextEncoding.UTF8) == ("日本", False)
        assert convert("abc", TextEncoding.LATIN1, TextEncoding.UTF16BE) == ("abc", False)

    def test_lossless_round_trip(self):
        """Test A->B->A is the identity for representable text."""
        text = "Plain ASCII title"
        narrow = convert(text, TextEncoding.UTF16, TextEncoding.LATIN1)
        wide = convert(narrow.text, TextEncoding.LATIN1, TextEncoding.UTF16)
        assert wide.text == text
        assert not narrow.lossy and not wide.lossy

    def test_lossy_round_trip(self):
        """Test A->B->A differs when text is not representable."""
        text = "Sigur Rós"
        narrow = convert(text, TextEncoding.UTF8, TextEncoding.LATIN1)
        wide = convert(narrow.text, TextEncoding.LATIN1, TextEncoding.UTF8)
        assert wide.text != text
        assert narrow.lossy is True
        assert wide.lossy is False

    def test_is_representable(self):
        assert is_representable("abc")
        assert not is_representable("é")
        assert is_representable("é", charset="latin-1")


class TestWireForm:
    """Test encode/decode of single items."""

    def test_unit_sizes(self):
        assert unit_size(TextEncoding.LATIN1) == 1
        assert unit_size(TextEncoding.UTF8) == 1
        assert unit_size(TextEncoding.UTF16) == 2
        assert unit_size(TextEncoding.UTF16BE) == 2
        assert terminator(TextEncoding.UTF16) == b"\x00\x00"
        assert terminator(TextEncoding.LATIN1) == b"\x00"

    def test_encode_latin1_narrows(self):
        """Test that narrow encoding writes the replacement byte."""
        assert encode("abc", TextEncoding.LATIN1) == b"abc"
        assert encode("café", TextEncoding.LATIN1) == b"caf?"

    def test_encode_utf16_has_bom(self):
        data = encode("A", TextEncoding.UTF16)
        assert data[:2] in (b"\xff\xfe", b"\xfe\xff")
        assert len(data) == 4

    def test_encode_utf16be(self):
        assert encode("A", TextEncoding.UTF16BE) == b"\x00A"

    def test_encode_utf8(self):
        assert encode("é", TextEncoding.UTF8) == b"\xc3\xa9"

    def test_decode_round_trip(self):
        for enc in (TextEncoding.UTF16, TextEncoding.UTF16BE, TextEncoding.UTF8):
            assert decode(encode("Björk 日本", enc), enc) == "Björk 日本"

    def test_decode_utf16_with_bom(self):
        assert decode(b"\xff\xfeA\x00", TextEncoding.UTF16) == "A"
        assert decode(b"\xfe\xff\x00A", TextEncoding.UTF16) == "A"

    def test_decode_utf16_without_bom_is_big_endian(self):
        assert decode(b"\x00A\x00B", TextEncoding.UTF16) == "AB"

    def test_decode_latin1_never_fails(self):
        assert decode(bytes(range(0x20, 0x100)), TextEncoding.LATIN1)[0] == " "

    def test_decode_odd_utf16_is_malformed(self):
        with pytest.raises(MalformedInput, match="Truncated"):
            decode(b"\x00A\x00", TextEncoding.UTF16BE)

    def test_decode_invalid_utf8_is_malformed(self):
        with pytest.raises(MalformedInput):
            decode(b"\xff\xfe\xfd", TextEncoding.UTF8)

    def test_decode_truncated_surrogate_is_malformed(self):
        with pytest.raises(MalformedInput):
            decode(b"\xd8\x3d", TextEncoding.UTF16BE)

    def test_decode_empty(self):
        assert decode(b"", TextEncoding.UTF16) == ""


class TestTerminators:
    """Test terminator search and item splitting."""

    def test_find_single_byte_terminator(self):
        assert find_terminator(b"ab\x00cd", TextEncoding.LATIN1) == 2
        assert find_terminator(b"abcd", TextEncoding.UTF8) == -1

    def test_find_aligned_terminator(self):
        """Test that only aligned double zeros terminate UTF-16 text."""
        assert find_terminator(b"\x00A\x00\x00", TextEncoding.UTF16BE) == 2
        assert find_terminator(b"A\x00\x00B", TextEncoding.UTF16BE) == -1

    def test_split_items(self):
        assert split_items(b"a\x00b", TextEncoding.LATIN1) == ["a", "b"]
        assert split_items(b"", TextEncoding.LATIN1) == []
        assert split_items(b"a\x00", TextEncoding.LATIN1) == ["a", ""]

    def test_split_utf16_items(self):
        data = b"\x00A\x00\x00\x00B"
        assert split_items(data, TextEncoding.UTF16BE) == ["A", "B"]
