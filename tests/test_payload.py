"""Tests for BinaryPayload."""

import pytest

from id3field.errors import IoError
from id3field.payload import BinaryPayload


class TestBinaryPayload:
    """Test BinaryPayload class."""

    def test_set_and_size(self):
        payload = BinaryPayload()
        assert payload.set(b"\x00\x01\x02") == 3
        assert payload.size == 3
        assert len(payload) == 3

    def test_embedded_zero_bytes(self):
        """Test that zero bytes are content, not terminators."""
        payload = BinaryPayload(b"\x00\x00abc\x00")
        assert payload.size == 6
        assert payload.get() == b"\x00\x00abc\x00"

    def test_set_with_size_takes_prefix(self):
        payload = BinaryPayload()
        payload.set(b"abcdef", 4)
        assert payload.get() == b"abcd"

    def test_set_from_byte_list(self):
        payload = BinaryPayload()
        payload.set([0x00, 0x01, 0x02], 3)
        assert payload.get() == b"\x00\x01\x02"

    def test_get_truncates(self):
        payload = BinaryPayload(b"abcdef")
        assert payload.get(2) == b"ab"
        assert payload.get(100) == b"abcdef"

    def test_readinto(self):
        payload = BinaryPayload(b"\x00\x01\x02")
        buf = bytearray(2)
        assert payload.readinto(buf) == 2
        assert buf == bytearray(b"\x00\x01")

    def test_readinto_larger_buffer(self):
        payload = BinaryPayload(b"xy")
        buf = bytearray(5)
        assert payload.readinto(buf) == 2
        assert bytes(buf) == b"xy\x00\x00\x00"

    def test_caller_buffer_is_not_shared(self):
        source = bytearray(b"abc")
        payload = BinaryPayload(source)
        source[0] = 0x7A
        assert payload.get() == b"abc"

    def test_view_is_read_only(self):
        payload = BinaryPayload(b"abc")
        view = payload.view()
        assert bytes(view) == b"abc"
        with pytest.raises(TypeError):
            view[0] = 0

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "cover.jpg"
        payload = BinaryPayload(b"\xff\xd8\xff\xe0" + bytes(100))
        assert payload.to_file(path) == 104

        other = BinaryPayload()
        assert other.from_file(path) == 104
        assert other == payload

    def test_from_missing_file(self, tmp_path):
        payload = BinaryPayload(b"keep")
        with pytest.raises(IoError, match="Error reading"):
            payload.from_file(tmp_path / "missing.bin")
        assert payload.get() == b"keep"

    def test_to_file_in_missing_directory(self, tmp_path):
        payload = BinaryPayload(b"data")
        with pytest.raises(IoError, match="Error writing"):
            payload.to_file(tmp_path / "no" / "such" / "dir.bin")

    def test_io_error_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            BinaryPayload().from_file(tmp_path / "missing.bin")
