"""Pytest configuration and fixtures."""

import io

import pytest

from id3field.config import Config, set_config
from id3field.constants import FieldFlags, FieldID, FieldType, TextEncoding
from id3field.field import Field


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """Give every test a fresh default configuration that never touches ~/.id3field."""
    config = Config(config_path=tmp_path / "config.toml", load=False)
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def integer_field():
    return Field(FieldID.COUNTER, FieldType.INTEGER, fixed_size=4)


@pytest.fixture
def ascii_field():
    return Field(FieldID.URL, FieldType.ASCII_TEXT)


@pytest.fixture
def unicode_field():
    return Field(
        FieldID.TEXT,
        FieldType.UNICODE_TEXT,
        flags=FieldFlags.LIST | FieldFlags.ENCODABLE,
        encoding=TextEncoding.UTF16,
    )


@pytest.fixture
def binary_field():
    return Field(FieldID.DATA, FieldType.BINARY)


class ShortWriter:
    """Writer that accepts at most limit bytes per call."""

    def __init__(self, limit):
        self.limit = limit
        self.data = bytearray()

    def write(self, data):
        accepted = bytes(data[:self.limit])
        self.data += accepted
        return len(accepted)


class FailingStream:
    """Reader/writer whose every call raises OSError."""

    def read(self, size=-1):
        raise OSError("device not ready")

    def write(self, data):
        raise OSError("disk full")


@pytest.fixture
def short_writer():
    return ShortWriter(limit=2)


@pytest.fixture
def failing_stream():
    return FailingStream()


@pytest.fixture
def render_bytes():
    """Return a function rendering a field to bytes."""

    def render(field):
        out = io.BytesIO()
        field.render(out)
        return out.getvalue()

    return render
