"""Byte stream collaborators used by Field.parse() and Field.render().

Any binary file object satisfies these protocols (io.BytesIO, open(..., 'rb')).
A read returning fewer bytes than requested means end of input; errors are
raised as OSError and are never caught here.
"""

from typing import Optional, Protocol

from .constants import TextEncoding
from .encoding import terminator, unit_size
from .errors import IoError, MalformedInput


class Reader(Protocol):
    def read(self, size: int = -1) -> bytes:
        ...


class Writer(Protocol):
    def write(self, data: bytes) -> Optional[int]:
        ...


class BoundedReader:
    """Limit a reader to the next limit bytes (e.g. one frame body)."""

    def __init__(self, reader: Reader, limit: int):
        if limit < 0:
            raise ValueError(f"Limit cannot be negative: {limit}")
        self.reader = reader
        self.remaining = limit

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0 or size > self.remaining:
            size = self.remaining
        if size == 0:
            return b''
        data = self.reader.read(size)
        self.remaining -= len(data)
        return data


def read_exact(reader: Reader, size: int) -> bytes:
    """Read exactly size bytes.

    Raises:
        MalformedInput: If the input ends first
    """
    data = reader.read(size) if size else b''
    if len(data) < size:
        raise MalformedInput(f"Unexpected end of input: expected {size} bytes, got {len(data)}")
    return data


def read_remaining(reader: Reader) -> bytes:
    return reader.read()


def read_terminated(reader: Reader, encoding: TextEncoding) -> bytes:
    """Read one code unit at a time up to (and consuming) a terminator.

    Returns:
        The data before the terminator

    Raises:
        MalformedInput: If the input ends before a terminator
    """
    width = unit_size(encoding)
    term = terminator(encoding)
    data = bytearray()
    while True:
        unit = reader.read(width)
        if len(unit) < width:
            raise MalformedInput(
                f"Unexpected end of input: unterminated {TextEncoding(encoding).name} string after {len(data)} bytes"
            )
        if unit == term:
            return bytes(data)
        data += unit


def write_all(writer: Writer, data: bytes) -> None:
    """Write data, treating a short write as a failure.

    Raises:
        IoError: If the writer reports fewer bytes written than given
    """
    written = writer.write(data)
    if written is not None and written != len(data):
        raise IoError(f"Short write: {written} of {len(data)} bytes written")
