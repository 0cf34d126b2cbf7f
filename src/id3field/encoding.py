"""Conversion between narrow and wide text representations.

Text is held as Python strings. A *narrow* string only contains characters of
the configured narrow charset (ASCII by default, optionally ISO-8859-1); a
*wide* string may contain any character. Narrow to wide conversion is the
identity and therefore lossless. Wide to narrow conversion replaces every
character outside the narrow charset and reports that it did so.

The encode/decode helpers produce and consume the ID3v2 wire form of a single
text item for each TextEncoding.
"""

import codecs
from typing import List, NamedTuple, Optional

from .config import get_config
from .constants import CODECS, NARROW_CHARSETS, NARROW_ENCODINGS, TextEncoding
from .errors import MalformedInput


class ConversionResult(NamedTuple):
    """Converted text plus whether any character had to be replaced."""

    text: str
    lossy: bool


def is_narrow(encoding: TextEncoding) -> bool:
    return encoding in NARROW_ENCODINGS


def unit_size(encoding: TextEncoding) -> int:
    """Size in bytes of one code unit (and of the terminator)."""
    if encoding in (TextEncoding.UTF16, TextEncoding.UTF16BE):
        return 2
    return 1


def terminator(encoding: TextEncoding) -> bytes:
    return b'\x00' * unit_size(encoding)


def is_representable(text: str, charset: Optional[str] = None) -> bool:
    """Return True if every character of text fits the narrow charset."""
    limit = NARROW_CHARSETS[charset or get_config().get_narrow_charset()]
    return all(ord(c) <= limit for c in text)


def to_narrow(text: str, replacement: Optional[str] = None,
              charset: Optional[str] = None) -> ConversionResult:
    """Convert text to the narrow representation.

    Args:
        text: Text to convert
        replacement: Character substituted for unmappable characters.
            Defaults to the configured replacement.
        charset: Narrow charset ("ascii" or "latin-1"). Defaults to the
            configured charset.

    Returns:
        ConversionResult with lossy=True if any character was replaced
    """
    config = get_config()
    limit = NARROW_CHARSETS[charset or config.get_narrow_charset()]
    if all(ord(c) <= limit for c in text):
        return ConversionResult(text, False)

    if replacement is None:
        replacement = config.get_replacement()
    narrowed = ''.join(c if ord(c) <= limit else replacement for c in text)
    return ConversionResult(narrowed, True)


def to_wide(text: str) -> ConversionResult:
    """Convert text to the wide representation (always lossless)."""
    return ConversionResult(text, False)


def convert(text: str, source: TextEncoding, target: TextEncoding) -> ConversionResult:
    """Convert text held in the source encoding to the target encoding."""
    if is_narrow(target) and not is_narrow(source):
        return to_narrow(text)
    return to_wide(text)


def encode(text: str, encoding: TextEncoding) -> bytes:
    """Encode one text item to its wire form (no terminator).

    Non-empty UTF-16 items carry a byte order mark; an empty item is no
    bytes in every encoding. Narrow items are encoded with the
    configured narrow charset; anything outside it is written as the
    replacement character.
    """
    encoding = TextEncoding(encoding)
    if not text:
        return b''
    if is_narrow(encoding):
        return to_narrow(text).text.encode('latin-1')
    return text.encode(CODECS[encoding])


def decode(data: bytes, encoding: TextEncoding) -> str:
    """Decode one text item from its wire form (no terminator).

    UTF-16 data without a byte order mark is read as big-endian.

    Raises:
        MalformedInput: If data is not valid in the encoding
    """
    encoding = TextEncoding(encoding)
    data = bytes(data)
    if not data:
        return ''
    if is_narrow(encoding):
        return data.decode('latin-1')

    if len(data) % unit_size(encoding):
        raise MalformedInput(
            f"Truncated {encoding.name} text: {len(data)} bytes is not a whole number of code units"
        )

    codec = CODECS[encoding]
    if encoding == TextEncoding.UTF16 and not data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        codec = 'utf-16-be'
    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Invalid {encoding.name} text: {e}") from e


def find_terminator(data: bytes, encoding: TextEncoding, start: int = 0) -> int:
    """Return the offset of the first terminator at or after start, or -1.

    For two byte encodings only offsets aligned to a code unit boundary
    (relative to start) are considered.
    """
    width = unit_size(encoding)
    if width == 1:
        return data.find(b'\x00', start)

    term = terminator(encoding)
    for offset in range(start, len(data) - 1, width):
        if data[offset:offset + width] == term:
            return offset
    return -1


def split_items(data: bytes, encoding: TextEncoding) -> List[str]:
    """Split terminator-separated wire data into decoded items.

    Empty data holds no items. Otherwise every terminator separates two
    items, so a trailing terminator yields a trailing empty item.

    Raises:
        MalformedInput: If any item is not valid in the encoding
    """
    width = unit_size(encoding)
    items: List[str] = []
    if not data:
        return items

    start = 0
    while True:
        end = find_terminator(data, encoding, start)
        if end < 0:
            items.append(decode(data[start:], encoding))
            return items
        items.append(decode(data[start:end], encoding))
        start = end + width
