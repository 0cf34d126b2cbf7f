"""Identifiers and layout constants shared by the field engine."""

from enum import IntEnum, IntFlag

from mutagen.id3 import Encoding


class FieldID(IntEnum):
    """Frame-field identifiers (what a field means inside its frame)."""

    NOFIELD = 0
    TEXTENC = 1
    TEXT = 2
    URL = 3
    DATA = 4
    DESCRIPTION = 5
    OWNER = 6
    EMAIL = 7
    RATING = 8
    FILENAME = 9
    LANGUAGE = 10
    PICTURETYPE = 11
    IMAGEFORMAT = 12
    MIMETYPE = 13
    COUNTER = 14
    ID = 15
    VOLUMEADJ = 16
    NUMBITS = 17
    VOLCHGRIGHT = 18
    VOLCHGLEFT = 19
    PEAKVOLRIGHT = 20
    PEAKVOLLEFT = 21
    TIMESTAMPFORMAT = 22
    CONTENTTYPE = 23


class TextEncoding(IntEnum):
    """ID3v2 text encoding byte, numbered as in mutagen.id3.Encoding."""

    LATIN1 = int(Encoding.LATIN1)
    UTF16 = int(Encoding.UTF16)
    UTF16BE = int(Encoding.UTF16BE)
    UTF8 = int(Encoding.UTF8)


class FieldType(IntEnum):
    """Variant tag of a field value."""

    INTEGER = 0
    ASCII_TEXT = 1
    UNICODE_TEXT = 2
    BINARY = 3


class FieldFlags(IntFlag):
    NONE = 0
    CSTR = 1  # zero-terminated on the wire
    LIST = 2  # may hold more than one item
    ENCODABLE = 4  # follows the frame's text encoding
    TEXTLIST = CSTR | LIST | ENCODABLE


class V2Spec(IntEnum):
    """ID3v2 specification revisions, ordered oldest first."""

    ID3V2_2_0 = 0
    ID3V2_2_1 = 1
    ID3V2_3_0 = 2
    ID3V2_4_0 = 3

    EARLIEST = 0
    LATEST = 3


TEXT_TYPES = (FieldType.ASCII_TEXT, FieldType.UNICODE_TEXT)

# Encodings each text kind may be switched to
NARROW_ENCODINGS = frozenset([TextEncoding.LATIN1])
WIDE_ENCODINGS = frozenset([TextEncoding.UTF16, TextEncoding.UTF16BE, TextEncoding.UTF8])
SUPPORTED_ENCODINGS = {
    FieldType.ASCII_TEXT: NARROW_ENCODINGS,
    FieldType.UNICODE_TEXT: NARROW_ENCODINGS | WIDE_ENCODINGS,
}

# Python codec names for each ID3 text encoding. LATIN1 data is read as
# ISO-8859-1 and then narrowed to the configured narrow charset.
CODECS = {
    TextEncoding.LATIN1: 'latin-1',
    TextEncoding.UTF16: 'utf-16',
    TextEncoding.UTF16BE: 'utf-16-be',
    TextEncoding.UTF8: 'utf-8',
}

# Character sets a narrow item may be restricted to, with their highest code point
NARROW_CHARSETS = {
    'ascii': 0x7F,
    'latin-1': 0xFF,
}
DEFAULT_NARROW_CHARSET = 'ascii'

UINT32_MAX = 0xFFFFFFFF
DEFAULT_INTEGER_WIDTH = 4
DEFAULT_REPLACEMENT = '?'

__all__ = [
    'FieldID',
    'FieldType',
    'FieldFlags',
    'V2Spec',
    'TextEncoding',
    'TEXT_TYPES',
    'NARROW_ENCODINGS',
    'WIDE_ENCODINGS',
    'SUPPORTED_ENCODINGS',
    'CODECS',
    'NARROW_CHARSETS',
    'DEFAULT_NARROW_CHARSET',
    'UINT32_MAX',
    'DEFAULT_INTEGER_WIDTH',
    'DEFAULT_REPLACEMENT',
]
