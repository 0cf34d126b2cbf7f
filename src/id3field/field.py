"""The field value: one typed value inside an ID3v2 frame.

A Field holds exactly one of

    INTEGER       an unsigned integer, rendered big-endian in a fixed width
    ASCII_TEXT    a list of narrow text items
    UNICODE_TEXT  a list of text items in any supported TextEncoding
    BINARY        an opaque byte buffer

The kind is fixed when the field is created. Every operation checks the kind
before touching any state and raises WrongFieldKind when it does not apply,
so a rejected call never modifies the field.

Text fields convert between encodings on demand. Reading the narrow view of
a wide item (get_raw_text) converts it once and caches the result until the
next mutation. Conversions that replace characters set
``last_conversion_lossy`` and issue a LossyConversion warning; they never fail.
"""

import logging
import warnings
from typing import Dict, List, Optional, Tuple

from .catalog import FieldDef, FrameDef, FrameID, FrameInfo
from .config import get_config
from .constants import (
    SUPPORTED_ENCODINGS,
    TEXT_TYPES,
    FieldFlags,
    FieldID,
    FieldType,
    TextEncoding,
    V2Spec,
)
from .encoding import ConversionResult, decode, encode, is_narrow, split_items, terminator, to_narrow
from .errors import LossyConversion, MalformedInput, TooManyItems, WrongFieldKind
from .payload import BinaryPayload
from .scope import field_def_in_scope, in_scope as catalog_in_scope
from .streams import Reader, Writer, read_exact, read_remaining, read_terminated, write_all
from .textlist import TextItemList

logger = logging.getLogger(__name__)

_BYTES_TYPES = (bytes, bytearray, memoryview)


class Field:
    """A single typed value within a metadata frame.

    Args:
        field_id: What the field means inside its frame
        field_type: Which variant the field holds
        fixed_size: Width in bytes of integer and fixed-size text fields
            (0 = default integer width / variable-length text)
        flags: FieldFlags controlling the wire layout
        encoding: Initial text encoding. Defaults to LATIN1 for ASCII_TEXT
            and to the configured Unicode encoding for UNICODE_TEXT.

    Fields created this way are not tied to a frame; use Field.from_def() or
    create_fields() to build fields from the frame catalog.
    """

    def __init__(self, field_id: FieldID = FieldID.NOFIELD,
                 field_type: FieldType = FieldType.INTEGER,
                 fixed_size: int = 0,
                 flags: FieldFlags = FieldFlags.NONE,
                 encoding: Optional[TextEncoding] = None):
        field_def = FieldDef(
            field_id=field_id,
            field_type=field_type,
            fixed_size=fixed_size,
            flags=int(flags),
        )
        self._init(field_def, None, False, encoding)

    @classmethod
    def from_def(cls, field_def: FieldDef, frame_def: Optional[FrameDef] = None,
                 encoding: Optional[TextEncoding] = None) -> 'Field':
        """Create a field from a catalog definition."""
        field = cls.__new__(cls)
        field._init(field_def, frame_def, True, encoding)
        return field

    def _init(self, field_def: FieldDef, frame_def: Optional[FrameDef],
              declared: bool, encoding: Optional[TextEncoding]) -> None:
        self.__def = field_def
        self.__frame_def = frame_def
        self.__declared = declared
        self.__changed = False
        self.__narrow_cache: Dict[int, ConversionResult] = {}
        self.last_conversion_lossy = False
        self.__value = self._empty_value(encoding)

    def _empty_value(self, encoding: Optional[TextEncoding] = None):
        kind = self.__def.field_type
        if kind == FieldType.INTEGER:
            return 0
        if kind == FieldType.BINARY:
            return BinaryPayload()

        if encoding is None:
            if kind == FieldType.ASCII_TEXT:
                encoding = TextEncoding.LATIN1
            else:
                encoding = get_config().get_default_unicode_encoding()
        encoding = TextEncoding(encoding)
        if encoding not in SUPPORTED_ENCODINGS[kind]:
            raise ValueError(f"{encoding.name} is not supported by {kind.name} fields")
        return TextItemList(encoding)

    def __repr__(self):
        kind = self.__def.field_type
        if kind in TEXT_TYPES:
            value = f'{self.__value.encoding.name} {list(self.__value)!r}'
        elif kind == FieldType.BINARY:
            value = f'{len(self.__value)} bytes'
        else:
            value = repr(self.__value)
        return f'Field({self.__def.field_id.name}, {kind.name}, {value})'

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return (
            self.field_id == other.field_id
            and self.field_type == other.field_type
            and self.__value == other.__value
        )

    __hash__ = None

    # Identity

    @property
    def field_id(self) -> FieldID:
        return self.__def.field_id

    @property
    def field_type(self) -> FieldType:
        return self.__def.field_type

    @property
    def field_def(self) -> FieldDef:
        return self.__def

    @property
    def frame_def(self) -> Optional[FrameDef]:
        return self.__frame_def

    def get_id(self) -> FieldID:
        return self.field_id

    def get_type(self) -> FieldType:
        return self.field_type

    @property
    def width(self) -> int:
        """Rendered width of an integer field in bytes."""
        return self.__def.fixed_size or get_config().get_default_width()

    # Kind checks

    def _require(self, operation: str, *kinds: FieldType) -> None:
        if self.__def.field_type not in kinds:
            raise WrongFieldKind(operation, self.__def.field_type, kinds)

    def _is_text(self) -> bool:
        return self.__def.field_type in TEXT_TYPES

    def _is_single_item(self) -> bool:
        """Fixed-size and terminated non-list text carry one item on the wire."""
        if self.__def.fixed_size:
            return True
        return self.__def.has_flag(FieldFlags.CSTR) and not self.__def.has_flag(FieldFlags.LIST)

    def _check_item_count(self, count: int) -> None:
        if count > 1 and self._is_single_item():
            raise TooManyItems(f"{self.field_id.name} field holds a single text item")

    def _touch(self) -> None:
        self.__changed = True
        self.__narrow_cache.clear()

    def _report(self, lossy: bool, operation: str) -> None:
        self.last_conversion_lossy = lossy
        if lossy:
            message = f"{operation}: characters of {self.field_id.name} could not be narrowed and were replaced"
            logger.debug(message)
            warnings.warn(message, LossyConversion, stacklevel=3)

    # Universal operations

    def clear(self) -> None:
        """Reset to the kind's empty state (0, no items or no bytes)."""
        kind = self.__def.field_type
        if kind == FieldType.INTEGER:
            self.__value = 0
        else:
            self.__value.clear()
        self._touch()

    @property
    def size(self) -> int:
        """Logical size: integer width, characters across all items, or byte count."""
        kind = self.__def.field_type
        if kind == FieldType.INTEGER:
            return self.width
        if kind == FieldType.BINARY:
            return len(self.__value)
        return self.__value.size

    @property
    def bin_size(self) -> int:
        """Number of bytes render() would write right now."""
        return len(self._render_bytes())

    @property
    def num_text_items(self) -> int:
        return len(self.__value) if self._is_text() else 0

    @property
    def encoding(self) -> Optional[TextEncoding]:
        """Current text encoding, or None for integer and binary fields."""
        return self.__value.encoding if self._is_text() else None

    def get_encoding(self) -> Optional[TextEncoding]:
        return self.encoding

    def is_encodable(self) -> bool:
        """Return True if the field was declared ENCODABLE (Unicode text only)."""
        return self.__def.has_flag(FieldFlags.ENCODABLE)

    def set_encoding(self, encoding: TextEncoding) -> bool:
        """Convert all items to another encoding.

        Returns:
            True if the field already uses the encoding. Otherwise False if
            the field is not encodable or does not support the requested
            encoding (the field is left untouched), True once converted
        """
        if not self._is_text():
            return False
        try:
            encoding = TextEncoding(encoding)
        except ValueError:
            return False
        if encoding == self.__value.encoding:
            return True
        if not self.is_encodable() or encoding not in SUPPORTED_ENCODINGS[self.__def.field_type]:
            logger.debug(f"{self.field_id.name}: cannot switch {self.field_type.name} field to {encoding.name}")
            return False

        lossy = self.__value.set_encoding(encoding)
        self._touch()
        self._report(lossy, 'set_encoding')
        return True

    def in_scope(self, spec: Optional[V2Spec] = None) -> bool:
        """Return True if this field applies under the given spec version.

        Without a version the configured default (scope.default_spec) is used.
        """
        if spec is None:
            spec = get_config().get_default_spec()
        if self.__declared:
            return field_def_in_scope(self.__def, spec, self.__frame_def)
        return catalog_in_scope(self.field_id, spec)

    def has_changed(self) -> bool:
        return self.__changed

    def reset_changed(self) -> None:
        """Mark the current state as consumed by the owner."""
        self.__changed = False

    def copy_from(self, other: 'Field') -> None:
        """Replace this field's value with a copy of other's value.

        Raises:
            WrongFieldKind: If other holds a different kind
            TooManyItems: If other holds several items and this field holds one
        """
        self._require('copy_from', other.field_type)
        value = other.__value
        if self._is_text():
            self._check_item_count(len(value))
        self.__value = value if isinstance(value, int) else value.copy()
        self._touch()

    # Set/get

    def set(self, value, size: Optional[int] = None) -> int:
        """Replace the field's value.

        An int sets an integer field, a str sets a text field to a single item
        (an empty str leaves no items), and a bytes-like object (or list of
        byte values) sets a binary field. For binary fields size limits how
        many bytes are taken; it is rejected for any other value.

        Returns:
            The stored value for integers, otherwise the number of characters
            or bytes stored

        Raises:
            WrongFieldKind: If the value type does not match the field kind,
                or size is given for a non-binary value
            ValueError: If an integer does not fit the field width
        """
        if isinstance(value, str):
            self._require('set(text)', *TEXT_TYPES)
            if size is not None:
                self._require('set(text, size)', FieldType.BINARY)
            lossy = self.__value.replace(value)
            self._touch()
            self._report(lossy, 'set')
            return self.__value.size

        if isinstance(value, _BYTES_TYPES) or isinstance(value, list):
            self._require('set(bytes)', FieldType.BINARY)
            count = self.__value.set(value, size)
            self._touch()
            return count

        if isinstance(value, int):
            self._require('set(int)', FieldType.INTEGER)
            if size is not None:
                self._require('set(int, size)', FieldType.BINARY)
            limit = 1 << (8 * self.width)
            if not 0 <= value < limit:
                raise ValueError(f"{value} does not fit in a {self.width} byte unsigned integer")
            self.__value = int(value)
            self._touch()
            return self.__value

        raise TypeError(f"Cannot set a field to a {type(value).__name__}")

    def add(self, text: str) -> int:
        """Append a text item, leaving existing items in place.

        Returns:
            The number of items after appending

        Raises:
            TooManyItems: If the field already holds an item and its wire
                form (fixed-size, or terminated without LIST) holds only one
        """
        self._require('add', *TEXT_TYPES)
        self._check_item_count(len(self.__value) + 1)
        lossy = self.__value.append(text)
        self._touch()
        self._report(lossy, 'add')
        return len(self.__value)

    def get(self, size: Optional[int] = None, index: Optional[int] = None):
        """Return the field's value.

        Integer fields return the integer and take no arguments.

        Text fields return one item truncated to size characters: item index,
        or the first item when no index is given (an empty string when the
        field holds no items).

        Binary fields return up to size bytes.

        Raises:
            IndexOutOfRange: If index >= num_text_items
        """
        kind = self.__def.field_type
        if kind == FieldType.INTEGER:
            if size is not None or index is not None:
                self._require('get(size, index)', *TEXT_TYPES)
            return self.__value

        if kind == FieldType.BINARY:
            if index is not None:
                self._require('get(index)', *TEXT_TYPES)
            return self.__value.get(size)

        if index is None:
            text = self.__value[0] if len(self.__value) else ''
        else:
            text = self.__value[index]
        if size is not None:
            text = text[:max(size, 0)]
        return text

    def get_items(self) -> Tuple[str, ...]:
        self._require('get_items', *TEXT_TYPES)
        return self.__value.items

    def get_raw_text(self) -> str:
        """Return the first item in the narrow representation."""
        self._require('get_raw_text', *TEXT_TYPES)
        if not len(self.__value):
            return ''
        return self.get_raw_text_item(0)

    def get_raw_text_item(self, index: int) -> str:
        """Return item index in the narrow representation.

        Wide items are converted on first access and cached until the field
        is next modified; only the converting call reports a lossy conversion.
        """
        self._require('get_raw_text_item', *TEXT_TYPES)
        item = self.__value[index]
        if is_narrow(self.__value.encoding):
            return item
        if index not in self.__narrow_cache:
            result = to_narrow(item)
            self.__narrow_cache[index] = result
            self._report(result.lossy, 'get_raw_text')
        return self.__narrow_cache[index].text

    def get_raw_unicode_text(self) -> str:
        """Return the first item in the wide representation."""
        self._require('get_raw_unicode_text', *TEXT_TYPES)
        if not len(self.__value):
            return ''
        return self.__value[0]

    def get_raw_unicode_text_item(self, index: int) -> str:
        self._require('get_raw_unicode_text_item', *TEXT_TYPES)
        return self.__value[index]

    def readinto(self, buffer, size: Optional[int] = None) -> int:
        """Copy up to size bytes (default len(buffer)) into buffer.

        Returns:
            Number of bytes written
        """
        self._require('readinto', FieldType.BINARY)
        return self.__value.readinto(buffer, size)

    def get_raw_binary(self) -> memoryview:
        """Return a read-only view of the binary contents."""
        self._require('get_raw_binary', FieldType.BINARY)
        return self.__value.view()

    def from_file(self, filename) -> int:
        """Replace the binary contents with a file's contents.

        Raises:
            IoError: If the file cannot be read
        """
        self._require('from_file', FieldType.BINARY)
        payload = BinaryPayload()
        count = payload.from_file(filename, get_config().get_buffer_size())
        self.__value = payload
        self._touch()
        return count

    def to_file(self, filename) -> int:
        """Write the binary contents to a file.

        Raises:
            IoError: If the file cannot be written
        """
        self._require('to_file', FieldType.BINARY)
        return self.__value.to_file(filename, get_config().get_buffer_size())

    # Serialisation

    def _render_bytes(self) -> bytes:
        kind = self.__def.field_type
        if kind == FieldType.INTEGER:
            return self.__value.to_bytes(self.width, 'big')
        if kind == FieldType.BINARY:
            return self.__value.get()

        fixed = self.__def.fixed_size
        if fixed:
            item = self.__value[0] if len(self.__value) else ''
            return encode(item, self.__value.encoding)[:fixed].ljust(fixed, b'\x00')
        return self.__value.render(cstr=self.__def.has_flag(FieldFlags.CSTR))

    def render(self, writer: Writer) -> None:
        """Write the field's wire form to writer.

        The field is not modified. Writer exceptions propagate unchanged.

        Raises:
            IoError: If the writer accepts fewer bytes than given
        """
        write_all(writer, self._render_bytes())

    def _parse_text(self, reader: Reader) -> List[str]:
        encoding = self.__value.encoding
        fixed = self.__def.fixed_size
        if fixed:
            data = read_exact(reader, fixed).rstrip(b'\x00')
            text = decode(data, encoding)
            return [text] if text else []
        if self._is_single_item():
            text = decode(read_terminated(reader, encoding), encoding)
            return [text] if text else []

        # Lists run to the end of the reader
        data = read_remaining(reader)
        term = terminator(encoding)
        if self.__def.has_flag(FieldFlags.CSTR) and data.endswith(term):
            data = data[:-len(term)]
        return split_items(data, encoding)

    def parse(self, reader: Reader) -> bool:
        """Replace the field's value with data read from reader.

        Text is read in the field's current encoding. On malformed or
        truncated input the field is reset to its empty state (its kind and
        encoding are kept) and False is returned. Errors raised by the reader
        itself propagate unchanged. The field is marked changed either way.

        Returns:
            True if the value was parsed successfully
        """
        self._touch()
        kind = self.__def.field_type
        try:
            if kind == FieldType.INTEGER:
                value = int.from_bytes(read_exact(reader, self.width), 'big')
            elif kind == FieldType.BINARY:
                value = BinaryPayload(read_remaining(reader))
            else:
                items = self._parse_text(reader)
                value = TextItemList(self.__value.encoding)
                lossy = [value.append(item) for item in items]
                self._report(any(lossy), 'parse')
        except MalformedInput as e:
            logger.debug(f"Failed to parse {self.field_id.name} field: {e}")
            if kind == FieldType.INTEGER:
                self.__value = 0
            else:
                self.__value.clear()
            return False

        self.__value = value
        return True


def create_fields(frame_id: FrameID, encoding: Optional[TextEncoding] = None) -> List[Field]:
    """Create fresh fields for every field of a catalog frame, in frame order.

    Raises:
        KeyError: If the frame is not in the catalog
    """
    frame_def = FrameInfo().frame_def(frame_id)
    return [
        Field.from_def(
            field_def,
            frame_def,
            encoding if field_def.has_flag(FieldFlags.ENCODABLE) else None,
        )
        for field_def in frame_def.field_defs
    ]
