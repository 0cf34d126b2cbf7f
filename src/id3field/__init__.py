"""id3field - typed ID3v2 frame fields.

A field holds an integer, a list of ASCII or Unicode text items, or a binary
blob; parses itself from a byte reader, renders itself to a byte writer and
converts text between encodings on demand.

Modules:
    field: The Field value type
    encoding: Narrow/wide text conversion and wire encoding
    textlist: Ordered text item list
    payload: Owned binary buffer
    catalog: Frame catalog and FrameInfo queries
    scope: Spec version scope policy
    streams: Reader/Writer protocols and read helpers
    config: Engine configuration
    errors: Exception types
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("id3field")
except PackageNotFoundError:
    __version__ = "unknown"

from .catalog import FRAME_DEFS, FieldDef, FrameDef, FrameID, FrameInfo
from .config import Config, get_config, set_config, setup_logging
from .constants import FieldFlags, FieldID, FieldType, TextEncoding, V2Spec
from .encoding import ConversionResult, to_narrow, to_wide
from .errors import (
    FieldError,
    IndexOutOfRange,
    IoError,
    LossyConversion,
    MalformedInput,
    TooManyItems,
    WrongFieldKind,
)
from .field import Field, create_fields
from .payload import BinaryPayload
from .scope import ScopeRange, in_scope
from .streams import BoundedReader
from .textlist import TextItemList

__all__ = [
    "Field",
    "create_fields",
    "FieldDef",
    "FrameDef",
    "FrameID",
    "FrameInfo",
    "FRAME_DEFS",
    "FieldFlags",
    "FieldID",
    "FieldType",
    "TextEncoding",
    "V2Spec",
    "ConversionResult",
    "to_narrow",
    "to_wide",
    "TextItemList",
    "BinaryPayload",
    "BoundedReader",
    "ScopeRange",
    "in_scope",
    "Config",
    "get_config",
    "set_config",
    "setup_logging",
    "FieldError",
    "WrongFieldKind",
    "IndexOutOfRange",
    "IoError",
    "MalformedInput",
    "TooManyItems",
    "LossyConversion",
]
