"""Static frame catalog: which fields make up each supported frame.

The table is built once at import time from frozen pydantic models and is
never modified afterwards. Frame descriptions and ID3v2.2 identifiers come
from mutagen's frame registry so the two libraries agree on naming.
"""

from enum import IntEnum
from typing import Dict, Iterator, Optional, Tuple

from mutagen.id3 import Frames, Frames_2_2
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import FieldFlags, FieldID, FieldType, V2Spec


class FrameID(IntEnum):
    """Frames known to the catalog."""

    NOFRAME = 0
    TITLE = 1
    LEADARTIST = 2
    BAND = 3
    ALBUM = 4
    COMPOSER = 5
    CONTENTTYPE = 6
    TRACKNUM = 7
    YEAR = 8
    RECORDINGTIME = 9
    MOOD = 10
    USERTEXT = 11
    COMMENT = 12
    UNSYNCEDLYRICS = 13
    PICTURE = 14
    GENERALOBJECT = 15
    PLAYCOUNTER = 16
    POPULARIMETER = 17
    UNIQUEFILEID = 18
    WWWARTIST = 19
    WWWUSER = 20
    PRIVATE = 21


class FieldDef(BaseModel):
    """Declared shape of one field inside a frame.

    Attributes:
        field_id: What the field means
        field_type: Variant the field holds
        fixed_size: Width in bytes for integers and fixed-size text, 0 if variable
        flags: FieldFlags bits
        spec_begin: First spec version the field exists in (None = open-ended)
        spec_end: Last spec version the field exists in (None = open-ended)
    """

    model_config = ConfigDict(frozen=True)

    field_id: FieldID
    field_type: FieldType
    fixed_size: int = Field(default=0, ge=0)
    flags: int = Field(default=0, ge=0, le=int(FieldFlags.TEXTLIST))
    spec_begin: Optional[V2Spec] = None
    spec_end: Optional[V2Spec] = None

    @model_validator(mode='after')
    def _check_shape(self) -> 'FieldDef':
        if self.spec_begin is not None and self.spec_end is not None and self.spec_begin > self.spec_end:
            raise ValueError(f"{self.field_id.name}: version range ends before it begins")
        if self.field_type == FieldType.INTEGER and self.fixed_size > 4:
            raise ValueError(f"{self.field_id.name}: integer fields are at most 4 bytes wide")
        if self.flags & FieldFlags.ENCODABLE and self.field_type != FieldType.UNICODE_TEXT:
            raise ValueError(f"{self.field_id.name}: only Unicode text fields can be encodable")
        return self

    @property
    def field_flags(self) -> FieldFlags:
        return FieldFlags(self.flags)

    def has_flag(self, flag: FieldFlags) -> bool:
        return bool(self.flags & flag)


class FrameDef(BaseModel):
    """Declared shape of one frame: its ID3v2.3/2.4 name and its fields in order."""

    model_config = ConfigDict(frozen=True)

    frame_id: FrameID
    name: str = Field(pattern=r'^[A-Z][A-Z0-9]{3}$')
    field_defs: Tuple[FieldDef, ...]
    spec_begin: Optional[V2Spec] = None
    spec_end: Optional[V2Spec] = None

    def find_field(self, field_id: FieldID) -> Optional[FieldDef]:
        for field_def in self.field_defs:
            if field_def.field_id == field_id:
                return field_def
        return None


def _textenc() -> FieldDef:
    return FieldDef(field_id=FieldID.TEXTENC, field_type=FieldType.INTEGER, fixed_size=1)


def _description() -> FieldDef:
    return FieldDef(
        field_id=FieldID.DESCRIPTION,
        field_type=FieldType.UNICODE_TEXT,
        flags=FieldFlags.CSTR | FieldFlags.ENCODABLE,
    )


def _text_frame(frame_id: FrameID, name: str, **scope) -> FrameDef:
    return FrameDef(
        frame_id=frame_id,
        name=name,
        field_defs=(
            _textenc(),
            FieldDef(
                field_id=FieldID.TEXT,
                field_type=FieldType.UNICODE_TEXT,
                flags=FieldFlags.LIST | FieldFlags.ENCODABLE,
            ),
        ),
        **scope,
    )


def _build_catalog() -> Dict[FrameID, FrameDef]:
    language = FieldDef(field_id=FieldID.LANGUAGE, field_type=FieldType.ASCII_TEXT, fixed_size=3)
    text = FieldDef(field_id=FieldID.TEXT, field_type=FieldType.UNICODE_TEXT, flags=FieldFlags.ENCODABLE)
    data = FieldDef(field_id=FieldID.DATA, field_type=FieldType.BINARY)
    owner = FieldDef(field_id=FieldID.OWNER, field_type=FieldType.ASCII_TEXT, flags=FieldFlags.CSTR)
    counter = FieldDef(field_id=FieldID.COUNTER, field_type=FieldType.INTEGER, fixed_size=4)
    mimetype = FieldDef(
        field_id=FieldID.MIMETYPE,
        field_type=FieldType.ASCII_TEXT,
        flags=FieldFlags.CSTR,
        spec_begin=V2Spec.ID3V2_3_0,
    )
    url = FieldDef(field_id=FieldID.URL, field_type=FieldType.ASCII_TEXT)

    frames = [
        _text_frame(FrameID.TITLE, 'TIT2'),
        _text_frame(FrameID.LEADARTIST, 'TPE1'),
        _text_frame(FrameID.BAND, 'TPE2'),
        _text_frame(FrameID.ALBUM, 'TALB'),
        _text_frame(FrameID.COMPOSER, 'TCOM'),
        _text_frame(FrameID.CONTENTTYPE, 'TCON'),
        _text_frame(FrameID.TRACKNUM, 'TRCK'),
        _text_frame(FrameID.YEAR, 'TYER', spec_end=V2Spec.ID3V2_3_0),
        _text_frame(FrameID.RECORDINGTIME, 'TDRC', spec_begin=V2Spec.ID3V2_4_0),
        _text_frame(FrameID.MOOD, 'TMOO', spec_begin=V2Spec.ID3V2_4_0),
        FrameDef(frame_id=FrameID.USERTEXT, name='TXXX', field_defs=(_textenc(), _description(), text)),
        FrameDef(frame_id=FrameID.COMMENT, name='COMM', field_defs=(_textenc(), language, _description(), text)),
        FrameDef(frame_id=FrameID.UNSYNCEDLYRICS, name='USLT', field_defs=(_textenc(), language, _description(), text)),
        FrameDef(
            frame_id=FrameID.PICTURE,
            name='APIC',
            field_defs=(
                _textenc(),
                FieldDef(
                    field_id=FieldID.IMAGEFORMAT,
                    field_type=FieldType.ASCII_TEXT,
                    fixed_size=3,
                    spec_end=V2Spec.ID3V2_2_1,
                ),
                mimetype,
                FieldDef(field_id=FieldID.PICTURETYPE, field_type=FieldType.INTEGER, fixed_size=1),
                _description(),
                data,
            ),
        ),
        FrameDef(
            frame_id=FrameID.GENERALOBJECT,
            name='GEOB',
            field_defs=(
                _textenc(),
                mimetype.model_copy(update={'spec_begin': None}),
                FieldDef(
                    field_id=FieldID.FILENAME,
                    field_type=FieldType.UNICODE_TEXT,
                    flags=FieldFlags.CSTR | FieldFlags.ENCODABLE,
                ),
                _description(),
                data,
            ),
        ),
        FrameDef(frame_id=FrameID.PLAYCOUNTER, name='PCNT', field_defs=(counter,)),
        FrameDef(
            frame_id=FrameID.POPULARIMETER,
            name='POPM',
            field_defs=(
                FieldDef(field_id=FieldID.EMAIL, field_type=FieldType.ASCII_TEXT, flags=FieldFlags.CSTR),
                FieldDef(field_id=FieldID.RATING, field_type=FieldType.INTEGER, fixed_size=1),
                counter,
            ),
        ),
        FrameDef(frame_id=FrameID.UNIQUEFILEID, name='UFID', field_defs=(owner, data)),
        FrameDef(frame_id=FrameID.WWWARTIST, name='WOAR', field_defs=(url,)),
        FrameDef(frame_id=FrameID.WWWUSER, name='WXXX', field_defs=(_textenc(), _description(), url)),
        FrameDef(frame_id=FrameID.PRIVATE, name='PRIV', field_defs=(owner, data), spec_begin=V2Spec.ID3V2_3_0),
    ]
    return {frame.frame_id: frame for frame in frames}


def _build_v22_names() -> Dict[str, str]:
    """Map ID3v2.3/2.4 frame names to their ID3v2.2 equivalents."""
    names: Dict[str, str] = {}
    for short, cls in Frames_2_2.items():
        for base in cls.__bases__:
            if base.__name__ in Frames:
                names.setdefault(base.__name__, short)
    return names


FRAME_DEFS: Dict[FrameID, FrameDef] = _build_catalog()
_BY_NAME: Dict[str, FrameDef] = {frame.name: frame for frame in FRAME_DEFS.values()}
_V22_NAMES: Dict[str, str] = _build_v22_names()


class FrameInfo:
    """Read-only queries against the frame catalog.

    Holds no state of its own; any number of instances may be created.
    """

    def frame_def(self, frame_id: FrameID) -> FrameDef:
        """Return the definition of a frame.

        Raises:
            KeyError: If the frame is not in the catalog
        """
        try:
            return FRAME_DEFS[FrameID(frame_id)]
        except (KeyError, ValueError):
            raise KeyError(f"Unknown frame: {frame_id!r}") from None

    def find(self, name: str) -> Optional[FrameDef]:
        """Look a frame up by its ID3v2.2, 2.3 or 2.4 name."""
        if name in _BY_NAME:
            return _BY_NAME[name]
        for long_name, short_name in _V22_NAMES.items():
            if short_name == name and long_name in _BY_NAME:
                return _BY_NAME[long_name]
        return None

    def frame_ids(self) -> Iterator[FrameID]:
        return iter(FRAME_DEFS)

    def max_frame_id(self) -> FrameID:
        return max(FRAME_DEFS)

    def short_name(self, frame_id: FrameID) -> Optional[str]:
        """Return the three character ID3v2.2 name, if the frame has one."""
        return _V22_NAMES.get(self.frame_def(frame_id).name)

    def long_name(self, frame_id: FrameID) -> str:
        """Return the four character ID3v2.3/2.4 name."""
        return self.frame_def(frame_id).name

    def name(self, frame_id: FrameID, spec: V2Spec) -> Optional[str]:
        """Return the frame name used by the given spec version."""
        if spec <= V2Spec.ID3V2_2_1:
            return self.short_name(frame_id)
        return self.long_name(frame_id)

    def description(self, frame_id: FrameID) -> str:
        cls = Frames.get(self.frame_def(frame_id).name)
        doc = (cls.__doc__ or '') if cls is not None else ''
        return doc.strip().splitlines()[0].rstrip('.') if doc.strip() else ''

    def num_fields(self, frame_id: FrameID) -> int:
        return len(self.frame_def(frame_id).field_defs)

    def field_defs(self, frame_id: FrameID) -> Tuple[FieldDef, ...]:
        return self.frame_def(frame_id).field_defs

    def field_type(self, frame_id: FrameID, field_num: int) -> FieldType:
        return self.frame_def(frame_id).field_defs[field_num].field_type

    def field_size(self, frame_id: FrameID, field_num: int) -> int:
        return self.frame_def(frame_id).field_defs[field_num].fixed_size

    def field_flags(self, frame_id: FrameID, field_num: int) -> FieldFlags:
        return self.frame_def(frame_id).field_defs[field_num].field_flags
